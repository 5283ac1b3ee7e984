"""
Configuration package for simtrader
"""

from core.config.constants import (
    TRADING_DAYS_PER_YEAR,
    MIN_HISTORY_DAYS,
    RSI_PERIOD,
    SHORT_SMA_PERIOD,
    LONG_SMA_PERIOD,
)

__all__ = [
    'TRADING_DAYS_PER_YEAR',
    'MIN_HISTORY_DAYS',
    'RSI_PERIOD',
    'SHORT_SMA_PERIOD',
    'LONG_SMA_PERIOD',
]
