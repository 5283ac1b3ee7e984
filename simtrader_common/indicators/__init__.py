"""
Technical indicators module for SimTrader.

모든 함수는 순수 함수이며 과거 -> 최신 순서의 시퀀스를 입력으로 받습니다.
"""

from .base import to_series, round_value
from .trend import calculate_sma, calculate_ema, calculate_macd, MACDResult
from .momentum import calculate_rsi, calculate_stochastic, StochasticResult
from .volatility import calculate_bollinger, calculate_atr, BollingerBands
from .snapshot import calculate_all_indicators, IndicatorSnapshot

__all__ = [
    'to_series',
    'round_value',
    'calculate_sma',
    'calculate_ema',
    'calculate_macd',
    'MACDResult',
    'calculate_rsi',
    'calculate_stochastic',
    'StochasticResult',
    'calculate_bollinger',
    'calculate_atr',
    'BollingerBands',
    'calculate_all_indicators',
    'IndicatorSnapshot',
]
