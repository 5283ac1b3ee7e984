"""
Volatility indicators module.
"""

import pandas as pd
from dataclasses import dataclass
from typing import Sequence

from .base import to_series, align, round_value


@dataclass(frozen=True)
class BollingerBands:
    """볼린저 밴드 결과"""
    upper: float
    middle: float
    lower: float


def calculate_bollinger(
    prices: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0
) -> BollingerBands:
    """볼린저 밴드 계산

    Args:
        prices: 가격 시퀀스
        period: 이동평균 기간
        std_dev: 표준편차 승수

    Returns:
        BollingerBands: 데이터 부족 시 마지막 가격의 평평한 밴드
    """
    close = to_series(prices)
    if len(close) < period:
        last_price = round_value(close.iloc[-1])
        return BollingerBands(upper=last_price, middle=last_price, lower=last_price)

    middle = float(close.rolling(window=period).mean().iloc[-1])
    # 모집단 표준편차 (ddof=0)
    deviation = float(close.rolling(window=period).std(ddof=0).iloc[-1])

    return BollingerBands(
        upper=round_value(middle + std_dev * deviation),
        middle=round_value(middle),
        lower=round_value(middle - std_dev * deviation)
    )


def calculate_atr(
    high: Sequence[float],
    low: Sequence[float],
    close: Sequence[float],
    period: int = 14
) -> float:
    """ATR (Average True Range) 계산

    Args:
        high: 고가 시퀀스
        low: 저가 시퀀스
        close: 종가 시퀀스
        period: ATR 계산 기간

    Returns:
        float: 최근 period개 True Range의 평균. 데이터 부족 시 0
    """
    highs, lows, closes = align(to_series(high), to_series(low), to_series(close))
    if len(closes) < period + 1:
        return 0.0

    prev_close = closes.shift(1)
    true_range = pd.concat([
        highs - lows,
        (highs - prev_close).abs(),
        (lows - prev_close).abs(),
    ], axis=1).max(axis=1).iloc[1:]

    return round_value(true_range.rolling(window=period).mean().iloc[-1])
