"""
Trend indicators module.
"""

import pandas as pd
from dataclasses import dataclass
from typing import Sequence

from .base import to_series, seeded_ewm, round_value


@dataclass(frozen=True)
class MACDResult:
    """MACD 결과"""
    macd: float
    signal: float
    histogram: float


def _ema_series(values: pd.Series, period: int) -> pd.Series:
    """EMA 시계열 계산

    첫 period개의 SMA로 시작하여 이후 값에 승수 2/(period+1)을 적용합니다.
    반환 Series는 values[period-1] 시점부터 시작합니다.
    """
    return seeded_ewm(values, period, 2 / (period + 1))


def calculate_sma(prices: Sequence[float], period: int) -> float:
    """단순이동평균 (SMA)

    Args:
        prices: 가격 시퀀스 (과거 -> 최신)
        period: 기간

    Returns:
        float: 최근 period개 값의 평균. 데이터가 부족하면 마지막 가격
    """
    close = to_series(prices)
    if len(close) < period:
        return round_value(close.iloc[-1])
    return round_value(close.rolling(window=period).mean().iloc[-1])


def calculate_ema(prices: Sequence[float], period: int) -> float:
    """지수이동평균 (EMA)

    Args:
        prices: 가격 시퀀스 (과거 -> 최신)
        period: 기간

    Returns:
        float: EMA 값. 데이터가 부족하면 마지막 가격
    """
    close = to_series(prices)
    if len(close) < period:
        return round_value(close.iloc[-1])
    return round_value(_ema_series(close, period).iloc[-1])


def calculate_macd(
    prices: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9
) -> MACDResult:
    """MACD 계산

    MACD 라인은 EMA(fast) - EMA(slow) 시계열이고,
    시그널 라인은 MACD 시계열의 EMA(signal)입니다.

    Args:
        prices: 가격 시퀀스
        fast_period: 단기 EMA 기간
        slow_period: 장기 EMA 기간
        signal_period: 시그널 기간

    Returns:
        MACDResult: 데이터 부족 시 모두 0
    """
    close = to_series(prices)
    if len(close) < slow_period + signal_period:
        return MACDResult(macd=0.0, signal=0.0, histogram=0.0)

    fast_ema = _ema_series(close, fast_period)
    slow_ema = _ema_series(close, slow_period)

    # 인덱스 정렬로 slow 시작 시점부터만 남음
    macd_line = (fast_ema - slow_ema).dropna()
    signal_line = _ema_series(macd_line, signal_period)

    macd = float(macd_line.iloc[-1])
    signal = float(signal_line.iloc[-1])

    return MACDResult(
        macd=round_value(macd),
        signal=round_value(signal),
        histogram=round_value(macd - signal)
    )
