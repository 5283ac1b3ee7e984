"""
Momentum indicators module.
"""

from dataclasses import dataclass
from typing import Sequence

from .base import to_series, align, seeded_ewm, round_value

# 데이터 부족 시 중립값
NEUTRAL_RSI = 50.0
NEUTRAL_STOCHASTIC = 50.0


@dataclass(frozen=True)
class StochasticResult:
    """스토캐스틱 결과"""
    k: float
    d: float


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """RSI (Relative Strength Index) 계산

    첫 period개 변화량의 단순평균으로 평균 상승/하락폭을 시작하고,
    이후 변화량에는 Wilder 평활화를 적용합니다.

    Args:
        prices: 종가 시퀀스 (과거 -> 최신)
        period: RSI 계산 기간

    Returns:
        float: 0~100 사이 RSI 값.
            데이터가 period+1개 미만이면 50, 평균 하락폭이 0이면 100
    """
    close = to_series(prices)
    if len(close) < period + 1:
        return NEUTRAL_RSI

    # 가격 변화 (첫 값은 NaN)
    delta = close.diff().iloc[1:]
    gain = delta.where(delta > 0, 0.0)
    loss = -delta.where(delta < 0, 0.0)

    # Wilder 평활화 (alpha = 1/period)
    avg_gain = float(seeded_ewm(gain, period, 1 / period).iloc[-1])
    avg_loss = float(seeded_ewm(loss, period, 1 / period).iloc[-1])

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return round_value(100 - 100 / (1 + rs))


def calculate_stochastic(
    high: Sequence[float],
    low: Sequence[float],
    close: Sequence[float],
    k_period: int = 14,
    d_period: int = 3
) -> StochasticResult:
    """스토캐스틱 계산

    Args:
        high: 고가 시퀀스
        low: 저가 시퀀스
        close: 종가 시퀀스
        k_period: %K 기간
        d_period: %D 기간 (%K의 단순평균)

    Returns:
        StochasticResult: 데이터 부족 시 (50, 50)
    """
    highs, lows, closes = align(to_series(high), to_series(low), to_series(close))
    if len(closes) < k_period:
        return StochasticResult(k=NEUTRAL_STOCHASTIC, d=NEUTRAL_STOCHASTIC)

    highest_high = highs.rolling(window=k_period).max()
    lowest_low = lows.rolling(window=k_period).min()
    price_range = highest_high - lowest_low

    k_line = ((closes - lowest_low) / price_range * 100).where(price_range != 0, NEUTRAL_STOCHASTIC)
    k_line = k_line.iloc[k_period - 1:]

    k = float(k_line.iloc[-1])
    d = float(k_line.tail(d_period).mean())
    return StochasticResult(k=round_value(k), d=round_value(d))
