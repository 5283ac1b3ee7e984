"""
Combined indicator snapshot module.
"""

from dataclasses import dataclass
from typing import Sequence, Mapping, Any

from .trend import calculate_sma, calculate_ema, calculate_macd, MACDResult
from .momentum import calculate_rsi, calculate_stochastic, StochasticResult
from .volatility import calculate_bollinger, calculate_atr, BollingerBands


@dataclass(frozen=True)
class IndicatorSnapshot:
    """한 시점의 전체 기술지표"""
    rsi: float
    sma20: float
    sma50: float
    sma200: float
    ema12: float
    ema26: float
    bollinger: BollingerBands
    macd: MACDResult
    atr: float
    stochastic: StochasticResult


def _field(bar: Any, name: str) -> float:
    """dict 또는 속성 객체에서 값 추출"""
    if isinstance(bar, Mapping):
        return float(bar[name])
    return float(getattr(bar, name))


def calculate_all_indicators(bars: Sequence[Any]) -> IndicatorSnapshot:
    """OHLCV 바 시퀀스로부터 모든 지표를 한 번에 계산

    Args:
        bars: open/high/low/close/volume 을 가진 dict 또는 객체 시퀀스 (과거 -> 최신)

    Returns:
        IndicatorSnapshot: 최신 시점의 지표 값
    """
    closes = [_field(bar, 'close') for bar in bars]
    highs = [_field(bar, 'high') for bar in bars]
    lows = [_field(bar, 'low') for bar in bars]

    return IndicatorSnapshot(
        rsi=calculate_rsi(closes, 14),
        sma20=calculate_sma(closes, 20),
        sma50=calculate_sma(closes, 50),
        sma200=calculate_sma(closes, 200),
        ema12=calculate_ema(closes, 12),
        ema26=calculate_ema(closes, 26),
        bollinger=calculate_bollinger(closes, 20, 2.0),
        macd=calculate_macd(closes, 12, 26, 9),
        atr=calculate_atr(highs, lows, closes, 14),
        stochastic=calculate_stochastic(highs, lows, closes, 14, 3),
    )
