"""
백테스트 시그널 생성 모듈

지표 스냅샷에 평균회귀/모멘텀 규칙을 적용하여 매매 시그널을 생성합니다.
생성기는 상태를 갖지 않으므로 여러 실행에서 공유할 수 있습니다.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence, Dict, Any

from core.backtest.config import StrategyMode
from core.config.constants import RSI_PERIOD, SHORT_SMA_PERIOD, LONG_SMA_PERIOD
from core.utils.log_utils import get_logger
from simtrader_common.indicators import calculate_rsi, calculate_sma

logger = get_logger(__name__)

MEAN_REVERSION = "mean_reversion"
MOMENTUM = "momentum"


class SignalAction(Enum):
    """시그널 유형"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class MarketSnapshot:
    """한 종목, 한 시점의 가격과 지표"""
    symbol: str
    price: float
    volume: float = 0
    rsi: Optional[float] = None
    sma20: Optional[float] = None
    sma50: Optional[float] = None


@dataclass(frozen=True)
class Signal:
    """거래 시그널"""
    symbol: str
    action: SignalAction
    confidence: float                # 신뢰도 (0~1)
    reason: str
    timestamp: date                  # 시뮬레이션 날짜
    price: float                     # 시그널 발생 시점 가격
    target_price: Optional[float] = None
    stop_loss: Optional[float] = None
    strategy: str = ""               # 시그널을 만든 규칙

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'action': self.action.value,
            'confidence': float(self.confidence),
            'reason': self.reason,
            'timestamp': self.timestamp.isoformat(),
            'price': float(self.price),
            'target_price': float(self.target_price) if self.target_price is not None else None,
            'stop_loss': float(self.stop_loss) if self.stop_loss is not None else None,
            'strategy': self.strategy,
        }


def build_snapshot(
    symbol: str,
    closes: Sequence[float],
    volume: float = 0
) -> MarketSnapshot:
    """종가 이력(과거 -> 최신)으로 스냅샷 생성

    최신 종가가 스냅샷 가격이 됩니다.
    """
    return MarketSnapshot(
        symbol=symbol,
        price=float(closes[-1]),
        volume=volume,
        rsi=calculate_rsi(closes, RSI_PERIOD),
        sma20=calculate_sma(closes, SHORT_SMA_PERIOD),
        sma50=calculate_sma(closes, LONG_SMA_PERIOD),
    )


class SignalGenerator:
    """규칙 기반 시그널 생성기"""

    def __init__(self, mode: StrategyMode = StrategyMode.BOTH):
        self.mode = StrategyMode(mode)

    def generate(self, snapshots: Sequence[MarketSnapshot], as_of: date) -> List[Signal]:
        """
        스냅샷 목록에서 시그널 생성

        both 모드는 스냅샷마다 평균회귀, 모멘텀 순으로 평가하며 중복을 제거하지 않습니다.

        Args:
            snapshots: 종목별 스냅샷
            as_of: 시뮬레이션 날짜 (시그널 timestamp)

        Returns:
            Signal 리스트
        """
        signals = []
        for snapshot in snapshots:
            if self.mode in (StrategyMode.MEAN_REVERSION, StrategyMode.BOTH):
                signal = self._mean_reversion(snapshot, as_of)
                if signal:
                    signals.append(signal)
            if self.mode in (StrategyMode.MOMENTUM, StrategyMode.BOTH):
                signal = self._momentum(snapshot, as_of)
                if signal:
                    signals.append(signal)
        return signals

    @staticmethod
    def _mean_reversion(snapshot: MarketSnapshot, as_of: date) -> Optional[Signal]:
        """RSI 과매도/과매수"""
        rsi = snapshot.rsi
        if rsi is None:
            return None

        price = snapshot.price
        if rsi < 30:
            return Signal(
                symbol=snapshot.symbol,
                action=SignalAction.BUY,
                confidence=round(min(abs(rsi - 30) / 20, 1.0), 2),
                reason=f"RSI oversold at {rsi:.2f}",
                timestamp=as_of,
                price=price,
                target_price=price * 1.05,
                stop_loss=price * 0.97,
                strategy=MEAN_REVERSION,
            )
        if rsi > 70:
            return Signal(
                symbol=snapshot.symbol,
                action=SignalAction.SELL,
                confidence=round(min(abs(rsi - 70) / 20, 1.0), 2),
                reason=f"RSI overbought at {rsi:.2f}",
                timestamp=as_of,
                price=price,
                target_price=price * 0.95,
                stop_loss=price * 1.03,
                strategy=MEAN_REVERSION,
            )
        return None

    @staticmethod
    def _momentum(snapshot: MarketSnapshot, as_of: date) -> Optional[Signal]:
        """이동평균 골든/데드 크로스"""
        sma20, sma50 = snapshot.sma20, snapshot.sma50
        if sma20 is None or sma50 is None:
            return None

        price = snapshot.price
        if sma20 > sma50 and price > sma20:
            return Signal(
                symbol=snapshot.symbol,
                action=SignalAction.BUY,
                confidence=0.65,
                reason="Golden cross detected",
                timestamp=as_of,
                price=price,
                target_price=price * 1.08,
                stop_loss=price * 0.95,
                strategy=MOMENTUM,
            )
        if sma20 < sma50 and price < sma20:
            return Signal(
                symbol=snapshot.symbol,
                action=SignalAction.SELL,
                confidence=0.65,
                reason="Death cross detected",
                timestamp=as_of,
                price=price,
                target_price=price * 0.92,
                stop_loss=price * 1.05,
                strategy=MOMENTUM,
            )
        return None
