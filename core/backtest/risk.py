"""
리스크 필터 모듈

신뢰도와 손익비 기준으로 시그널을 승인/거부합니다.
모든 필터는 상태가 없으며 시그널을 변경하지 않습니다.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from core.backtest.strategy import Signal
from core.config import settings
from core.utils.log_utils import get_logger

logger = get_logger(__name__)


class RiskAssessor(ABC):
    """리스크 평가 인터페이스"""

    @abstractmethod
    def assess_risk(self, signals: Sequence[Signal]) -> List[Signal]:
        """승인된 시그널만 입력 순서대로 반환"""


class RiskFilter(RiskAssessor):
    """신뢰도 / 손익비 필터"""

    def __init__(
        self,
        min_confidence: Optional[float] = None,
        min_risk_reward: Optional[float] = None
    ):
        self.min_confidence = settings.MIN_CONFIDENCE if min_confidence is None else min_confidence
        self.min_risk_reward = settings.MIN_RISK_REWARD if min_risk_reward is None else min_risk_reward

    def rejection_reasons(self, signal: Signal) -> List[str]:
        """거부 사유 목록 (비어 있으면 승인)"""
        reasons = []
        if signal.confidence < self.min_confidence:
            reasons.append(
                f"confidence {signal.confidence:.2f} < {self.min_confidence:.2f}"
            )

        if signal.target_price is not None and signal.stop_loss is not None:
            reward = abs(signal.target_price - signal.price)
            risk = abs(signal.price - signal.stop_loss)
            # 손절 거리 0은 무한대 손익비로 취급
            if risk > 0 and reward / risk < self.min_risk_reward:
                reasons.append(
                    f"risk/reward {reward / risk:.2f} < {self.min_risk_reward:.2f}"
                )
        return reasons

    def assess_risk(self, signals: Sequence[Signal]) -> List[Signal]:
        approved = []
        for signal in signals:
            reasons = self.rejection_reasons(signal)
            if reasons:
                logger.warning(
                    f"시그널 거부: {signal.symbol} {signal.action.value} "
                    f"({signal.strategy}) - {', '.join(reasons)}"
                )
                continue
            approved.append(signal)
        return approved


class PassThroughRiskFilter(RiskAssessor):
    """모든 시그널 승인"""

    def assess_risk(self, signals: Sequence[Signal]) -> List[Signal]:
        return list(signals)


class CompositeRiskFilter(RiskAssessor):
    """여러 평가기를 순서대로 적용"""

    def __init__(self, assessors: Sequence[RiskAssessor]):
        self.assessors = list(assessors)

    def assess_risk(self, signals: Sequence[Signal]) -> List[Signal]:
        approved = list(signals)
        for assessor in self.assessors:
            if not approved:
                break
            approved = assessor.assess_risk(approved)
        return approved
