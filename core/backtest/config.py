"""
백테스트 설정 모듈

대상 심볼, 전략 모드, 기간, 자본금과 포지션/비용 설정을 정의합니다.
설정은 실행 동안 변경되지 않습니다 (frozen).
"""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Optional, Dict, Any, List, Sequence, Tuple
from enum import Enum

from pydantic import ValidationError

from core.config import settings
from core.config.constants import MIN_HISTORY_DAYS
from core.exceptions import InvalidConfigError
from core.models.validators import BacktestRequest


class StrategyMode(Enum):
    """전략 모드 (실행할 규칙 집합)"""
    MEAN_REVERSION = "mean_reversion"
    MOMENTUM = "momentum"
    BOTH = "both"

    @classmethod
    def values(cls) -> List[str]:
        return [m.value for m in cls]


@dataclass(frozen=True)
class BacktestConfig:
    """백테스트 설정"""
    symbols: Tuple[str, ...] = ()
    strategy: str = StrategyMode.BOTH.value
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # 자본/포지션 설정
    initial_capital: float = 100_000          # 초기 자본금
    position_size_percent: float = 10         # 거래당 자본 비율 (%)

    # 비용 설정
    commission_percent: float = 0.1           # 수수료 (%)
    slippage_percent: float = 0.05            # 슬리피지 (%)

    # 실행 설정
    interval: str = "day"                     # 데이터 주기
    min_history: int = MIN_HISTORY_DAYS       # 지표 계산 최소 과거 데이터 수
    name: str = "Backtest"

    def __post_init__(self):
        # 불변 튜플로 정규화, 중복 심볼은 처음 위치만 유지
        object.__setattr__(self, 'symbols', tuple(dict.fromkeys(self.symbols)))
        if isinstance(self.strategy, StrategyMode):
            object.__setattr__(self, 'strategy', self.strategy.value)

    @property
    def strategy_mode(self) -> StrategyMode:
        return StrategyMode(self.strategy)

    def validate(self) -> None:
        """설정 검증

        Raises:
            InvalidConfigError: 하나 이상의 검증 실패
        """
        errors = []
        if not self.symbols or not all(s and s.strip() for s in self.symbols):
            errors.append("심볼이 최소 1개 필요합니다")
        if self.strategy not in StrategyMode.values():
            errors.append(
                f"지원하지 않는 전략입니다: {self.strategy} "
                f"(mean_reversion, momentum, both 중 하나)"
            )
        if self.start_date is None or self.end_date is None:
            errors.append("시작일과 종료일이 필요합니다")
        elif self.start_date >= self.end_date:
            errors.append("시작일은 종료일보다 앞서야 합니다")
        if self.initial_capital <= 0:
            errors.append("초기 자본금은 0보다 커야 합니다")
        if self.position_size_percent <= 0 or self.position_size_percent > 100:
            errors.append("포지션 크기 비율은 0~100 사이여야 합니다")
        if self.commission_percent < 0:
            errors.append("수수료는 0 이상이어야 합니다")
        if self.slippage_percent < 0:
            errors.append("슬리피지는 0 이상이어야 합니다")
        if self.min_history < 1:
            errors.append("최소 과거 데이터 수는 1 이상이어야 합니다")

        if errors:
            raise InvalidConfigError(
                f"백테스트 설정 오류: {'; '.join(errors)}",
                validation_errors=errors
            )

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'symbols': list(self.symbols),
            'strategy': self.strategy,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'initial_capital': float(self.initial_capital),
            'position_size_percent': float(self.position_size_percent),
            'commission_percent': float(self.commission_percent),
            'slippage_percent': float(self.slippage_percent),
            'interval': self.interval,
            'min_history': self.min_history,
            'name': self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BacktestConfig':
        """딕셔너리에서 설정 생성

        snake_case 키와 외부 API의 camelCase 키(startDate, positionSize 등)를 모두 허용합니다.

        Raises:
            InvalidConfigError: 형식 검증 실패
        """
        payload = dict(data)
        payload.setdefault('strategy', StrategyMode.BOTH.value)
        try:
            request = BacktestRequest.model_validate(payload)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            raise InvalidConfigError(
                f"백테스트 설정 형식 오류: {'; '.join(errors)}",
                validation_errors=errors,
                original_error=e
            ) from e

        return cls(
            symbols=tuple(request.symbols),
            strategy=request.strategy,
            start_date=request.start_date,
            end_date=request.end_date,
            initial_capital=request.initial_capital,
            position_size_percent=request.position_size_percent,
            commission_percent=request.commission_percent,
            slippage_percent=request.slippage_percent,
            name=data.get('name', 'Backtest'),
        )

    def with_period(self, start_date: date, end_date: date) -> 'BacktestConfig':
        """기간만 바꾼 새 설정 반환"""
        return replace(self, start_date=start_date, end_date=end_date)


# 사전 정의된 기간 프리셋 (일)
PRESET_PERIODS: Dict[str, int] = {
    '1week': 7,
    '1month': 30,
    '3months': 90,
    '6months': 180,
    '1year': 365,
}


def default_config(
    symbols: Optional[Sequence[str]] = None,
    strategy: str = StrategyMode.BOTH.value
) -> BacktestConfig:
    """환경 설정 기본값으로 설정 생성 (기간 미지정)"""
    return BacktestConfig(
        symbols=tuple(symbols or settings.DEFAULT_SYMBOLS),
        strategy=strategy,
        initial_capital=settings.DEFAULT_INITIAL_CAPITAL,
        position_size_percent=settings.DEFAULT_POSITION_SIZE_PERCENT,
        commission_percent=settings.DEFAULT_COMMISSION_PERCENT,
        slippage_percent=settings.DEFAULT_SLIPPAGE_PERCENT,
    )


def config_from_preset(
    preset: str,
    symbols: Optional[Sequence[str]] = None,
    today: Optional[date] = None,
    strategy: str = StrategyMode.BOTH.value
) -> BacktestConfig:
    """기간 프리셋으로 설정 생성

    Args:
        preset: PRESET_PERIODS 의 키 (예: '1month')
        symbols: 대상 심볼 (None이면 기본 심볼)
        today: 종료일 (None이면 오늘)
        strategy: 전략 모드

    Raises:
        InvalidConfigError: 알 수 없는 프리셋
    """
    if preset not in PRESET_PERIODS:
        raise InvalidConfigError(
            f"알 수 없는 프리셋입니다: {preset}",
            validation_errors=[f"preset must be one of {list(PRESET_PERIODS)}"],
            config_key='preset'
        )
    end_date = today or date.today()
    start_date = end_date - timedelta(days=PRESET_PERIODS[preset])
    return default_config(symbols, strategy).with_period(start_date, end_date)
