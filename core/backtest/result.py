"""
백테스트 결과 모듈

포지션, 거래, 자산 곡선, 시그널 기록과 최종 결과를 정의합니다.
Position을 제외한 모든 타입은 불변입니다.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Any, Optional, Tuple
import json

import pandas as pd

from core.backtest.config import BacktestConfig
from core.backtest.strategy import Signal, SignalAction


class BacktestStatus(Enum):
    """백테스트 상태"""
    INIT = "init"
    FETCHING = "fetching"
    SIMULATING = "simulating"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


# 허용되는 상태 전이
ALLOWED_TRANSITIONS: Dict[BacktestStatus, Tuple[BacktestStatus, ...]] = {
    BacktestStatus.INIT: (BacktestStatus.FETCHING, BacktestStatus.FAILED),
    BacktestStatus.FETCHING: (BacktestStatus.SIMULATING, BacktestStatus.FAILED),
    BacktestStatus.SIMULATING: (BacktestStatus.SUMMARIZING, BacktestStatus.FAILED),
    BacktestStatus.SUMMARIZING: (BacktestStatus.DONE, BacktestStatus.FAILED),
    BacktestStatus.DONE: (),
    BacktestStatus.FAILED: (),
}


def _opt_float(value: Optional[float]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class Position:
    """보유 포지션"""
    symbol: str
    quantity: int
    entry_price: float
    entry_date: date
    entry_id: str
    strategy: str = ""
    current_price: float = 0

    def __post_init__(self):
        if not self.current_price:
            self.current_price = self.entry_price

    @property
    def market_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def unrealized_pnl(self) -> float:
        return (self.current_price - self.entry_price) * self.quantity

    @property
    def unrealized_pnl_percent(self) -> float:
        return (self.current_price - self.entry_price) / self.entry_price * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'quantity': int(self.quantity),
            'entry_price': float(self.entry_price),
            'entry_date': self.entry_date.isoformat(),
            'entry_id': self.entry_id,
            'strategy': self.strategy,
            'current_price': float(self.current_price),
            'market_value': float(self.market_value),
            'unrealized_pnl': float(self.unrealized_pnl),
        }


@dataclass(frozen=True)
class Trade:
    """체결 기록"""
    id: str
    date: date
    symbol: str
    action: SignalAction
    price: float
    quantity: int
    commission: float
    pnl: Optional[float] = None          # SELL만 정의
    pnl_percent: Optional[float] = None
    reason: str = ""
    strategy: str = ""

    @property
    def is_closed(self) -> bool:
        return self.pnl is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'symbol': self.symbol,
            'action': self.action.value,
            'price': float(self.price),
            'quantity': int(self.quantity),
            'commission': float(self.commission),
            'pnl': _opt_float(self.pnl),
            'pnl_percent': _opt_float(self.pnl_percent),
            'reason': self.reason,
            'strategy': self.strategy,
        }


@dataclass(frozen=True)
class EquityPoint:
    """일별 자산 가치"""
    date: date
    value: float
    drawdown: float                      # 고점 대비 하락 금액 (>= 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'value': float(self.value),
            'drawdown': float(self.drawdown),
        }


@dataclass(frozen=True)
class SignalRecord:
    """승인된 시그널과 실행 여부"""
    date: date
    symbol: str
    signal: Signal
    executed: bool
    reason: Optional[str] = None         # 미실행 사유

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'symbol': self.symbol,
            'signal': self.signal.to_dict(),
            'executed': self.executed,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class BacktestSummary:
    """성과 요약"""
    total_trades: int = 0                # 완료(SELL) 거래 수
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0                  # 승률 (%)
    total_pnl: float = 0
    total_return: float = 0              # 최종 자본 - 초기 자본
    total_return_percent: float = 0
    final_capital: float = 0
    max_drawdown: float = 0
    max_drawdown_percent: float = 0
    sharpe_ratio: float = 0
    profit_factor: float = 0
    average_win: float = 0
    average_loss: float = 0
    largest_win: float = 0
    largest_loss: float = 0
    total_commission: float = 0
    executed_signals: int = 0
    skipped_signals: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_trades': int(self.total_trades),
            'winning_trades': int(self.winning_trades),
            'losing_trades': int(self.losing_trades),
            'win_rate': float(self.win_rate),
            'total_pnl': float(self.total_pnl),
            'total_return': float(self.total_return),
            'total_return_percent': float(self.total_return_percent),
            'final_capital': float(self.final_capital),
            'max_drawdown': float(self.max_drawdown),
            'max_drawdown_percent': float(self.max_drawdown_percent),
            'sharpe_ratio': float(self.sharpe_ratio),
            'profit_factor': float(self.profit_factor),
            'average_win': float(self.average_win),
            'average_loss': float(self.average_loss),
            'largest_win': float(self.largest_win),
            'largest_loss': float(self.largest_loss),
            'total_commission': float(self.total_commission),
            'executed_signals': int(self.executed_signals),
            'skipped_signals': int(self.skipped_signals),
        }


@dataclass(frozen=True)
class BacktestResult:
    """백테스트 결과"""
    config: BacktestConfig
    summary: BacktestSummary
    trades: Tuple[Trade, ...] = ()
    equity: Tuple[EquityPoint, ...] = ()
    signals: Tuple[SignalRecord, ...] = ()
    daily_returns: Tuple[float, ...] = ()
    open_positions: Tuple[Dict[str, Any], ...] = ()
    execution_time: float = 0            # 실행 시간 (초)
    backtest_id: str = ""
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def get_equity_curve(self) -> pd.Series:
        """자산 곡선 반환"""
        if not self.equity:
            return pd.Series(dtype=float)
        dates = [p.date for p in self.equity]
        values = [p.value for p in self.equity]
        return pd.Series(values, index=pd.to_datetime(dates), name='equity')

    def get_drawdown_curve(self) -> pd.Series:
        """낙폭 곡선 반환"""
        if not self.equity:
            return pd.Series(dtype=float)
        dates = [p.date for p in self.equity]
        drawdowns = [p.drawdown for p in self.equity]
        return pd.Series(drawdowns, index=pd.to_datetime(dates), name='drawdown')

    def get_trades_df(self) -> pd.DataFrame:
        """거래 내역 DataFrame 반환"""
        if not self.trades:
            return pd.DataFrame()
        return pd.DataFrame([t.to_dict() for t in self.trades])

    def to_dict(self) -> Dict[str, Any]:
        """결과를 딕셔너리로 변환 (날짜는 ISO 8601)"""
        return {
            'backtest_id': self.backtest_id,
            'created_at': self.created_at,
            'execution_time': float(self.execution_time),
            'config': self.config.to_dict(),
            'summary': self.summary.to_dict(),
            'trades': [t.to_dict() for t in self.trades],
            'equity': [p.to_dict() for p in self.equity],
            'signals': [s.to_dict() for s in self.signals],
            'daily_returns': [float(r) for r in self.daily_returns],
            'open_positions': [dict(p) for p in self.open_positions],
        }

    def to_json(self, filepath: str):
        """결과를 JSON 파일로 저장"""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False, default=str)

    def summary_text(self) -> str:
        """결과 요약 문자열 반환"""
        s = self.summary
        config = self.config
        return f"""
========================================
백테스트 결과 요약: {config.name} ({config.strategy})
========================================
기간: {config.start_date} ~ {config.end_date}
종목: {', '.join(config.symbols)}
실행시간: {self.execution_time:.2f}초

[수익률]
  초기 자본: {config.initial_capital:,.2f}
  최종 자본: {s.final_capital:,.2f}
  총 수익률: {s.total_return_percent:.2f}%
  실현 손익: {s.total_pnl:,.2f}

[리스크]
  최대 낙폭 (MDD): {s.max_drawdown:,.2f} ({s.max_drawdown_percent:.2f}%)
  샤프 비율: {s.sharpe_ratio:.2f}

[거래 통계]
  완료 거래: {s.total_trades}회 (승 {s.winning_trades} / 패 {s.losing_trades})
  승률: {s.win_rate:.1f}%
  손익비: {s.profit_factor:.2f}
  평균 이익: {s.average_win:,.2f} / 평균 손실: {s.average_loss:,.2f}
  최대 이익: {s.largest_win:,.2f} / 최대 손실: {s.largest_loss:,.2f}

[시그널 / 비용]
  실행 시그널: {s.executed_signals} / 미실행: {s.skipped_signals}
  미청산 포지션: {len(self.open_positions)}개
  총 수수료: {s.total_commission:,.2f}
========================================
"""
