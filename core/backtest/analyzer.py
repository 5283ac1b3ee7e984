"""
성과 분석 모듈

거래 내역, 자산 곡선, 일간 수익률로부터 요약 지표를 계산합니다.
"""

from typing import Sequence

import numpy as np

from core.backtest.result import BacktestSummary, Trade, EquityPoint, SignalRecord
from core.config.constants import TRADING_DAYS_PER_YEAR


class PerformanceAnalyzer:
    """성과 지표 계산기"""

    @staticmethod
    def sharpe_ratio(daily_returns: Sequence[float]) -> float:
        """연환산 샤프 비율 (무위험 수익률 0, 모표준편차)"""
        if len(daily_returns) == 0:
            return 0.0
        returns = np.asarray(daily_returns, dtype=float)
        std = returns.std()
        if std == 0:
            return 0.0
        return round(float(returns.mean() / std * np.sqrt(TRADING_DAYS_PER_YEAR)), 2)

    @classmethod
    def analyze(
        cls,
        trades: Sequence[Trade],
        equity: Sequence[EquityPoint],
        daily_returns: Sequence[float],
        initial_capital: float,
        signals: Sequence[SignalRecord] = ()
    ) -> BacktestSummary:
        """
        요약 지표 계산

        Args:
            trades: 전체 체결 기록 (BUY/SELL)
            equity: 일별 자산 곡선
            daily_returns: 일간 수익률 (%)
            initial_capital: 초기 자본
            signals: 승인된 시그널 기록

        Returns:
            BacktestSummary
        """
        completed = [t for t in trades if t.pnl is not None]
        wins = [t.pnl for t in completed if t.pnl > 0]
        losses = [t.pnl for t in completed if t.pnl < 0]

        gross_profit = sum(wins)
        gross_loss = abs(sum(losses))

        final_capital = equity[-1].value if equity else initial_capital
        total_return = final_capital - initial_capital
        max_drawdown = max([p.drawdown for p in equity] + [0.0])

        executed = sum(1 for s in signals if s.executed)

        return BacktestSummary(
            total_trades=len(completed),
            winning_trades=len(wins),
            losing_trades=len(losses),
            win_rate=len(wins) / len(completed) * 100 if completed else 0.0,
            total_pnl=sum(t.pnl for t in completed),
            total_return=total_return,
            total_return_percent=total_return / initial_capital * 100,
            final_capital=final_capital,
            max_drawdown=max_drawdown,
            max_drawdown_percent=max_drawdown / initial_capital * 100,
            sharpe_ratio=cls.sharpe_ratio(daily_returns),
            profit_factor=gross_profit / gross_loss if gross_loss > 0 else 0.0,
            average_win=gross_profit / len(wins) if wins else 0.0,
            average_loss=sum(losses) / len(losses) if losses else 0.0,
            largest_win=max(wins) if wins else 0.0,
            largest_loss=min(losses) if losses else 0.0,
            total_commission=sum(t.commission for t in trades),
            executed_signals=executed,
            skipped_signals=len(signals) - executed,
        )
