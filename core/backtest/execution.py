"""
체결 시뮬레이션 모듈

승인된 시그널을 슬리피지와 수수료를 반영하여 체결하고
현금과 보유 포지션을 관리합니다. 종목당 포지션은 최대 1개입니다.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Mapping

from core.backtest.result import Position, Trade
from core.backtest.strategy import Signal, SignalAction
from core.utils.log_utils import get_logger

logger = get_logger(__name__)

# 미실행 사유
REASON_HOLD = "HOLD signal"
REASON_HAS_POSITION = "Already have position"
REASON_NO_CAPITAL = "Insufficient capital"
REASON_NO_POSITION = "No position to sell"
REASON_ZERO_QUANTITY = "Zero quantity"


@dataclass(frozen=True)
class ExecutionCheck:
    """실행 가능 여부"""
    can: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.can


class ExecutionSimulator:
    """체결 시뮬레이터 (실행 단위 상태)"""

    def __init__(
        self,
        initial_capital: float,
        position_size_percent: float = 10,
        commission_percent: float = 0.1,
        slippage_percent: float = 0.05
    ):
        self.initial_capital = initial_capital
        self.position_size_percent = position_size_percent
        self.commission_rate = commission_percent / 100
        self.slippage_rate = slippage_percent / 100

        self.cash = initial_capital
        self.positions: Dict[str, Position] = {}

    @classmethod
    def from_config(cls, config) -> 'ExecutionSimulator':
        return cls(
            initial_capital=config.initial_capital,
            position_size_percent=config.position_size_percent,
            commission_percent=config.commission_percent,
            slippage_percent=config.slippage_percent,
        )

    def position_budget(self) -> float:
        """거래당 투입 금액"""
        return self.cash * self.position_size_percent / 100

    def can_execute(self, signal: Signal) -> ExecutionCheck:
        """실행 가능 여부 확인"""
        if signal.action == SignalAction.HOLD:
            return ExecutionCheck(False, REASON_HOLD)

        if signal.action == SignalAction.BUY:
            if signal.symbol in self.positions:
                return ExecutionCheck(False, REASON_HAS_POSITION)
            if self.position_budget() <= 0:
                return ExecutionCheck(False, REASON_NO_CAPITAL)
            return ExecutionCheck(True)

        if signal.symbol not in self.positions:
            return ExecutionCheck(False, REASON_NO_POSITION)
        return ExecutionCheck(True)

    def execute(self, signal: Signal, trade_date: date) -> Optional[Trade]:
        """
        시그널 체결

        Returns:
            Trade 또는 None (수량 0)
        """
        if signal.action == SignalAction.BUY:
            return self._buy(signal, trade_date)
        if signal.action == SignalAction.SELL:
            return self._sell(signal, trade_date)
        return None

    def _reference_price(self, signal: Signal) -> float:
        return signal.target_price if signal.target_price is not None else signal.price

    def _buy(self, signal: Signal, trade_date: date) -> Optional[Trade]:
        fill_price = self._reference_price(signal) * (1 + self.slippage_rate)
        quantity = math.floor(self.position_budget() / fill_price)
        commission = fill_price * quantity * self.commission_rate

        # 수수료 포함 비용이 현금을 넘으면 수량 축소
        if fill_price * quantity + commission > self.cash:
            quantity = math.floor(self.cash / (fill_price * (1 + self.commission_rate)))
            commission = fill_price * quantity * self.commission_rate

        if quantity <= 0:
            logger.debug(f"수량 0으로 매수 생략: {signal.symbol} @ {fill_price:.2f}")
            return None

        trade_id = f"{signal.symbol}-{trade_date.isoformat()}"
        self.cash -= fill_price * quantity + commission
        self.positions[signal.symbol] = Position(
            symbol=signal.symbol,
            quantity=quantity,
            entry_price=fill_price,
            entry_date=trade_date,
            entry_id=trade_id,
            strategy=signal.strategy,
            current_price=signal.price,
        )

        logger.debug(
            f"매수: {signal.symbol} {quantity}주 @ {fill_price:.2f} "
            f"(수수료 {commission:.2f}, 현금 {self.cash:,.2f})"
        )
        return Trade(
            id=trade_id,
            date=trade_date,
            symbol=signal.symbol,
            action=SignalAction.BUY,
            price=fill_price,
            quantity=quantity,
            commission=commission,
            reason=signal.reason,
            strategy=signal.strategy,
        )

    def _sell(self, signal: Signal, trade_date: date) -> Optional[Trade]:
        position = self.positions.pop(signal.symbol)
        exit_price = self._reference_price(signal) * (1 - self.slippage_rate)
        quantity = position.quantity
        commission = exit_price * quantity * self.commission_rate

        pnl = (exit_price - position.entry_price) * quantity - 2 * commission
        pnl_percent = (exit_price - position.entry_price) / position.entry_price * 100
        self.cash += exit_price * quantity - commission

        logger.debug(
            f"매도: {signal.symbol} {quantity}주 @ {exit_price:.2f} "
            f"(손익 {pnl:,.2f}, {pnl_percent:.2f}%)"
        )
        return Trade(
            id=f"{position.entry_id}-exit",
            date=trade_date,
            symbol=signal.symbol,
            action=SignalAction.SELL,
            price=exit_price,
            quantity=quantity,
            commission=commission,
            pnl=pnl,
            pnl_percent=pnl_percent,
            reason=signal.reason,
            strategy=position.strategy,
        )

    def mark_to_market(self, prices: Mapping[str, float]):
        """보유 포지션 현재가 갱신 (거래 없음)"""
        for symbol, position in self.positions.items():
            price = prices.get(symbol)
            if price is not None:
                position.current_price = price

    def positions_value(self) -> float:
        return sum(p.market_value for p in self.positions.values())

    def equity(self, prices: Optional[Mapping[str, float]] = None) -> float:
        """총 자산 = 현금 + 보유 포지션 평가액"""
        if prices is not None:
            self.mark_to_market(prices)
        return self.cash + self.positions_value()
