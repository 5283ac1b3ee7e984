"""
시그널 생성기 테스트
"""

from datetime import date

import pytest

from core.backtest import (
    MarketSnapshot,
    SignalAction,
    SignalGenerator,
    StrategyMode,
    build_snapshot,
)

AS_OF = date(2024, 3, 1)


def snapshot(**kwargs):
    base = {'symbol': 'TCS', 'price': 100.0, 'volume': 1000}
    base.update(kwargs)
    return MarketSnapshot(**base)


class TestMeanReversion:
    """RSI 평균회귀 규칙"""

    def setup_method(self):
        self.generator = SignalGenerator(StrategyMode.MEAN_REVERSION)

    def test_oversold_buy(self):
        signals = self.generator.generate([snapshot(rsi=20.0)], AS_OF)
        assert len(signals) == 1
        signal = signals[0]
        assert signal.action == SignalAction.BUY
        assert signal.confidence == pytest.approx(0.5)
        assert signal.target_price == pytest.approx(105.0)
        assert signal.stop_loss == pytest.approx(97.0)
        assert signal.reason == "RSI oversold at 20.00"
        assert signal.timestamp == AS_OF
        assert signal.price == 100.0
        assert signal.strategy == "mean_reversion"

    def test_overbought_sell(self):
        signals = self.generator.generate([snapshot(rsi=80.0)], AS_OF)
        assert len(signals) == 1
        signal = signals[0]
        assert signal.action == SignalAction.SELL
        assert signal.confidence == pytest.approx(0.5)
        assert signal.target_price == pytest.approx(95.0)
        assert signal.stop_loss == pytest.approx(103.0)
        assert signal.reason == "RSI overbought at 80.00"

    def test_confidence_capped_at_one(self):
        signals = self.generator.generate([snapshot(rsi=0.0)], AS_OF)
        assert signals[0].confidence == 1.0

    def test_rsi_zero_is_a_reading(self):
        signals = self.generator.generate([snapshot(rsi=0.0)], AS_OF)
        assert len(signals) == 1
        assert signals[0].action == SignalAction.BUY

    def test_missing_rsi_no_signal(self):
        assert self.generator.generate([snapshot(rsi=None)], AS_OF) == []

    @pytest.mark.parametrize("rsi", [30.0, 50.0, 70.0])
    def test_neutral_zone_no_signal(self, rsi):
        assert self.generator.generate([snapshot(rsi=rsi)], AS_OF) == []


class TestMomentum:
    """이동평균 크로스 규칙"""

    def setup_method(self):
        self.generator = SignalGenerator(StrategyMode.MOMENTUM)

    def test_golden_cross_buy(self):
        signals = self.generator.generate(
            [snapshot(price=115.0, sma20=110.0, sma50=100.0, rsi=20.0)], AS_OF
        )
        assert len(signals) == 1
        signal = signals[0]
        assert signal.action == SignalAction.BUY
        assert signal.confidence == 0.65
        assert signal.reason == "Golden cross detected"
        assert signal.target_price == pytest.approx(115.0 * 1.08)
        assert signal.stop_loss == pytest.approx(115.0 * 0.95)
        assert signal.strategy == "momentum"

    def test_death_cross_sell(self):
        signals = self.generator.generate(
            [snapshot(price=85.0, sma20=90.0, sma50=100.0)], AS_OF
        )
        assert len(signals) == 1
        assert signals[0].action == SignalAction.SELL
        assert signals[0].reason == "Death cross detected"
        assert signals[0].target_price == pytest.approx(85.0 * 0.92)
        assert signals[0].stop_loss == pytest.approx(85.0 * 1.05)

    def test_price_below_fast_average_no_buy(self):
        signals = self.generator.generate(
            [snapshot(price=105.0, sma20=110.0, sma50=100.0)], AS_OF
        )
        assert signals == []

    def test_missing_averages_no_signal(self):
        assert self.generator.generate([snapshot(sma20=None, sma50=100.0)], AS_OF) == []


class TestBothMode:
    """두 규칙 동시 실행"""

    def test_both_rules_fire_in_order(self):
        generator = SignalGenerator(StrategyMode.BOTH)
        signals = generator.generate(
            [snapshot(price=115.0, rsi=20.0, sma20=110.0, sma50=100.0)], AS_OF
        )
        assert [s.strategy for s in signals] == ["mean_reversion", "momentum"]
        assert all(s.action == SignalAction.BUY for s in signals)

    def test_generator_is_reusable(self):
        generator = SignalGenerator(StrategyMode.BOTH)
        snapshots = [snapshot(rsi=20.0), snapshot(symbol='INFY', rsi=80.0)]
        first = generator.generate(snapshots, AS_OF)
        second = generator.generate(snapshots, AS_OF)
        assert first == second
        assert [s.symbol for s in first] == ['TCS', 'INFY']

    def test_accepts_mode_string(self):
        assert SignalGenerator("momentum").mode == StrategyMode.MOMENTUM


class TestBuildSnapshot:
    """종가 이력 -> 스냅샷"""

    def test_uses_latest_close(self):
        closes = [100.0 - i for i in range(20)]
        result = build_snapshot('TCS', closes, volume=500)
        assert result.price == 81.0
        assert result.rsi == 0.0
        assert result.sma20 == pytest.approx(sum(closes) / 20)
        # 50개 미만이면 SMA50은 마지막 가격
        assert result.sma50 == 81.0
