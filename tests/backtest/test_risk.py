"""
리스크 필터 테스트
"""

from datetime import date

import pytest

from core.backtest import (
    CompositeRiskFilter,
    PassThroughRiskFilter,
    RiskFilter,
    Signal,
    SignalAction,
)


def make_signal(symbol='TCS', confidence=0.5, price=100.0, target=105.0, stop=97.0,
                action=SignalAction.BUY):
    return Signal(
        symbol=symbol,
        action=action,
        confidence=confidence,
        reason="test",
        timestamp=date(2024, 3, 1),
        price=price,
        target_price=target,
        stop_loss=stop,
        strategy="mean_reversion",
    )


class TestRiskFilter:
    """신뢰도 / 손익비 필터"""

    def setup_method(self):
        self.risk_filter = RiskFilter(min_confidence=0.25, min_risk_reward=0.8)

    def test_defaults_from_settings(self):
        default = RiskFilter()
        assert default.min_confidence == pytest.approx(0.25)
        assert default.min_risk_reward == pytest.approx(0.8)

    def test_approves_good_signal(self):
        signal = make_signal()
        assert self.risk_filter.assess_risk([signal]) == [signal]

    def test_rejects_low_confidence(self):
        assert self.risk_filter.assess_risk([make_signal(confidence=0.2)]) == []

    def test_confidence_at_threshold_passes(self):
        assert len(self.risk_filter.assess_risk([make_signal(confidence=0.25)])) == 1

    def test_rejects_poor_risk_reward(self):
        # reward 2, risk 5 -> 0.4
        signal = make_signal(target=102.0, stop=95.0)
        assert self.risk_filter.assess_risk([signal]) == []
        assert any("risk/reward" in r for r in self.risk_filter.rejection_reasons(signal))

    def test_sell_risk_reward_uses_distances(self):
        signal = make_signal(action=SignalAction.SELL, target=95.0, stop=103.0)
        assert self.risk_filter.assess_risk([signal]) == [signal]

    def test_zero_risk_distance_passes(self):
        assert len(self.risk_filter.assess_risk([make_signal(stop=100.0)])) == 1

    def test_missing_target_skips_ratio_check(self):
        signal = make_signal(target=None, stop=99.9)
        assert self.risk_filter.assess_risk([signal]) == [signal]

    def test_preserves_input_order(self):
        signals = [
            make_signal(symbol='A'),
            make_signal(symbol='B', confidence=0.1),
            make_signal(symbol='C'),
        ]
        assert [s.symbol for s in self.risk_filter.assess_risk(signals)] == ['A', 'C']

    def test_logs_rejection(self, caplog):
        with caplog.at_level("WARNING"):
            self.risk_filter.assess_risk([make_signal(confidence=0.1)])
        assert "confidence" in caplog.text


class TestOtherAssessors:
    """PassThrough / Composite"""

    def test_pass_through_approves_all(self):
        signals = [make_signal(confidence=0.0), make_signal(target=100.5, stop=90.0)]
        assert PassThroughRiskFilter().assess_risk(signals) == signals

    def test_composite_applies_in_sequence(self):
        composite = CompositeRiskFilter([
            RiskFilter(min_confidence=0.3, min_risk_reward=0.0),
            RiskFilter(min_confidence=0.0, min_risk_reward=1.0),
        ])
        signals = [
            make_signal(symbol='A', confidence=0.2),
            make_signal(symbol='B', target=102.0, stop=95.0),
            make_signal(symbol='C'),
        ]
        assert [s.symbol for s in composite.assess_risk(signals)] == ['C']
