"""
백테스트 설정 테스트
"""

from dataclasses import replace
from datetime import date

import pytest

from core.backtest import BacktestConfig, PRESET_PERIODS, StrategyMode, config_from_preset
from core.exceptions import InvalidConfigError


def valid_config(**kwargs):
    base = {
        'symbols': ('TCS',),
        'start_date': date(2024, 1, 1),
        'end_date': date(2024, 3, 1),
    }
    base.update(kwargs)
    return BacktestConfig(**base)


class TestDefaults:
    """기본값"""

    def test_defaults(self):
        config = valid_config()
        assert config.strategy == "both"
        assert config.initial_capital == 100_000
        assert config.position_size_percent == 10
        assert config.commission_percent == 0.1
        assert config.slippage_percent == 0.05
        assert config.interval == "day"
        assert config.min_history == 20
        assert config.strategy_mode == StrategyMode.BOTH

    def test_list_symbols_normalized_to_tuple(self):
        config = valid_config(symbols=['TCS', 'INFY'])
        assert config.symbols == ('TCS', 'INFY')

    def test_repeated_symbols_keep_first_occurrence(self):
        config = valid_config(symbols=['TCS', 'INFY', 'TCS', 'WIPRO', 'INFY'])
        assert config.symbols == ('TCS', 'INFY', 'WIPRO')

    def test_replace_keeps_symbols_unique(self):
        config = replace(valid_config(), symbols=('TCS', 'TCS'))
        assert config.symbols == ('TCS',)

    def test_frozen(self):
        config = valid_config()
        with pytest.raises(AttributeError):
            config.initial_capital = 1


class TestValidate:
    """검증"""

    def test_valid(self):
        valid_config().validate()

    @pytest.mark.parametrize("kwargs", [
        {'start_date': date(2024, 3, 1), 'end_date': date(2024, 3, 1)},
        {'start_date': date(2024, 4, 1), 'end_date': date(2024, 3, 1)},
        {'symbols': ()},
        {'strategy': 'scalping'},
        {'initial_capital': 0},
        {'initial_capital': -10},
        {'position_size_percent': 0},
        {'position_size_percent': 150},
        {'commission_percent': -0.1},
        {'slippage_percent': -1},
        {'start_date': None},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidConfigError):
            valid_config(**kwargs).validate()

    def test_collects_all_errors(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            valid_config(symbols=(), initial_capital=0).validate()
        assert len(exc_info.value.validation_errors) == 2
        assert exc_info.value.error_code == "CONFIG_INVALID"

    def test_full_position_size_allowed(self):
        valid_config(position_size_percent=100).validate()


class TestSerialization:
    """dict 변환"""

    def test_to_dict_iso_dates(self):
        data = valid_config().to_dict()
        assert data['start_date'] == '2024-01-01'
        assert data['symbols'] == ['TCS']

    def test_from_dict_round_trip(self):
        config = valid_config(symbols=('TCS', 'INFY'), strategy='momentum')
        assert BacktestConfig.from_dict(config.to_dict()) == config

    def test_from_dict_camel_case(self):
        config = BacktestConfig.from_dict({
            'symbols': ['tcs'],
            'startDate': '2024-01-01',
            'endDate': '2024-02-01T00:00:00Z',
            'initialCapital': 50_000,
            'positionSize': 20,
            'commission': 0.2,
            'slippage': 0.1,
        })
        assert config.symbols == ('TCS',)
        assert config.start_date == date(2024, 1, 1)
        assert config.end_date == date(2024, 2, 1)
        assert config.initial_capital == 50_000
        assert config.position_size_percent == 20
        assert config.commission_percent == 0.2
        assert config.slippage_percent == 0.1
        assert config.strategy == 'both'

    def test_from_dict_repeated_symbols(self):
        config = BacktestConfig.from_dict({
            'symbols': ['tcs', 'TCS ', 'infy'],
            'startDate': '2024-01-01',
            'endDate': '2024-02-01',
        })
        assert config.symbols == ('TCS', 'INFY')

    def test_from_dict_invalid(self):
        with pytest.raises(InvalidConfigError):
            BacktestConfig.from_dict({'symbols': ['TCS'], 'startDate': 'not-a-date',
                                      'endDate': '2024-02-01'})


class TestPresets:
    """기간 프리셋"""

    def test_preset_names(self):
        assert list(PRESET_PERIODS) == ['1week', '1month', '3months', '6months', '1year']

    def test_config_from_preset(self):
        config = config_from_preset('1month', ['TCS'], today=date(2024, 3, 31))
        assert config.end_date == date(2024, 3, 31)
        assert config.start_date == date(2024, 3, 1)
        assert config.symbols == ('TCS',)
        config.validate()

    def test_default_symbols(self):
        config = config_from_preset('1week', today=date(2024, 3, 31))
        assert config.symbols == ('RELIANCE', 'TCS', 'INFY', 'HDFCBANK', 'ICICIBANK')

    def test_unknown_preset(self):
        with pytest.raises(InvalidConfigError):
            config_from_preset('2weeks', ['TCS'])
