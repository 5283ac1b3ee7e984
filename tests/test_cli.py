"""
Tests for CLI commands.

Feature Test: simtrader CLI command structure
Story Test: backtest, signals and presets commands over CSV data
"""

import json
import logging

import pandas as pd
import pytest
from click.testing import CliRunner

from cli.main import cli
from cli import __version__

from tests.conftest import v_shape_closes


@pytest.fixture(autouse=True)
def restore_root_logger():
    """cli 그룹이 교체한 루트 로거 핸들러 복원"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def data_dir(tmp_path):
    """V자 종목 CSV 디렉토리"""
    closes = v_shape_closes()
    frame = pd.DataFrame({
        'date': pd.date_range('2024-01-01', periods=len(closes), freq='D').strftime('%Y-%m-%d'),
        'open': closes,
        'high': [c * 1.01 for c in closes],
        'low': [c * 0.99 for c in closes],
        'close': closes,
        'volume': [1000] * len(closes),
    })
    frame.to_csv(tmp_path / 'VSHAPE.csv', index=False)
    return tmp_path


class TestCLIBasics:
    """Test basic CLI functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_cli_help(self):
        """Test: simtrader --help returns valid output."""
        result = self.runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'SimTrader' in result.output
        assert 'backtest' in result.output
        assert 'signals' in result.output
        assert 'presets' in result.output

    def test_cli_version(self):
        """Test: simtrader --version returns correct version."""
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_no_command(self):
        """Test: simtrader with no command shows help."""
        result = self.runner.invoke(cli, [])
        assert result.exit_code == 0
        assert 'Usage:' in result.output

    def test_alias(self):
        """Test: bt is an alias of backtest."""
        result = self.runner.invoke(cli, ['bt', '--help'])
        assert result.exit_code == 0
        assert '--preset' in result.output


class TestPresetsCommand:
    """Test presets command."""

    def test_lists_presets(self):
        result = CliRunner().invoke(cli, ['presets', '--today', '2024-03-31'])
        assert result.exit_code == 0
        for name in ('1week', '1month', '3months', '6months', '1year'):
            assert name in result.output
        assert '2024-03-01 ~ 2024-03-31' in result.output


class TestBacktestCommand:
    """Test backtest command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_backtest_with_dates(self, data_dir, tmp_path):
        output = tmp_path / 'result.json'
        result = self.runner.invoke(cli, [
            'backtest', '--data-dir', str(data_dir), '-s', 'vshape',
            '--strategy', 'mean_reversion',
            '--start', '2024-01-01', '--end', '2024-03-31',
            '--commission', '0', '--slippage', '0',
            '-o', str(output),
        ])
        assert result.exit_code == 0, result.output
        assert '백테스트 결과 요약' in result.output

        data = json.loads(output.read_text(encoding='utf-8'))
        assert data['config']['symbols'] == ['VSHAPE']
        assert data['config']['commission_percent'] == 0
        assert [t['action'] for t in data['trades']] == ['BUY', 'SELL']

    def test_backtest_with_preset(self, data_dir):
        result = self.runner.invoke(cli, [
            'backtest', '--data-dir', str(data_dir), '-s', 'VSHAPE',
            '--preset', '3months', '--end', '2024-03-31',
        ])
        assert result.exit_code == 0, result.output
        assert '2024-01-01 ~ 2024-03-31' in result.output

    def test_backtest_repeated_symbol(self, data_dir):
        result = self.runner.invoke(cli, [
            'backtest', '--data-dir', str(data_dir), '-s', 'VSHAPE,vshape',
            '--start', '2024-01-01', '--end', '2024-03-31',
        ])
        assert result.exit_code == 0, result.output
        assert 'Running backtest: VSHAPE (' in result.output

    def test_backtest_requires_period(self, data_dir):
        result = self.runner.invoke(cli, ['backtest', '--data-dir', str(data_dir)])
        assert result.exit_code == 2
        assert '--preset' in result.output

    def test_backtest_missing_symbol_fails(self, data_dir):
        result = self.runner.invoke(cli, [
            'backtest', '--data-dir', str(data_dir), '-s', 'VSHAPE,NOPE',
            '--start', '2024-01-01', '--end', '2024-03-31',
        ])
        assert result.exit_code == 1
        assert 'Backtest failed' in result.output

    def test_backtest_invalid_config(self, data_dir):
        result = self.runner.invoke(cli, [
            'backtest', '--data-dir', str(data_dir), '-s', 'VSHAPE',
            '--start', '2024-03-31', '--end', '2024-01-01',
        ])
        assert result.exit_code == 1
        assert 'CONFIG_INVALID' in result.output


class TestSignalsCommand:
    """Test signals command."""

    def test_scan(self, data_dir):
        result = CliRunner().invoke(cli, [
            'signals', '--data-dir', str(data_dir), '-s', 'VSHAPE', '--date', '2024-03-01',
        ])
        assert result.exit_code == 0, result.output
        assert 'RSI overbought' in result.output
        assert 'Golden cross detected' in result.output

    def test_scan_without_data(self, data_dir):
        result = CliRunner().invoke(cli, [
            'signals', '--data-dir', str(data_dir), '-s', 'NOPE', '--date', '2024-03-01',
        ])
        assert result.exit_code == 0, result.output
        assert 'No signals.' in result.output
