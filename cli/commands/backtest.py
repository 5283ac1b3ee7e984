"""
Backtest command - Run a backtest over historical data.

Usage:
    simtrader backtest [OPTIONS]
"""

import sys
from dataclasses import replace

import click

from core.config import settings

SOURCES = ('csv', 'http')
STRATEGIES = ('mean_reversion', 'momentum', 'both')


def parse_symbols(value):
    """Split a comma separated symbol list."""
    if not value:
        return None
    return [s.strip().upper() for s in value.split(',') if s.strip()]


def build_provider(source: str, data_dir: str, symbols):
    """Create the market data provider for the chosen source."""
    if source == 'http':
        from core.data.http_client import HttpMarketDataClient
        return HttpMarketDataClient()

    from core.data.feed import CsvMarketData
    return CsvMarketData(data_dir, symbols)


@click.command()
@click.option('--symbols', '-s', type=str, default=None,
              help='Comma separated symbols (default: DEFAULT_SYMBOLS).')
@click.option('--strategy', type=click.Choice(STRATEGIES), default='both', show_default=True,
              help='Rule set to run.')
@click.option('--preset', type=str, default=None, help='Period preset (see `simtrader presets`).')
@click.option('--start', type=click.DateTime(formats=['%Y-%m-%d']), default=None, help='Start date.')
@click.option('--end', type=click.DateTime(formats=['%Y-%m-%d']), default=None, help='End date.')
@click.option('--capital', type=float, default=None, help='Initial capital.')
@click.option('--position-size', type=float, default=None, help='Percent of cash per trade.')
@click.option('--commission', type=float, default=None, help='Commission percent per fill.')
@click.option('--slippage', type=float, default=None, help='Slippage percent per fill.')
@click.option('--source', type=click.Choice(SOURCES), default='csv', show_default=True,
              help='Market data source.')
@click.option('--data-dir', type=click.Path(), default=None,
              help='Directory of <SYMBOL>.csv files (csv source).')
@click.option('--no-risk-filter', is_flag=True, help='Approve every generated signal.')
@click.option('--timeout', type=float, default=None, help='Run timeout in seconds.')
@click.option('--output', '-o', type=click.Path(), default=None, help='Write the result as JSON.')
@click.pass_context
def backtest(ctx: click.Context, symbols, strategy, preset, start, end, capital, position_size,
             commission, slippage, source, data_dir, no_risk_filter, timeout, output) -> None:
    """Run a backtest over historical daily bars.

    \b
    Examples:
        simtrader backtest --preset 3months
        simtrader backtest -s TCS,INFY --start 2024-01-01 --end 2024-06-30
        simtrader backtest --preset 1year --strategy momentum -o result.json
    """
    try:
        from core.backtest.config import BacktestConfig, config_from_preset, default_config
        from core.backtest.engine import BacktestEngine
        from core.backtest.risk import PassThroughRiskFilter

        symbol_list = parse_symbols(symbols)

        if preset:
            config = config_from_preset(
                preset, symbol_list, today=end.date() if end else None, strategy=strategy
            )
        elif start and end:
            config = default_config(symbol_list, strategy).with_period(start.date(), end.date())
        else:
            raise click.UsageError("Either --preset or both --start and --end are required.")

        overrides = {
            'initial_capital': capital,
            'position_size_percent': position_size,
            'commission_percent': commission,
            'slippage_percent': slippage,
        }
        config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

        provider = build_provider(source, data_dir or str(settings.HISTORICAL_DIR), config.symbols)
        engine = BacktestEngine(
            provider,
            risk_assessor=PassThroughRiskFilter() if no_risk_filter else None,
        )

        click.echo(f"Running backtest: {', '.join(config.symbols)} "
                   f"({config.start_date} ~ {config.end_date}, {config.strategy})")
        result = engine.run(config, timeout=timeout)

        click.echo(result.summary_text())

        if output:
            result.to_json(output)
            click.echo(f"Result saved to {output}")

    except click.UsageError:
        raise
    except Exception as e:
        click.echo(f"Backtest failed: {e}", err=True)
        if ctx.obj.get('debug'):
            import traceback
            traceback.print_exc()
        sys.exit(1)
