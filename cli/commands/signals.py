"""
Signals command - Scan today's signals.

Usage:
    simtrader signals [OPTIONS]
"""

import sys

import click

from cli.commands.backtest import SOURCES, STRATEGIES, build_provider, parse_symbols
from core.config import settings


@click.command()
@click.option('--symbols', '-s', type=str, default=None,
              help='Comma separated symbols (default: DEFAULT_SYMBOLS).')
@click.option('--strategy', type=click.Choice(STRATEGIES), default='both', show_default=True,
              help='Rule set to run.')
@click.option('--date', 'as_of', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Scan date (default: today).')
@click.option('--source', type=click.Choice(SOURCES), default='csv', show_default=True,
              help='Market data source.')
@click.option('--data-dir', type=click.Path(), default=None,
              help='Directory of <SYMBOL>.csv files (csv source).')
@click.option('--lookback', type=int, default=None, help='Days of history used for indicators.')
@click.pass_context
def signals(ctx: click.Context, symbols, strategy, as_of, source, data_dir, lookback) -> None:
    """Scan signals from current quotes and recent history.

    \b
    Examples:
        simtrader signals
        simtrader signals -s TCS,INFY --strategy mean_reversion
        simtrader signals --date 2024-06-28 --data-dir ./data/historical
    """
    try:
        from core.backtest.config import StrategyMode
        from core.backtest.live import LiveSignalScanner

        symbol_list = parse_symbols(symbols) or list(settings.DEFAULT_SYMBOLS)
        provider = build_provider(source, data_dir or str(settings.HISTORICAL_DIR), symbol_list)
        scanner = LiveSignalScanner(
            provider, strategy_mode=StrategyMode(strategy), lookback_days=lookback
        )
        found = scanner.scan(symbol_list, as_of.date() if as_of else None)

        click.echo()
        click.echo("=== Signals ===")
        click.echo()
        if not found:
            click.echo("No signals.")
            return

        for signal in found:
            color = 'green' if signal.action.value == 'BUY' else 'red'
            click.echo(
                f"  {click.style(signal.action.value, fg=color):<4} {signal.symbol:<12} "
                f"@ {signal.price:,.2f}  conf {signal.confidence:.2f}  "
                f"target {signal.target_price:,.2f}  stop {signal.stop_loss:,.2f}  "
                f"[{signal.strategy}] {signal.reason}"
            )
        click.echo()

    except Exception as e:
        click.echo(f"Signal scan failed: {e}", err=True)
        if ctx.obj.get('debug'):
            import traceback
            traceback.print_exc()
        sys.exit(1)
