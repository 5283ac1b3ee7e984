"""
Presets command - List backtest period presets.

Usage:
    simtrader presets
"""

from datetime import date, timedelta

import click

from core.backtest.config import PRESET_PERIODS


@click.command()
@click.option('--today', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Reference end date (default: today).')
def presets(today) -> None:
    """List backtest period presets and the date range each resolves to."""
    end_date = today.date() if today else date.today()

    click.echo()
    click.echo("=== Backtest Presets ===")
    click.echo()
    for name, days in PRESET_PERIODS.items():
        start_date = end_date - timedelta(days=days)
        click.echo(f"  {name:<10} {days:>4} days   {start_date} ~ {end_date}")
    click.echo()
