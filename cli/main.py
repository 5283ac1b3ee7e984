#!/usr/bin/env python3
"""
SimTrader CLI - Unified Command Line Interface

Usage:
    simtrader [OPTIONS] COMMAND [ARGS]...

Commands:
    backtest    Run a backtest over historical data
    signals     Scan today's signals from quotes and recent history
    presets     List backtest period presets
"""

import logging
import sys
import os

# Ensure project root is in path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import click  # noqa: E402

from cli import __version__  # noqa: E402
from core.config import settings  # noqa: E402
from core.utils.log_utils import setup_logging  # noqa: E402


class AliasedGroup(click.Group):
    """Custom Click group that supports command aliases."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get command with alias support."""
        # Direct match
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv

        # Alias mapping
        aliases = {
            'bt': 'backtest',
            'scan': 'signals',
        }

        if cmd_name in aliases:
            return click.Group.get_command(self, ctx, aliases[cmd_name])

        return None


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.option('--version', '-v', is_flag=True, help='Show version and exit.')
@click.option('--debug', is_flag=True, help='Enable debug mode.')
@click.option('--json-logs', is_flag=True, help='Write the log file as JSON lines.')
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool, json_logs: bool) -> None:
    """SimTrader - Rule-based Trading Signal Backtester CLI

    Replays historical daily bars through mean-reversion and momentum rules,
    simulates fills with slippage and commission, and reports performance.

    \b
    Quick Start:
        simtrader presets                          List period presets
        simtrader backtest --preset 3months        Backtest default symbols
        simtrader signals -s TCS,INFY              Scan today's signals
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if version:
        click.echo(f"simtrader version {__version__}")
        ctx.exit(0)

    setup_logging(
        log_file=settings.LOG_FILE,
        level=logging.DEBUG if debug else settings.LOG_LEVEL,
        json_format=json_logs or settings.LOG_JSON,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Import and register commands
from cli.commands.backtest import backtest  # noqa: E402
from cli.commands.signals import signals  # noqa: E402
from cli.commands.presets import presets  # noqa: E402

cli.add_command(backtest)
cli.add_command(signals)
cli.add_command(presets)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled.")
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
