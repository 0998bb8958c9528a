"""Main CLI entry point for ledger-advisor."""

import logging
import click
from .. import __version__
from ..utils.logging import get_logger, setup_logging
from .commands.ask import ask
from .commands.chat import chat
from .commands.history import history
from .commands.nudges import nudges
from .commands.report import report
from .commands.version import version as version_command

logger = get_logger("cli.main")


@click.group()
@click.version_option(version=__version__, prog_name="ledger-advisor", message="%(prog)s version %(version)s")
@click.option('--config', 'config_path', type=click.Path(), default=None, help='Extra YAML config file applied last')
@click.option('--state', 'state_path', type=click.Path(), default=None, help='Advisor state file (default: ~/.ledgeradvisor/state.json)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_path, state_path, verbose):
    """ledger-advisor - 小森, a read-only advisor for your bookkeeping records."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["state_path"] = state_path


cli.add_command(ask)
cli.add_command(chat)
cli.add_command(nudges)
cli.add_command(history)
cli.add_command(report)
cli.add_command(version_command)
