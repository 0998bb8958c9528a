"""Version command - package version and the advisor currently configured."""

import click
from ... import __version__
from ...dialogs.catalog import load_dialog_catalog
from ...utils.errors import LedgerAdvisorError
from ..utils import format_error, get_config


@click.command()
@click.pass_context
def version(ctx):
    """Show the version, the advisor persona and the active provider."""
    click.echo(f"ledger-advisor version {__version__}")
    try:
        config = get_config(ctx)
    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)

    catalog = load_dialog_catalog(config.dialogs.path)
    profile = catalog.advisor_profile
    click.echo(f"advisor: {profile.name} ({profile.id}), {len(catalog.dialogs)} dialog keys")
    click.echo(f"provider: {config.ai.provider}")
