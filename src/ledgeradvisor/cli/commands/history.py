"""History commands - inspect or clear the stored chat history."""

import json
import click
from ...presentation.human_formatter import format_history
from ...utils.errors import LedgerAdvisorError
from ..utils import format_error, get_config, get_store


@click.group()
def history():
    """Stored chat history with 小森."""
    pass


@history.command()
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
@click.pass_context
def show(ctx, output_json):
    """Show the stored chat history."""
    try:
        config = get_config(ctx)
        items = get_store(ctx, config).get_chat_history()
        if output_json:
            click.echo(json.dumps([i.model_dump() for i in items], ensure_ascii=False, indent=2))
        else:
            click.echo(format_history(items))
    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)


@history.command()
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def clear(ctx, yes):
    """Delete the stored chat history."""
    try:
        if not yes and not click.confirm("Clear the chat history?"):
            click.echo("Aborted.")
            return
        config = get_config(ctx)
        get_store(ctx, config).clear_chat_history()
        click.echo("Chat history cleared.")
    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
