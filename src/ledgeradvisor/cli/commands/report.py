"""Report command - monthly markdown report (read-only)."""

from pathlib import Path
import click
from ...report.markdown import generate_markdown, render_markdown
from ...utils.errors import LedgerAdvisorError
from ...utils.logging import get_logger
from ..utils import DATE_FORMATS, as_date, format_error, get_config, load_ledger_arg

logger = get_logger("cli.report")


@click.command()
@click.argument('ledger_path', type=click.Path(exists=False))
@click.option('--output', '-o', type=click.Path(), default=None, help='Output markdown file path (default: stdout)')
@click.option('--today', type=click.DateTime(formats=DATE_FORMATS), default=None, help='Report the month containing this date')
@click.pass_context
def report(ctx, ledger_path, output, today):
    """Generate a monthly markdown report from a ledger."""
    try:
        config = get_config(ctx)
        try:
            _, ledger = load_ledger_arg(ledger_path)
        except FileNotFoundError as e:
            click.echo(format_error(str(e)), err=True)
            ctx.exit(1)

        day = as_date(today)
        if output:
            output_path = Path(output)
            generate_markdown(ledger, day, output_path, config.chat.trend_months)
            click.echo(f"Generated markdown report: {output_path}", err=True)
        else:
            click.echo(render_markdown(ledger, day, config.chat.trend_months))

    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to generate markdown report: {e}"), err=True)
        ctx.exit(1)
