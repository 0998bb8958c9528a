"""Nudges commands - proactive advisor messages for app events."""

import datetime as dt
import json
import click
from ...contracts.records import Ledger, Record, RecordType
from ...ingest.ledger_loader import append_record
from ...presentation.human_formatter import format_nudges
from ...utils.errors import LedgerAdvisorError
from ...utils.logging import get_logger
from ..utils import (
    DATE_FORMATS,
    DATETIME_FORMATS,
    as_date,
    as_datetime,
    build_engine,
    format_error,
    get_config,
    get_store,
    load_ledger_arg,
)

logger = get_logger("cli.nudges")


def _next_record_id(ledger: Ledger) -> int:
    numeric = [r.id for r in ledger.records if isinstance(r.id, int)]
    return max(numeric, default=0) + 1


def _echo_nudges(nudges, output_json: bool) -> None:
    if output_json:
        click.echo(json.dumps([n.to_dict() for n in nudges], ensure_ascii=False, indent=2))
    else:
        click.echo(format_nudges(nudges))


@click.group()
def nudges():
    """Proactive messages from 小森 for app events."""
    pass


@nudges.command("open")
@click.argument('ledger_path', type=click.Path(exists=False))
@click.option('--now', type=click.DateTime(formats=DATETIME_FORMATS), default=None, help='Pretend the app opens at this time (YYYY-MM-DDTHH:MM)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
@click.pass_context
def open_app(ctx, ledger_path, now, output_json):
    """Nudges shown when the app is opened."""
    try:
        config = get_config(ctx)
        try:
            _, ledger = load_ledger_arg(ledger_path)
        except FileNotFoundError as e:
            click.echo(format_error(str(e)), err=True)
            ctx.exit(1)

        engine = build_engine(config, get_store(ctx, config))
        _echo_nudges(engine.on_app_open(ledger, as_datetime(now)), output_json)

    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to check nudges: {e}"), err=True)
        ctx.exit(1)


@nudges.command("record")
@click.argument('ledger_path', type=click.Path(exists=False))
@click.option('--amount', type=float, required=True, help='Amount in NT$')
@click.option('--category', default=None, help='Category name')
@click.option('--type', 'record_type', type=click.Choice([t.value for t in RecordType]), default=RecordType.EXPENSE.value, help='Record type (default: expense)')
@click.option('--date', 'record_date', type=click.DateTime(formats=DATE_FORMATS), default=None, help='Record date (default: today)')
@click.option('--note', default=None, help='Free-form note')
@click.option('--today', type=click.DateTime(formats=DATE_FORMATS), default=None, help='Pretend today is this date')
@click.option('--save', is_flag=True, help='Append the record to the ledger file')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
@click.pass_context
def record(ctx, ledger_path, amount, category, record_type, record_date, note, today, save, output_json):
    """Nudges shown after saving a record."""
    try:
        config = get_config(ctx)
        try:
            path, ledger = load_ledger_arg(ledger_path)
        except FileNotFoundError as e:
            click.echo(format_error(str(e)), err=True)
            ctx.exit(1)

        day = as_date(today)
        new_record = Record(
            id=_next_record_id(ledger),
            type=record_type,
            date=record_date.date() if record_date else day,
            amount=amount,
            category=category,
            note=note,
        )
        updated = ledger.with_record(new_record)

        if save:
            append_record(new_record, path)

        engine = build_engine(config, get_store(ctx, config))
        _echo_nudges(engine.on_record_saved(new_record, updated, day), output_json)

    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to check nudges: {e}"), err=True)
        ctx.exit(1)
