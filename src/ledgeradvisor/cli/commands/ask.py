"""Ask command - one question to the advisor (read-only, advisory only)."""

import json
import click
from ...advisor import get_advisor
from ...presentation.human_formatter import format_answer
from ...utils.errors import LedgerAdvisorError
from ...utils.logging import get_logger
from ..utils import DATE_FORMATS, as_date, format_error, get_config, load_ledger_arg

logger = get_logger("cli.ask")

DISCLAIMER = "The advisor is read-only. It cannot add, edit or delete records."


@click.command()
@click.argument('question', type=str)
@click.argument('ledger_path', type=click.Path(exists=False))
@click.option('--provider', default=None, help='Advisor provider: rules, ollama or none (default: from config)')
@click.option('--model', default=None, help='Ollama model name (default: from config)')
@click.option('--today', type=click.DateTime(formats=DATE_FORMATS), default=None, help='Answer as of this date (YYYY-MM-DD)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON format')
@click.pass_context
def ask(ctx, question, ledger_path, provider, model, today, output_json):
    """
    Ask the advisor a question about a ledger.

    Examples:
        ledger-advisor ask "本月支出分析" ledger.json
        ledger-advisor ask "12/7 買了什麼" ledger.json --today 2024-12-10
        ledger-advisor ask "我該怎麼省錢" ledger.json --provider ollama --model llama3.1
    """
    try:
        config = get_config(ctx)
        if model:
            config.ai.model = model

        try:
            _, ledger = load_ledger_arg(ledger_path)
        except FileNotFoundError as e:
            click.echo(format_error(str(e)), err=True)
            ctx.exit(1)

        advisor = get_advisor(provider, config)
        provider_name = (provider or config.ai.provider).lower()
        if advisor is None:
            click.echo(format_error(
                "Advisor is disabled (provider 'none').",
                "Use --provider rules or set ai.provider in your config."
            ), err=True)
            ctx.exit(1)

        if not advisor.is_available():
            click.echo(format_error(f"Advisor provider '{provider_name}' is not available."), err=True)
            ctx.exit(1)

        response = advisor.ask(ledger, question, as_date(today))

        if output_json:
            result = {
                "advisory": True,
                "provider": provider_name,
                "question": question,
                "response": response,
                "disclaimer": DISCLAIMER,
            }
            if provider_name == "ollama":
                result["model"] = config.ai.model
            click.echo(json.dumps(result, ensure_ascii=False, indent=2))
        else:
            click.echo(format_answer(question, response, provider_name))

    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Failed to get advisor response: {e}"), err=True)
        ctx.exit(1)
