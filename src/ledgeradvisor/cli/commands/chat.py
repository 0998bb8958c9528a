"""Chat command - interactive conversation with 小森."""

import time
import click
from ...chat.responder import AdvisorResponder
from ...chat.session import ChatSession, QUICK_ACTIONS
from ...presentation.human_formatter import ADVISOR_NAME, format_chat_message
from ...utils.errors import LedgerAdvisorError
from ...utils.logging import get_logger
from ..utils import DATE_FORMATS, as_date, format_error, get_config, get_store, load_ledger_arg

logger = get_logger("cli.chat")

TYPING_DELAY_S = 0.02

HELP_TEXT = "\n".join(
    [f"  /{i} {text}" for i, text in enumerate(QUICK_ACTIONS, 1)]
    + ["  /clear 清除對話紀錄", "  /help 顯示說明", "  /quit 離開"]
)


def _say(text: str, thinking_ms: int = 0, animate: bool = False) -> None:
    """Print an advisor reply, optionally with a thinking pause and typing effect."""
    if not animate:
        click.echo(f"{ADVISOR_NAME}> {text}")
        click.echo("")
        return

    click.echo(f"{ADVISOR_NAME} 正在思考...")
    time.sleep(thinking_ms / 1000)
    click.echo(f"{ADVISOR_NAME}> ", nl=False)
    for char in text:
        click.echo(char, nl=False)
        time.sleep(TYPING_DELAY_S)
    click.echo("")
    click.echo("")


@click.command()
@click.argument('ledger_path', type=click.Path(exists=False))
@click.option('--today', type=click.DateTime(formats=DATE_FORMATS), default=None, help='Chat as of this date (YYYY-MM-DD)')
@click.option('--animate', is_flag=True, help='Simulate thinking time and typing')
@click.pass_context
def chat(ctx, ledger_path, today, animate):
    """
    Chat with 小森 about a ledger.

    Type a question, or /1-/4 for quick questions, /clear to reset the
    conversation and /quit to leave.
    """
    try:
        config = get_config(ctx)
        try:
            _, ledger = load_ledger_arg(ledger_path)
        except FileNotFoundError as e:
            click.echo(format_error(str(e)), err=True)
            ctx.exit(1)

        day = as_date(today)
        session = ChatSession(ledger, get_store(ctx, config), AdvisorResponder(config.chat), config.chat)

        for item in session.open(day):
            click.echo(format_chat_message(item))
            click.echo("")
        click.echo("快捷問題：")
        click.echo(HELP_TEXT)
        click.echo("")

        while True:
            try:
                text = click.prompt("你", default="", show_default=False, prompt_suffix="> ")
            except click.exceptions.Abort:
                click.echo("")
                break

            command = text.strip()
            if command in ("/quit", "/exit"):
                break
            if command == "/help":
                click.echo(HELP_TEXT)
                continue
            if command == "/clear":
                session.clear()
                click.echo("對話紀錄已清除。")
                for item in session.open(day):
                    _say(item.message)
                continue
            if command.startswith("/") and command[1:].isdigit():
                index = int(command[1:])
                if not 1 <= index <= len(QUICK_ACTIONS):
                    click.echo(f"請輸入 /1 到 /{len(QUICK_ACTIONS)}。")
                    continue
                click.echo(f"你> {QUICK_ACTIONS[index - 1]}")
                turn = session.quick_action(index, day)
            else:
                turn = session.send(command, day)

            if turn is None:
                continue
            _say(turn.reply, turn.thinking_ms, animate)

        click.echo("下次見！")

    except LedgerAdvisorError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(1)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(format_error(f"Chat failed: {e}"), err=True)
        ctx.exit(1)
