"""Human-friendly terminal output for advisor answers, nudges and chat."""

import os
from typing import Iterable, List, Optional
from ..contracts.chat import ChatMessage, MessageType

ADVISOR_NAME = "小森"
WIDTH = 65


def _use_ascii(ascii_mode: Optional[bool] = None) -> bool:
    """Resolve whether to use ASCII output (checked at format time)."""
    if ascii_mode is not None:
        return bool(ascii_mode)
    return os.environ.get("LEDGERADVISOR_ASCII", "").lower() in ("1", "true", "yes")


def _box(title: str, width: int = WIDTH, ascii_mode: bool = False) -> List[str]:
    """Return box-drawing header lines."""
    b = {"tl": "+", "tr": "+", "h": "-", "v": "|"} if ascii_mode else {"tl": "┌", "tr": "┐", "h": "─", "v": "│"}
    h = b["h"] * (width - 2)
    return [
        b["tl"] + h + b["tr"],
        f"{b['v']} {title:<{width - 4}} {b['v']}",
        ("+" if ascii_mode else "└") + h + ("+" if ascii_mode else "┘"),
        "",
    ]


def _rule(width: int = WIDTH, ascii_mode: bool = False) -> str:
    return ("-" if ascii_mode else "─") * width


def format_answer(question: str, response: str, provider: str = "rules", ascii_mode: Optional[bool] = None) -> str:
    """Format an advisor answer with its question."""
    ascii_mode = _use_ascii(ascii_mode)
    lines = _box(f"{ADVISOR_NAME} - Advisor ({provider})", WIDTH, ascii_mode)
    lines.append(f"Question: {question}")
    lines.append("")
    lines.append(response.rstrip())
    lines.append("")
    lines.append(_rule(WIDTH, ascii_mode))
    lines.append("NOTE: The advisor is read-only. It never changes your records.")
    return "\n".join(lines)


def format_nudges(nudges: Iterable, ascii_mode: Optional[bool] = None) -> str:
    """
    Format proactive nudges, one block per nudge.

    Accepts any objects with ``key`` and ``message`` attributes.
    """
    ascii_mode = _use_ascii(ascii_mode)
    nudges = list(nudges)
    if not nudges:
        return f"{ADVISOR_NAME}: (nothing to say right now)"

    lines = _box(f"{ADVISOR_NAME} says", WIDTH, ascii_mode)
    for nudge in nudges:
        lines.append(f"[{nudge.key}]")
        lines.append(nudge.message)
        lines.append("")
    return "\n".join(lines).rstrip()


def format_chat_message(item: ChatMessage) -> str:
    """One chat bubble as ``name> text``."""
    speaker = "你" if item.type == MessageType.USER else ADVISOR_NAME
    return f"{speaker}> {item.message}"


def format_history(history: Iterable[ChatMessage], ascii_mode: Optional[bool] = None) -> str:
    ascii_mode = _use_ascii(ascii_mode)
    history = list(history)
    if not history:
        return "No chat history."
    lines = _box(f"Chat history ({len(history)} messages)", WIDTH, ascii_mode)
    for item in history:
        lines.append(format_chat_message(item))
        lines.append("")
    return "\n".join(lines).rstrip()
