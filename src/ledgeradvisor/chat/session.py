"""Chat session: history persistence around the responder."""

import datetime as dt
from dataclasses import dataclass
from typing import List, Optional
from ..config import ChatSettings
from ..contracts.chat import ChatMessage, MessageType
from ..contracts.records import Ledger
from ..state.store import StateStore
from ..utils.logging import get_logger
from .parsing import thinking_time_ms
from .responder import AdvisorResponder, generate_welcome_message

logger = get_logger("chat.session")

QUICK_ACTIONS = (
    "本月支出分析",
    "最大支出分類是什麼",
    "預算狀況",
    "這個月和上個月比較",
)


@dataclass
class ChatTurn:
    """Advisor reply to one user message."""
    reply: str
    thinking_ms: int


class ChatSession:
    """A conversation with Mori backed by the persisted chat history."""

    def __init__(
        self,
        ledger: Ledger,
        store: StateStore,
        responder: Optional[AdvisorResponder] = None,
        settings: Optional[ChatSettings] = None,
    ):
        self.ledger = ledger
        self.store = store
        self.settings = settings or ChatSettings()
        self.responder = responder or AdvisorResponder(self.settings)

    def open(self, today: dt.date) -> List[ChatMessage]:
        """Replay the stored history, or greet and remember the greeting."""
        history = self.store.get_chat_history()
        if history:
            logger.debug(f"Replaying {len(history)} chat messages")
            return history

        welcome = ChatMessage(type=MessageType.ADVISOR, message=generate_welcome_message(self.ledger, today))
        self.store.push_chat_history_item(welcome)
        return [welcome]

    def send(self, text: str, today: dt.date) -> Optional[ChatTurn]:
        """Answer a user message; blank input is ignored."""
        message = (text or "").strip()
        if not message:
            return None

        self.store.push_chat_history_item(ChatMessage(type=MessageType.USER, message=message))
        reply = self.responder.respond(message, self.ledger, today)
        self.store.push_chat_history_item(ChatMessage(type=MessageType.ADVISOR, message=reply))

        thinking = thinking_time_ms(message, self.settings.thinking_base_ms, self.settings.thinking_step_ms)
        return ChatTurn(reply=reply, thinking_ms=thinking)

    def quick_action(self, index: int, today: dt.date) -> ChatTurn:
        """Send one of the canned questions (1-based)."""
        if index < 1 or index > len(QUICK_ACTIONS):
            raise IndexError(f"Quick action must be between 1 and {len(QUICK_ACTIONS)}")
        return self.send(QUICK_ACTIONS[index - 1], today)

    def clear(self) -> None:
        self.store.clear_chat_history()
