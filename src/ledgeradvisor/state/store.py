"""JSON-file persistence for chat history, dialog usage and streak data."""

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from pydantic import ValidationError
from ..contracts.chat import ChatMessage
from ..utils.errors import StateStoreError
from ..utils.logging import get_logger

logger = get_logger("state.store")

DEFAULT_HISTORY_LIMIT = 80


def _empty_state() -> Dict[str, Any]:
    return {
        "chat_history": [],
        "dialogs_used": {},
        "streak": 0,
        "last_record_date": None,
        "last_streak": 0,
    }


class StateStore:
    """
    Advisor state kept in a single JSON file.

    Every accessor reads the file afresh so that several processes (a chat
    session and a nudge run, say) see each other's writes. A missing or
    unreadable file behaves like an empty state.
    """

    def __init__(self, path: Union[str, Path], history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.path = Path(path)
        self.history_limit = history_limit

    def __repr__(self) -> str:
        return f"StateStore(path={self.path}, history_limit={self.history_limit})"

    def load(self) -> Dict[str, Any]:
        """Read the raw state, falling back to an empty one."""
        state = _empty_state()
        if not self.path.exists():
            return state

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read advisor state from {self.path}: {e}")
            return state

        if not isinstance(data, dict):
            logger.warning(f"Advisor state in {self.path} is not an object, ignoring it")
            return state

        state.update(data)
        return state

    def save(self, state: Dict[str, Any]) -> None:
        """Write the raw state."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(state, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise StateStoreError(f"Failed to save advisor state to {self.path}: {e}")

    # Chat history

    def get_chat_history(self) -> List[ChatMessage]:
        raw = self.load().get("chat_history")
        if not isinstance(raw, list):
            return []

        history = []
        for item in raw:
            try:
                history.append(ChatMessage(**item))
            except (TypeError, ValidationError):
                logger.debug(f"Skipping malformed chat history item: {item!r}")
        return history

    def set_chat_history(self, history: List[ChatMessage]) -> None:
        state = self.load()
        kept = history[-self.history_limit:] if self.history_limit > 0 else []
        state["chat_history"] = [m.model_dump() for m in kept]
        self.save(state)

    def push_chat_history_item(self, item: ChatMessage) -> None:
        history = self.get_chat_history()
        history.append(item)
        self.set_chat_history(history)

    def clear_chat_history(self) -> None:
        state = self.load()
        state["chat_history"] = []
        self.save(state)

    # Dialog usage

    def used_dialog_keys(self, day: dt.date) -> List[str]:
        used = self.load().get("dialogs_used")
        if not isinstance(used, dict):
            return []
        keys = used.get(day.isoformat(), [])
        return list(keys) if isinstance(keys, list) else []

    def mark_dialog_key_used(self, dialog_key: str, day: dt.date) -> None:
        """Record that a dialog key was shown on ``day``; older days are dropped."""
        state = self.load()
        used = self.used_dialog_keys(day)
        if dialog_key not in used:
            used.append(dialog_key)
        state["dialogs_used"] = {day.isoformat(): used}
        self.save(state)

    # Streak

    def get_streak(self) -> int:
        return _as_int(self.load().get("streak"))

    def get_last_streak(self) -> int:
        return _as_int(self.load().get("last_streak"))

    def get_last_record_date(self) -> Optional[dt.date]:
        value = self.load().get("last_record_date")
        if not value:
            return None
        try:
            return dt.date.fromisoformat(str(value)[:10])
        except ValueError:
            logger.warning(f"Ignoring invalid last_record_date in state: {value!r}")
            return None

    def set_streak(self, streak: int, last_record_date: dt.date) -> None:
        state = self.load()
        state["streak"] = streak
        state["last_record_date"] = last_record_date.isoformat()
        self.save(state)

    def set_last_streak(self, streak: int) -> None:
        state = self.load()
        state["last_streak"] = streak
        self.save(state)


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
