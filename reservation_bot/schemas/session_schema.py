"""Per-session dialogue state."""

import copy
from dataclasses import dataclass, field, fields
from datetime import date, datetime, time
from typing import Any, Optional

from reservation_bot.conversation.state_machine import DialogueStep


class FieldAlreadySetError(Exception):
    """Raised when a collected field is written twice in one reservation attempt."""


@dataclass
class CollectedFields:
    """
    Partial reservation record accumulated across dialogue steps.

    Each field is written at most once per reservation attempt; a
    rejected confirmation clears the whole record via ``clear()``.
    """
    reservation_date: Optional[date] = None
    reservation_time: Optional[time] = None
    guest_count: Optional[int] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None

    def record(self, name: str, value: Any) -> None:
        if getattr(self, name) is not None:
            raise FieldAlreadySetError(f"Field '{name}' is already set for this attempt")
        setattr(self, name, value)

    def clear(self) -> None:
        for f in fields(self):
            setattr(self, f.name, None)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class Session:
    """
    One ongoing reservation dialogue, keyed by a caller-supplied ID.

    The dialogue engine mutates a copy of this during a turn and hands
    the copy back to the session store only when the turn succeeded.
    """
    session_id: str
    created_at: datetime
    updated_at: datetime
    step: DialogueStep = DialogueStep.ASK_DATE
    collected: CollectedFields = field(default_factory=CollectedFields)
    is_complete: bool = False
    reservation_code: Optional[str] = None
    completed_at: Optional[datetime] = None
    history: list[dict[str, str]] = field(default_factory=list)

    def copy(self) -> "Session":
        return copy.deepcopy(self)

    def add_message(self, role: str, content: str) -> None:
        self.history.append({"role": role, "content": content})

    def user_utterances(self) -> list[str]:
        return [m["content"] for m in self.history if m["role"] == "user"]

    def last_assistant_message(self) -> Optional[str]:
        for message in reversed(self.history):
            if message["role"] == "assistant":
                return message["content"]
        return None
