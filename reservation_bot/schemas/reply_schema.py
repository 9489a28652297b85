"""Reply directives emitted by the dialogue engines."""

from dataclasses import dataclass
from enum import Enum


class ReplyIntent(str, Enum):
    """What the reply has to achieve, independent of its wording."""
    WELCOME = "welcome"
    ASK_DATE = "ask_date"
    ASK_TIME = "ask_time"
    ASK_GUESTS = "ask_guests"
    ASK_NAME = "ask_name"
    ASK_CONTACT = "ask_contact"
    SUMMARY = "summary"
    INVALID_DATE = "invalid_date"
    INVALID_TIME = "invalid_time"
    INVALID_GUESTS = "invalid_guests"
    INVALID_PHONE = "invalid_phone"
    RESTART = "restart"
    CONFIRMED = "confirmed"
    ALREADY_COMPLETE = "already_complete"
    SAVE_FAILED = "save_failed"
    FREEFORM = "freeform"


@dataclass
class ReplyDirective:
    """
    A reply the guest should receive.

    ``line`` is the literal text and may be rephrased by a language model.
    ``suffix`` is appended verbatim after rendering and is never rephrased
    (it carries the reservation code).
    """
    intent: ReplyIntent
    line: str
    suffix: str = ""

    @property
    def is_error(self) -> bool:
        return self.intent.value.startswith("invalid_") or self.intent == ReplyIntent.SAVE_FAILED
