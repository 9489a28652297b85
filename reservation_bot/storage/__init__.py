from reservation_bot.storage.base import (
    ConversationLog,
    NullConversationLog,
    ReservationSink,
    ReservationSinkError,
)
from reservation_bot.storage.memory import InMemoryConversationLog, InMemoryReservationSink

__all__ = [
    "ReservationSink", "ReservationSinkError",
    "ConversationLog", "NullConversationLog",
    "InMemoryReservationSink", "InMemoryConversationLog",
]
