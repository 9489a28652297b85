"""
In-memory reservation storage.

Used when no Supabase credentials are configured, by the console demo,
and by the test suite. Data lives only as long as the process.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from reservation_bot.schemas.reservation_schema import Reservation, ReservationStatus
from reservation_bot.storage.base import (
    DEFAULT_LIST_LIMIT,
    ConversationLog,
    ReservationSink,
    ReservationSinkError,
)

logger = logging.getLogger(__name__)


class InMemoryReservationSink(ReservationSink):
    """Reservation store backed by a dict keyed on reservation code."""

    def __init__(self) -> None:
        self._reservations: dict[str, Reservation] = {}
        self.insert_calls = 0

    def __len__(self) -> int:
        return len(self._reservations)

    async def insert(self, reservation: Reservation) -> Reservation:
        self.insert_calls += 1
        if reservation.reservation_code in self._reservations:
            raise ReservationSinkError(
                f"Duplicate reservation code: {reservation.reservation_code}"
            )
        stored = reservation.model_copy()
        self._reservations[stored.reservation_code] = stored
        logger.info(
            "Reservation stored: %s for %s on %s at %s",
            stored.reservation_code, stored.customer_name,
            stored.reservation_date, stored.reservation_time,
        )
        return stored.model_copy()

    async def list_recent(
        self, limit: int = DEFAULT_LIST_LIMIT, newest_first: bool = True
    ) -> list[Reservation]:
        ordered = sorted(
            self._reservations.values(),
            key=lambda r: r.created_at,
            reverse=newest_first,
        )
        return [r.model_copy() for r in ordered[:limit]]

    async def get_by_code(self, code: str) -> Optional[Reservation]:
        found = self._reservations.get(code)
        return found.model_copy() if found else None

    async def update_status(
        self, code: str, status: ReservationStatus
    ) -> Optional[Reservation]:
        found = self._reservations.get(code)
        if found is None:
            return None
        found.status = status
        logger.info("Reservation %s status -> %s", code, status.value)
        return found.model_copy()

    def reset(self) -> None:
        """Clear all reservations. Used by test fixtures for isolation."""
        self._reservations.clear()
        self.insert_calls = 0


@dataclass
class LoggedTurn:
    session_id: str
    user_message: str
    bot_response: str


class InMemoryConversationLog(ConversationLog):
    """Keeps the audit trail in a list, newest last."""

    def __init__(self) -> None:
        self.entries: list[LoggedTurn] = []

    async def append(self, session_id: str, user_message: str, bot_response: str) -> None:
        self.entries.append(LoggedTurn(session_id, user_message, bot_response))

    def for_session(self, session_id: str) -> list[LoggedTurn]:
        return [e for e in self.entries if e.session_id == session_id]
