"""Storage interfaces consumed by the dialogue engines and the HTTP layer."""

from abc import ABC, abstractmethod
from typing import Optional

from reservation_bot.schemas.reservation_schema import Reservation, ReservationStatus

DEFAULT_LIST_LIMIT = 50


class ReservationSinkError(Exception):
    """A reservation storage call failed or timed out."""


class ReservationSink(ABC):
    """Durable storage for confirmed reservations."""

    @abstractmethod
    async def insert(self, reservation: Reservation) -> Reservation:
        """Persist a new reservation. Raises ReservationSinkError on failure."""

    @abstractmethod
    async def list_recent(
        self, limit: int = DEFAULT_LIST_LIMIT, newest_first: bool = True
    ) -> list[Reservation]:
        """Return up to ``limit`` reservations ordered by creation time."""

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Reservation]:
        """Return one reservation, or None if the code is unknown."""

    @abstractmethod
    async def update_status(
        self, code: str, status: ReservationStatus
    ) -> Optional[Reservation]:
        """Set the status of a reservation; None if the code is unknown."""


class ConversationLog(ABC):
    """Append-only audit trail of utterance/reply pairs.

    Never read back by the dialogue engine; implementations log and
    swallow their own failures.
    """

    @abstractmethod
    async def append(self, session_id: str, user_message: str, bot_response: str) -> None:
        ...


class NullConversationLog(ConversationLog):
    async def append(self, session_id: str, user_message: str, bot_response: str) -> None:
        return None
