"""
Reservation commit: code generation and the single write to storage.

Both dialogue engines finish through ``ReservationCommitter.commit``.
A commit issues exactly one ``insert`` and never retries; a failed write
surfaces as ReservationSinkError and the caller leaves the session
untouched.
"""

import random
import re
import threading
import time as _time
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from reservation_bot.logging_context import get_session_logger
from reservation_bot.schemas.reservation_schema import Reservation, ReservationStatus
from reservation_bot.storage.base import ReservationSink
from reservation_bot.utils import Clock

logger = get_session_logger(__name__)

RESERVATION_CODE_PREFIX = "RES"
RESERVATION_CODE_PATTERN = re.compile(r"^RES\d{11}$")

DEFAULT_CUSTOMER_NAME = "Customer"
DEFAULT_RESERVATION_TIME = time(18, 0)


class _MonotonicMillis:
    """Millisecond timestamps that never repeat or go backwards within a process."""

    def __init__(self, source: Callable[[], int]) -> None:
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            value = max(self._source(), self._last + 1)
            self._last = value
            return value


_millis = _MonotonicMillis(lambda: _time.time_ns() // 1_000_000)


def generate_reservation_code(
    millis: Callable[[], int] = _millis,
    rng: Optional[random.Random] = None,
) -> str:
    """``RES`` + last 8 digits of a monotonic ms timestamp + 3-digit random suffix.

    Codes are not guaranteed unique across processes; storage rejects a
    duplicate insert and the guest can simply confirm again.
    """
    suffix = (rng or random).randint(0, 999)
    return f"{RESERVATION_CODE_PREFIX}{str(millis())[-8:]}{suffix:03d}"


class ReservationCommitter:
    """Builds the Reservation record and performs the one storage write."""

    def __init__(
        self,
        sink: ReservationSink,
        clock: Clock,
        code_factory: Callable[[], str] = generate_reservation_code,
    ) -> None:
        self._sink = sink
        self._clock = clock
        self._code_factory = code_factory

    @property
    def sink(self) -> ReservationSink:
        return self._sink

    def build(
        self,
        *,
        customer_name: Optional[str],
        phone: str,
        reservation_date: Optional[date],
        reservation_time: Optional[time],
        guest_count: int,
    ) -> Reservation:
        """Assemble a confirmed reservation; missing optional parts get defaults."""
        now: datetime = self._clock()
        return Reservation(
            reservation_code=self._code_factory(),
            customer_name=customer_name or DEFAULT_CUSTOMER_NAME,
            phone=phone,
            reservation_date=reservation_date or (now.date() + timedelta(days=1)),
            reservation_time=reservation_time or DEFAULT_RESERVATION_TIME,
            guest_count=guest_count,
            status=ReservationStatus.CONFIRMED,
            created_at=now,
        )

    async def commit(self, reservation: Reservation) -> Reservation:
        """Write the reservation once. Raises ReservationSinkError on failure."""
        stored = await self._sink.insert(reservation)
        logger.info(
            "Reservation committed: %s (%d guests on %s at %s)",
            stored.reservation_code, stored.guest_count,
            stored.reservation_date, stored.reservation_time,
        )
        return stored
