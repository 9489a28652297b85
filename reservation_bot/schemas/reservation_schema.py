"""Persisted reservation record."""

from datetime import date, datetime, time
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Reservation(BaseModel):
    """A confirmed table reservation, as stored in the ``reservations`` table."""

    model_config = ConfigDict(extra="ignore")

    reservation_code: str
    customer_name: str
    phone: str
    reservation_date: date
    reservation_time: time
    guest_count: int
    status: ReservationStatus = ReservationStatus.CONFIRMED
    created_at: datetime

    def to_row(self) -> dict:
        """Serialize to a JSON-safe dict keyed by column name."""
        return self.model_dump(mode="json")
