from reservation_bot.schemas.reply_schema import ReplyDirective, ReplyIntent
from reservation_bot.schemas.reservation_schema import Reservation, ReservationStatus
from reservation_bot.schemas.session_schema import CollectedFields, Session

__all__ = [
    "CollectedFields", "Session",
    "Reservation", "ReservationStatus",
    "ReplyDirective", "ReplyIntent",
]
