"""
Best-effort field extraction from free-form conversation text.

Only the freeform dialogue mode uses this, to recover a reservation
record from the guest's utterances once they confirm. The results are
heuristic and non-authoritative: the guided state machine is the
primary path and never consults this module.

Rules:
    phone       first phone-shaped substring across all utterances
    guest_count first "<n> orang|org|pax|people" match
    name        first short, digit-free, 1-4 word utterance from the
                fourth user turn on (earlier turns are usually greetings)
    date / time first utterance that mentions a future date / a clock time
                inside service hours
"""

import re
from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from reservation_bot.conversation import validators

PHONE_SEARCH_PATTERN = re.compile(r"(?<!\d)\+?(?:08|62)\d{8,13}(?!\d)")
DIGIT_DASH = re.compile(r"(?<=\d)-(?=\d)")
GUEST_COUNT_PATTERN = re.compile(r"\b(\d+)\s*(?:orang|org|pax|people)\b", re.IGNORECASE)
CLOCK_TIME_PATTERN = re.compile(r"\b(?:jam|pukul|pkl)\s*\d{1,2}\b|\b\d{1,2}[:.]\d{2}\b", re.IGNORECASE)

NAME_MAX_LENGTH = 50
NAME_MAX_WORDS = 4
NAME_MIN_TURN_INDEX = 3


@dataclass
class ExtractedFields:
    """Partial record recovered from free text. Any field may be missing."""
    reservation_date: Optional[date] = None
    reservation_time: Optional[time] = None
    guest_count: Optional[int] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None

    def has_minimum(self) -> bool:
        """Phone and party size are required before anything is committed."""
        return self.phone is not None and self.guest_count is not None


def extract_phone(text: str) -> Optional[str]:
    joined = DIGIT_DASH.sub("", text)
    for match in PHONE_SEARCH_PATTERN.finditer(joined):
        phone = validators.parse_phone(match.group())
        if phone is not None:
            return phone
    return None


def extract_guest_count(text: str) -> Optional[int]:
    match = GUEST_COUNT_PATTERN.search(text)
    return int(match.group(1)) if match else None


def extract_time(text: str) -> Optional[time]:
    match = CLOCK_TIME_PATTERN.search(text)
    if match is None:
        return None
    candidate = text[match.start():]
    return validators.parse_time(candidate) if validators.is_valid_time(candidate) else None


def _looks_like_name(text: str) -> bool:
    stripped = text.strip()
    if not stripped or len(stripped) >= NAME_MAX_LENGTH:
        return False
    if any(c.isdigit() for c in stripped):
        return False
    if GUEST_COUNT_PATTERN.search(stripped) or extract_phone(stripped):
        return False
    if not 1 <= len(stripped.split()) <= NAME_MAX_WORDS:
        return False
    if validators.is_affirmative(stripped) or validators.is_negative(stripped):
        return False
    return not validators.looks_like_date(stripped)


def extract_reservation_fields(
    utterances: list[str], today: Optional[date] = None
) -> ExtractedFields:
    """Scan the guest's utterances in order; the first match for each field wins."""
    fields = ExtractedFields()
    for index, text in enumerate(utterances):
        if fields.phone is None:
            fields.phone = extract_phone(text)

        if fields.guest_count is None:
            fields.guest_count = extract_guest_count(text)

        if (
            fields.reservation_date is None
            and validators.looks_like_date(text)
            and validators.is_future_date(text, today)
        ):
            fields.reservation_date = validators.parse_date(text, today)

        if fields.reservation_time is None:
            fields.reservation_time = extract_time(text)

        if (
            fields.customer_name is None
            and index >= NAME_MIN_TURN_INDEX
            and _looks_like_name(text)
        ):
            fields.customer_name = text.strip()

    return fields
