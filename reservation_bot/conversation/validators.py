"""
Field validators for the reservation intake dialogue.

Every function here is pure and total: user text never raises, it only
fails validation. ``parse_*`` functions return the structured value or
None; ``is_*`` functions are the boolean predicates the dialogue engine
gates each step on.

Usage:
    is_future_date("Sabtu, 15 Maret 2026", today=date(2026, 1, 10))  # True
    parse_time("jam 7 malam")                                       # time(19, 0)
    is_valid_phone("0812-3456-7890")                                # True
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as dtparser

from reservation_bot.config import settings
from reservation_bot.utils import make_clock, normalize_phone

OPENING_HOUR = settings.restaurant.opening_hour
CLOSING_HOUR = settings.restaurant.closing_hour
MIN_GUESTS = settings.restaurant.min_guests
MAX_GUESTS = settings.restaurant.max_guests

PHONE_PATTERN = re.compile(r"^(?:08|\+?62)\d{8,13}$")

AFFIRMATIVE_WORDS = ("ya", "iya", "benar", "betul", "ok", "oke", "yes")
NEGATIVE_WORDS = (
    "tidak", "tdk", "bukan", "salah", "no", "gak", "ga", "nggak",
    "enggak", "jangan", "batal",
)

_AFFIRMATIVE_RE = re.compile(r"\b(?:" + "|".join(AFFIRMATIVE_WORDS) + r")\b", re.IGNORECASE)
_NEGATIVE_RE = re.compile(r"\b(?:" + "|".join(NEGATIVE_WORDS) + r")\b", re.IGNORECASE)

_RELATIVE_DAYS = {
    "lusa": 2,
    "besok": 1,
    "tomorrow": 1,
}

_HOUR_RE = re.compile(r"(?<!\d)(\d{1,2})(?:\s*[:.]\s*(\d{2}))?(?!\d)")
_EVENING_RE = re.compile(r"(?<![a-z])(?:(?:pm|sore|malam)\b|p\.m\.)", re.IGNORECASE)
_INTEGER_RE = re.compile(r"-?\d+")
# Digit groups after the first need 3+ digits, so "0812 3456 7890" is one
# number but "081234567890 2 orang" stops before the party size.
_PHONE_CANDIDATE_RE = re.compile(r"\+?\(?\d+\)?(?:[\s.-]\d{3,})*")
_ISO_DATE_RE = re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b")


class IndonesianParserInfo(dtparser.parserinfo):
    """dateutil parser vocabulary with Indonesian month and weekday names."""

    MONTHS = [
        ("Jan", "Januari", "January"),
        ("Feb", "Februari", "February", "Pebruari"),
        ("Mar", "Maret", "March"),
        ("Apr", "April"),
        ("Mei", "May"),
        ("Jun", "Juni", "June"),
        ("Jul", "Juli", "July"),
        ("Agu", "Agt", "Agustus", "Aug", "August"),
        ("Sep", "Sept", "September"),
        ("Okt", "Oktober", "Oct", "October"),
        ("Nov", "Nopember", "November"),
        ("Des", "Desember", "Dec", "December"),
    ]
    WEEKDAYS = [
        ("Sen", "Senin", "Mon", "Monday"),
        ("Sel", "Selasa", "Tue", "Tuesday"),
        ("Rab", "Rabu", "Wed", "Wednesday"),
        ("Kam", "Kamis", "Thu", "Thursday"),
        ("Jum", "Jumat", "Fri", "Friday"),
        ("Sab", "Sabtu", "Sat", "Saturday"),
        ("Min", "Minggu", "Sun", "Sunday"),
    ]
    JUMP = dtparser.parserinfo.JUMP + ["tanggal", "tgl", "hari", "pada", "bulan", "tahun"]


_PARSER_INFO = IndonesianParserInfo(dayfirst=True)
_ISO_PARSER_INFO = IndonesianParserInfo(dayfirst=False, yearfirst=True)

# Weekday abbreviations ("sen", "min", "sel") are ordinary Indonesian words,
# so only full weekday names count as a date mention.
_DATE_WORDS = sorted(
    {name.lower() for names in IndonesianParserInfo.MONTHS for name in names}
    | {name.lower() for names in IndonesianParserInfo.WEEKDAYS for name in names if len(name) > 3}
    | set(_RELATIVE_DAYS),
    key=len,
    reverse=True,
)
_NAMED_DATE_RE = re.compile(r"\b(?:" + "|".join(_DATE_WORDS) + r")\b", re.IGNORECASE)
_NUMERIC_DATE_RE = re.compile(
    r"\b\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?\b|\b\d{1,2}\.\d{1,2}\.\d{2,4}\b|\b\d{4}-\d{1,2}-\d{1,2}\b"
)

_clock = make_clock(settings.restaurant.timezone)


def _today() -> date:
    return _clock().date()


# ---------------------------------------------------------------------- #
# Date
# ---------------------------------------------------------------------- #

def looks_like_date(text: str) -> bool:
    """Cheap shape check: does the text mention a date at all?"""
    if not text:
        return False
    return bool(_NAMED_DATE_RE.search(text) or _NUMERIC_DATE_RE.search(text))


def parse_date(text: str, today: Optional[date] = None) -> Optional[date]:
    """Parse free-form date text, resolving missing parts against ``today``.

    Text without a month, weekday, relative day word or numeric date shape
    is not a date, so "untuk 20 orang" is never read as the 20th.
    """
    if not text or len(text.strip()) < 3 or not looks_like_date(text):
        return None
    today = today or _today()
    lower = text.lower()

    for word, offset in _RELATIVE_DAYS.items():
        if re.search(rf"\b{word}\b", lower):
            return today + timedelta(days=offset)

    info = _ISO_PARSER_INFO if _ISO_DATE_RE.search(text) else _PARSER_INFO
    try:
        parsed = dtparser.parse(
            text,
            parserinfo=info,
            fuzzy=True,
            default=datetime.combine(today, time()),
        )
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def is_future_date(text: str, today: Optional[date] = None) -> bool:
    """True iff the text is a real calendar date strictly after today."""
    today = today or _today()
    parsed = parse_date(text, today)
    return parsed is not None and parsed > today


# ---------------------------------------------------------------------- #
# Time
# ---------------------------------------------------------------------- #

def parse_time(text: str) -> Optional[time]:
    """Extract the leading clock time; an evening marker shifts hours below 12."""
    if not text:
        return None
    match = _HOUR_RE.search(text)
    if match is None:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    if hour < 12 and _EVENING_RE.search(text[match.end():]):
        hour += 12
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def parse_hour(text: str) -> Optional[int]:
    parsed = parse_time(text)
    return parsed.hour if parsed is not None else None


def is_valid_time(text: str) -> bool:
    """True iff the leading hour falls inside the service window (inclusive)."""
    hour = parse_hour(text)
    return hour is not None and OPENING_HOUR <= hour <= CLOSING_HOUR


# ---------------------------------------------------------------------- #
# Party size
# ---------------------------------------------------------------------- #

def parse_guest_count(text: str) -> Optional[int]:
    if not text:
        return None
    match = _INTEGER_RE.search(text)
    return int(match.group()) if match else None


def is_valid_guest_count(text: str) -> bool:
    count = parse_guest_count(text)
    return count is not None and MIN_GUESTS <= count <= MAX_GUESTS


# ---------------------------------------------------------------------- #
# Phone
# ---------------------------------------------------------------------- #

def parse_phone(text: str) -> Optional[str]:
    """Return the first valid local/intl mobile number in the text, normalized."""
    if not text:
        return None
    for match in _PHONE_CANDIDATE_RE.finditer(text):
        normalized = normalize_phone(match.group())
        if PHONE_PATTERN.match(normalized):
            return normalized
    return None


def is_valid_phone(text: str) -> bool:
    return parse_phone(text) is not None


# ---------------------------------------------------------------------- #
# Confirmation
# ---------------------------------------------------------------------- #

def is_negative(text: str) -> bool:
    return bool(text) and bool(_NEGATIVE_RE.search(text))


def is_affirmative(text: str) -> bool:
    """True iff the reply contains a yes-word and no negation ("tidak benar" is a no)."""
    if not text:
        return False
    return bool(_AFFIRMATIVE_RE.search(text)) and not is_negative(text)
