"""Tests for reservation code generation and the commit write."""

import random
from datetime import date, time

import pytest

from reservation_bot.conversation.commit import (
    DEFAULT_CUSTOMER_NAME,
    DEFAULT_RESERVATION_TIME,
    RESERVATION_CODE_PATTERN,
    ReservationCommitter,
    _MonotonicMillis,
    generate_reservation_code,
)
from reservation_bot.schemas.reservation_schema import ReservationStatus
from reservation_bot.storage.base import ReservationSinkError


class TestReservationCode:
    def test_format(self):
        code = generate_reservation_code()
        assert RESERVATION_CODE_PATTERN.match(code)

    def test_uses_last_eight_millisecond_digits(self):
        code = generate_reservation_code(millis=lambda: 1_741_234_567_890, rng=random.Random(1))
        assert code.startswith("RES34567890")
        assert len(code) == 14

    def test_suffix_is_zero_padded(self):
        class Zero(random.Random):
            def randint(self, a, b):
                return 7

        code = generate_reservation_code(millis=lambda: 12_345_678, rng=Zero())
        assert code == "RES12345678007"

    def test_millis_never_repeat(self):
        millis = _MonotonicMillis(lambda: 1000)
        assert [millis(), millis(), millis()] == [1000, 1001, 1002]

    def test_consecutive_codes_differ(self):
        codes = {generate_reservation_code() for _ in range(50)}
        assert len(codes) == 50


class TestCommitter:
    def _committer(self, sink, clock, code="RES00000001001"):
        return ReservationCommitter(sink, clock, code_factory=lambda: code)

    def test_build_applies_defaults(self, sink, clock):
        reservation = self._committer(sink, clock).build(
            customer_name=None,
            phone="081234567890",
            reservation_date=None,
            reservation_time=None,
            guest_count=2,
        )
        assert reservation.customer_name == DEFAULT_CUSTOMER_NAME
        assert reservation.reservation_date == date(2026, 1, 11)
        assert reservation.reservation_time == DEFAULT_RESERVATION_TIME
        assert reservation.status == ReservationStatus.CONFIRMED
        assert reservation.created_at == clock()

    @pytest.mark.asyncio
    async def test_commit_writes_once(self, sink, clock):
        committer = self._committer(sink, clock)
        reservation = committer.build(
            customer_name="Budi",
            phone="081234567890",
            reservation_date=date(2026, 3, 15),
            reservation_time=time(19, 0),
            guest_count=4,
        )
        stored = await committer.commit(reservation)
        assert stored.reservation_code == "RES00000001001"
        assert sink.insert_calls == 1

    @pytest.mark.asyncio
    async def test_duplicate_code_is_rejected(self, sink, clock):
        committer = self._committer(sink, clock)
        fields = dict(
            customer_name="Budi", phone="081234567890",
            reservation_date=None, reservation_time=None, guest_count=4,
        )
        await committer.commit(committer.build(**fields))
        with pytest.raises(ReservationSinkError):
            await committer.commit(committer.build(**fields))
        assert len(sink) == 1
