"""Tests for best-effort field extraction from free text."""

from datetime import date, time

from reservation_bot.conversation.extractor import (
    extract_guest_count,
    extract_phone,
    extract_reservation_fields,
    extract_time,
)
from tests.conftest import TODAY

CONVERSATION = [
    "Halo, mau reservasi",
    "15 Maret 2026",
    "jam 7 malam",
    "4 orang",
    "Budi Santoso",
    "nomornya 0812-3456-7890",
    "ya benar",
]


class TestSingleFields:
    def test_phone_inside_sentence(self):
        assert extract_phone("hubungi saya di 081234567890 ya") == "081234567890"

    def test_phone_with_dashes(self):
        assert extract_phone("0812-3456-7890") == "081234567890"

    def test_international_phone(self):
        assert extract_phone("+6281234567890") == "+6281234567890"

    def test_no_phone(self):
        assert extract_phone("tanggal 15/03/2026") is None

    def test_guest_count_units(self):
        assert extract_guest_count("kami 4 orang") == 4
        assert extract_guest_count("6 PAX") == 6
        assert extract_guest_count("3org") == 3
        assert extract_guest_count("4") is None

    def test_time_needs_a_clock_marker(self):
        assert extract_time("jam 7 malam") == time(19, 0)
        assert extract_time("sekitar 19.30") == time(19, 30)
        assert extract_time("4 orang") is None

    def test_time_outside_service_hours(self):
        assert extract_time("jam 23:00") is None


class TestConversation:
    def test_extracts_every_field(self):
        fields = extract_reservation_fields(CONVERSATION, today=TODAY)
        assert fields.phone == "081234567890"
        assert fields.guest_count == 4
        assert fields.customer_name == "Budi Santoso"
        assert fields.reservation_date == date(2026, 3, 15)
        assert fields.reservation_time == time(19, 0)
        assert fields.has_minimum()

    def test_first_match_wins(self):
        fields = extract_reservation_fields(["2 orang", "eh 5 orang"], today=TODAY)
        assert fields.guest_count == 2

    def test_early_turns_are_not_names(self):
        fields = extract_reservation_fields(["Halo", "Selamat sore"], today=TODAY)
        assert fields.customer_name is None

    def test_yes_no_and_dates_are_not_names(self):
        utterances = ["halo", "besok", "jam 7", "ya", "tidak", "Sabtu depan", "Rina"]
        fields = extract_reservation_fields(utterances, today=TODAY)
        assert fields.customer_name == "Rina"

    def test_missing_phone_is_not_enough(self):
        fields = extract_reservation_fields(["halo", "4 orang"], today=TODAY)
        assert not fields.has_minimum()

    def test_past_date_is_ignored(self):
        fields = extract_reservation_fields(["01/01/2020"], today=TODAY)
        assert fields.reservation_date is None
