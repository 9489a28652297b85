"""Tests for the field validators."""

from datetime import date, time, timedelta

import pytest

from reservation_bot.conversation import validators
from tests.conftest import TODAY


class TestGuestCount:
    @pytest.mark.parametrize("text", ["1", "20", "4 orang", "untuk 6 orang ya"])
    def test_accepts_counts_in_range(self, text):
        assert validators.is_valid_guest_count(text)

    @pytest.mark.parametrize("text", ["0", "21", "-3", "banyak", "", "lima"])
    def test_rejects_out_of_range_or_non_numeric(self, text):
        assert not validators.is_valid_guest_count(text)

    def test_parse_takes_first_integer(self):
        assert validators.parse_guest_count("4 orang, mungkin 5") == 4


class TestTime:
    def test_opening_hour_is_valid(self):
        assert validators.parse_hour("10:00") == 10
        assert validators.is_valid_time("10:00")

    def test_closing_hour_is_valid(self):
        assert validators.parse_hour("22:00") == 22
        assert validators.is_valid_time("22:00")

    @pytest.mark.parametrize("text", ["9:00", "23:00", "jam 8 pagi", "sore", "", "jam 100", "1000"])
    def test_rejects_outside_service_hours(self, text):
        assert not validators.is_valid_time(text)

    @pytest.mark.parametrize("text", ["jam 7 malam", "7 pm", "7pm", "7 p.m.", "pukul 7 sore"])
    def test_evening_marker_shifts_hour(self, text):
        assert validators.parse_hour(text) == 19

    def test_minutes_are_kept(self):
        assert validators.parse_time("19.30") == time(19, 30)

    def test_evening_marker_ignored_from_noon(self):
        assert validators.parse_hour("jam 12 malam") == 12


class TestPhone:
    @pytest.mark.parametrize("text", ["081234567890", "6281234567890", "+6281234567890"])
    def test_accepts_local_and_international(self, text):
        assert validators.is_valid_phone(text)

    @pytest.mark.parametrize("text", ["1234567", "071234567890", "08123", "", "nomor saya rahasia"])
    def test_rejects_other_shapes(self, text):
        assert not validators.is_valid_phone(text)

    @pytest.mark.parametrize("text", ["0812-3456-7890", "0812 3456 7890", "(0812) 3456.7890"])
    def test_separators_are_stripped(self, text):
        assert validators.parse_phone(text) == "081234567890"

    def test_international_with_spaces(self):
        assert validators.parse_phone("+62 812 3456 7890") == "+6281234567890"

    @pytest.mark.parametrize("text, expected", [
        ("08123456789, 2 orang", "08123456789"),
        ("081234567890 untuk 2 orang", "081234567890"),
        ("nomor saya 0812-3456-7890 ya", "081234567890"),
    ])
    def test_other_numbers_are_not_merged(self, text, expected):
        assert validators.parse_phone(text) == expected


class TestDate:
    def test_indonesian_month_name(self):
        assert validators.parse_date("15 Maret 2026", TODAY) == date(2026, 3, 15)
        assert validators.is_future_date("15 Maret 2026", TODAY)

    def test_weekday_prefix_is_ignored(self):
        assert validators.parse_date("Minggu, 15 Maret 2026", TODAY) == date(2026, 3, 15)

    def test_english_month_name(self):
        assert validators.parse_date("March 20, 2026", TODAY) == date(2026, 3, 20)

    def test_numeric_is_day_first(self):
        assert validators.parse_date("05/03/2026", TODAY) == date(2026, 3, 5)

    def test_iso_is_year_first(self):
        assert validators.parse_date("2026-03-05", TODAY) == date(2026, 3, 5)

    def test_relative_words(self):
        assert validators.parse_date("besok", TODAY) == TODAY + timedelta(days=1)
        assert validators.parse_date("lusa saja", TODAY) == TODAY + timedelta(days=2)
        assert validators.parse_date("tomorrow", TODAY) == TODAY + timedelta(days=1)

    def test_today_is_not_future(self):
        assert not validators.is_future_date("15 Maret 2026", date(2026, 3, 15))

    def test_past_date_rejected(self):
        assert not validators.is_future_date("01/01/2020", TODAY)

    @pytest.mark.parametrize("text", ["", "halo", "31/02/2026"])
    def test_unparseable_is_rejected(self, text):
        assert not validators.is_future_date(text, TODAY)

    @pytest.mark.parametrize("text", ["untuk 20 orang", "Budi 25", "20"])
    def test_bare_number_is_not_a_day(self, text):
        assert validators.parse_date(text, TODAY) is None
        assert not validators.is_future_date(text, TODAY)

    @pytest.mark.parametrize("text", ["15 Maret", "besok", "15/03/2026", "2026-03-15", "Sabtu depan", "10 Mei"])
    def test_looks_like_date(self, text):
        assert validators.looks_like_date(text)

    @pytest.mark.parametrize("text", ["halo", "Budi", "4 orang", "081234567890", ""])
    def test_does_not_look_like_date(self, text):
        assert not validators.looks_like_date(text)


class TestConfirmation:
    @pytest.mark.parametrize("text", ["ya", "Iya", "benar", "Betul", "OK", "oke", "yes", "Ya, sudah benar."])
    def test_affirmative(self, text):
        assert validators.is_affirmative(text)

    @pytest.mark.parametrize("text", ["tidak", "bukan", "tidak benar", "ya tapi salah jamnya", "", "nanti dulu"])
    def test_not_affirmative(self, text):
        assert not validators.is_affirmative(text)

    def test_negative_words(self):
        assert validators.is_negative("nggak jadi")
        assert not validators.is_negative("ya")
