"""Tests for session count parsing and date recurrence."""

from datetime import date, datetime

import pytest

from clinic.exceptions import ValidationError
from clinic.services.scheduler.recurrence import (
    compute_session_dates,
    parse_session_count,
    parse_start_date,
)


class TestComputeSessionDates:
    def test_weekly(self):
        """Weekly from a Monday lands on consecutive Mondays."""
        dates = compute_session_dates(date(2024, 1, 1), 3, "weekly")

        assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]

    def test_daily(self):
        dates = compute_session_dates(date(2024, 2, 28), 3, "daily")

        assert dates == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_biweekly(self):
        dates = compute_session_dates(date(2024, 1, 1), 2, "biweekly")

        assert dates == [date(2024, 1, 1), date(2024, 1, 15)]

    def test_monthly_clamps_without_drift(self):
        """Jan 31 clamps to Feb 29 but March is back on the 31st."""
        dates = compute_session_dates(date(2024, 1, 31), 4, "monthly")

        assert dates == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_monthly_crosses_year(self):
        dates = compute_session_dates(date(2024, 11, 15), 3, "monthly")

        assert dates[-1] == date(2025, 1, 15)

    def test_dates_strictly_increase(self):
        for frequency in ("daily", "weekly", "biweekly", "monthly"):
            dates = compute_session_dates(date(2024, 1, 31), 12, frequency)
            assert len(dates) == 12
            assert all(a < b for a, b in zip(dates, dates[1:]))

    def test_unknown_frequency(self):
        with pytest.raises(ValidationError, match="Invalid frequency"):
            compute_session_dates(date(2024, 1, 1), 3, "fortnightly")


class TestParseSessionCount:
    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        (50, 50),
        ("3", 3),
        (" 12 ", 12),
        (4.0, 4),
    ])
    def test_accepted(self, value, expected):
        assert parse_session_count(value) == expected

    @pytest.mark.parametrize("value", [0, 51, -1, "abc", "", None, 2.5, True, [3]])
    def test_rejected(self, value):
        """Anything outside [1, 50] or non-integer is a validation error."""
        with pytest.raises(ValidationError, match="between 1 and 50"):
            parse_session_count(value)

    def test_custom_bound(self):
        assert parse_session_count(10, max_sessions=10) == 10
        with pytest.raises(ValidationError):
            parse_session_count(11, max_sessions=10)


class TestParseStartDate:
    def test_iso_string(self):
        assert parse_start_date("2024-01-01") == date(2024, 1, 1)

    def test_date_passthrough(self):
        assert parse_start_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_datetime_reduced_to_date(self):
        """A datetime start keeps only its calendar date."""
        parsed = parse_start_date(datetime(2024, 1, 1, 15, 30))

        assert parsed == date(2024, 1, 1)
        assert type(parsed) is date
        assert parsed.isoformat() == "2024-01-01"

    def test_bad_format(self):
        with pytest.raises(ValidationError):
            parse_start_date("01/01/2024")
