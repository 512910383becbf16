"""Tests for WorkingHoursCalendar and its parsers."""

import json
from types import SimpleNamespace

import pytest

from clinic.services.slots.calendar import (
    WorkingHoursCalendar,
    parse_leave_days,
    parse_working_hours,
    validate_working_hours,
)
from clinic.services.slots.config import BookingConfig, weekday_name


def _provider(working_hours=None, leave_days=None, start_time=None, end_time=None):
    return SimpleNamespace(
        working_hours=json.dumps(working_hours) if working_hours is not None else "[]",
        leave_days=json.dumps(leave_days) if leave_days is not None else "[]",
        start_time=start_time,
        end_time=end_time,
    )


class TestDefaultCalendar:
    def test_weekdays_work_weekends_off(self):
        """Default is Mon-Fri 09:00-17:00."""
        cal = WorkingHoursCalendar.from_provider(_provider(), BookingConfig())

        for day in ("monday", "tuesday", "wednesday", "thursday", "friday"):
            assert cal.window_for(day) == ("09:00", "17:00")
        assert cal.window_for("saturday") is None
        assert cal.window_for("sunday") is None

    def test_day_names_are_case_insensitive(self):
        cal = WorkingHoursCalendar.default()

        assert cal.is_working("Monday")
        assert not cal.is_working("SUNDAY")


class TestWorkingHoursConfig:
    def test_list_form(self):
        """Profile-editor list form; unlisted days are off."""
        cal = WorkingHoursCalendar.from_provider(_provider(working_hours=[
            {"day": "monday", "isWorking": True, "startTime": "10:00", "endTime": "14:00"},
            {"day": "tuesday", "isWorking": False, "startTime": "09:00", "endTime": "17:00"},
        ]))

        assert cal.window_for("monday") == ("10:00", "14:00")
        assert cal.window_for("tuesday") is None
        assert cal.window_for("wednesday") is None

    def test_keyed_form(self):
        """Keyed form with short day names; null means off."""
        cal = WorkingHoursCalendar.from_provider(_provider(working_hours={
            "mon": {"start": "08:00", "end": "12:00"},
            "sat": {"start": "09:00", "end": "13:00"},
            "sun": None,
        }))

        assert cal.window_for("monday") == ("08:00", "12:00")
        assert cal.window_for("saturday") == ("09:00", "13:00")
        assert cal.window_for("sunday") is None
        assert cal.window_for("friday") is None

    def test_flat_window_applies_to_all_days(self):
        cal = WorkingHoursCalendar.from_provider(_provider(start_time="07:00:00", end_time="15:00:00"))

        assert cal.window_for("sunday") == ("07:00", "15:00")
        assert cal.window_for("wednesday") == ("07:00", "15:00")

    def test_working_hours_win_over_flat_window(self):
        cal = WorkingHoursCalendar.from_provider(_provider(
            working_hours={"mon": {"start": "10:00", "end": "11:00"}},
            start_time="07:00",
            end_time="15:00",
        ))

        assert cal.window_for("monday") == ("10:00", "11:00")
        assert cal.window_for("tuesday") is None

    def test_unparseable_json_falls_back_to_default(self):
        provider = SimpleNamespace(working_hours="{not json", leave_days="[]", start_time=None, end_time=None)
        cal = WorkingHoursCalendar.from_provider(provider)

        assert cal.window_for("monday") == ("09:00", "17:00")
        assert cal.window_for("saturday") is None

    def test_invalid_times_entry_skipped(self):
        days = parse_working_hours(
            [{"day": "monday", "startTime": "99:00", "endTime": "17:00"}],
            BookingConfig(),
        )

        assert days == {}


    @pytest.mark.parametrize("flag,working", [(True, True), (False, False), ("false", False), ("True", True)])
    def test_is_working_flag(self, flag, working):
        """String flags are read by value, not by truthiness."""
        cal = WorkingHoursCalendar.from_provider(_provider(working_hours=[
            {"day": "saturday", "isWorking": flag, "startTime": "09:00", "endTime": "13:00"},
        ]))

        assert cal.is_working("saturday") is working

    def test_unreadable_flag_entry_skipped(self):
        days = parse_working_hours(
            [{"day": "saturday", "isWorking": "yes please", "startTime": "09:00", "endTime": "13:00"}],
            BookingConfig(),
        )

        assert days == {}


class TestValidateWorkingHours:
    def test_list_form_normalized(self):
        result = validate_working_hours([
            {"day": "Sat", "isWorking": "true", "startTime": "09:00:00", "endTime": "13:00"},
            {"day": "sunday", "isWorking": False},
        ])

        assert result == [
            {"day": "saturday", "isWorking": True, "startTime": "09:00", "endTime": "13:00"},
            {"day": "sunday", "isWorking": False},
        ]

    def test_keyed_form_normalized(self):
        result = validate_working_hours({"MON": {"start": "08:00", "end": "12:00"}, "sun": None})

        assert result == {"monday": {"start": "08:00", "end": "12:00"}, "sunday": None}

    def test_none_clears(self):
        assert validate_working_hours(None) == []

    @pytest.mark.parametrize("raw", [
        [{"day": "saturday", "startTime": "9am", "endTime": "1pm"}],
        [{"day": "someday", "startTime": "09:00", "endTime": "13:00"}],
        [{"day": "monday", "isWorking": 1}],
        [{"day": "monday", "startTime": "17:00", "endTime": "09:00"}],
        ["monday"],
        {"mon": {"start": 900, "end": "17:00"}},
        {"mon": "09:00-17:00"},
        "monday",
    ])
    def test_malformed_rejected(self, raw):
        with pytest.raises(ValueError):
            validate_working_hours(raw)

    def test_off_day_may_keep_any_window(self):
        result = validate_working_hours([{"day": "monday", "isWorking": False, "startTime": "17:00", "endTime": "09:00"}])

        assert result[0]["isWorking"] is False


class TestLeaveDays:
    def test_leave_overrides_working_day(self):
        """A leave day is never working, whatever the window says."""
        cal = WorkingHoursCalendar.from_provider(_provider(leave_days=["Monday"]))

        assert cal.is_leave_day("monday")
        assert cal.window_for("monday") is None
        assert cal.window_for("tuesday") == ("09:00", "17:00")

    def test_leave_overrides_flat_window(self):
        cal = WorkingHoursCalendar.from_provider(
            _provider(leave_days=["sunday"], start_time="09:00", end_time="17:00")
        )

        assert cal.window_for("sunday") is None
        assert cal.window_for("saturday") == ("09:00", "17:00")

    @pytest.mark.parametrize("raw,expected", [
        (None, frozenset()),
        ("", frozenset()),
        ("[]", frozenset()),
        ('["monday", "Fri", "holiday"]', frozenset({"monday", "friday"})),
        (["SUNDAY"], frozenset({"sunday"})),
        ("not json", frozenset()),
        ('{"monday": true}', frozenset()),
    ])
    def test_parse_leave_days(self, raw, expected):
        assert parse_leave_days(raw) == expected


def test_weekday_name():
    from datetime import date

    assert weekday_name(date(2024, 1, 1)) == "monday"
    assert weekday_name(date(2024, 1, 7)) == "sunday"
