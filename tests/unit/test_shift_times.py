"""Unit tests for shift time parsing and window validation"""

from datetime import time

import pytest
from pydantic import ValidationError

from convohub.shifts.schemas import ShiftCreate
from convohub.shifts.service import is_valid_window, parse_shift_time


def test_parse_shift_time():
    assert parse_shift_time("09:30") == time(9, 30, 0)
    assert parse_shift_time("00:00") == time(0, 0)
    assert parse_shift_time("23:59") == time(23, 59)


class TestWindow:

    def test_end_after_start(self):
        assert is_valid_window(time(9, 0), time(17, 0))

    def test_equal_bounds_rejected(self):
        assert not is_valid_window(time(9, 0), time(9, 0))

    def test_overnight_rejected(self):
        """Shifts stay within one day"""
        assert not is_valid_window(time(22, 0), time(6, 0))


class TestShiftTimeFormat:

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "09:00:00", "noon"])
    def test_invalid_formats(self, value):
        with pytest.raises(ValidationError):
            ShiftCreate(shift_name="Morning", shift_start_time=value, shift_end_time="17:00")

    def test_valid_format(self):
        shift = ShiftCreate(shift_name="Morning", shift_start_time="08:00", shift_end_time="16:30")
        assert shift.shift_end_time == "16:30"
