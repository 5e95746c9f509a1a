"""Shift time parsing and window validation"""

from datetime import time


INVALID_WINDOW_MESSAGE = "Shift end time must be after start time"


def parse_shift_time(value: str) -> time:
    """Parse an ``HH:mm`` string (already pattern-checked) to a time with zero seconds.

    Example:
        >>> parse_shift_time("09:30")
        datetime.time(9, 30)
    """
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes), 0)


def is_valid_window(start: time, end: time) -> bool:
    """Shifts run within one day: the end must be strictly after the start."""
    return end > start
