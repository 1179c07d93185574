"""
"HH:MM" time-of-day helpers.

Times are compared as minutes since midnight rather than as strings, so a
value like "9:30" is rejected instead of silently sorting after "10:00".
Only same-day ranges exist: a session cannot run past midnight.
"""

import re

from app.core.exceptions import ValidationError

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def parse_time(value: str, field: str = "time") -> int:
    """Parse a zero-padded 24h "HH:MM" string into minutes since midnight."""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string in HH:MM format", field=field, value=value)
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValidationError(f"{field} must be in HH:MM 24-hour format", field=field, value=value)
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_time_range(start: str, end: str, field: str = "end_time") -> tuple[int, int]:
    """Return (start, end) in minutes; end must be strictly after start."""
    start_min = parse_time(start, "start_time")
    end_min = parse_time(end, "end_time")
    if end_min <= start_min:
        raise ValidationError(
            f"End time {end} must be after start time {start}",
            field=field,
            value=end,
        )
    return start_min, end_min


def ranges_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # Touching ranges (a_end == b_start) share no minute
    return a_start < b_end and b_start < a_end
