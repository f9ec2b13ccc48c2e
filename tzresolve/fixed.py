"""
fixed.py - Fixed offset time zone strings

Recognises "UTC", "GMT", "Z" and offsets such as "UTC+02:00", "GMT-5",
"+0530" or "-03:30:15", and builds the matching FixedTimeZone.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import re

from .zones import FixedTimeZone

FIXED_TIME_ZONE_REGEX = re.compile(
    r"""
    (?P<name>Z|UTC|GMT)
    |
    (?:UTC|GMT)?
    (?P<sign>[+-])
    (?P<hour>2[0-3]|[01]\d|\d)
    (?:
        :?(?P<minute>[0-5]\d)
        (?::?(?P<second>[0-5]\d))?
    )?
    """,
    re.VERBOSE,
)


def is_fixed(name: str) -> bool:
    """Whether name is a fixed offset time zone string."""
    return FIXED_TIME_ZONE_REGEX.fullmatch(name) is not None


def format_offset(seconds: int) -> str:
    """Render an offset in seconds as +HH:MM, appending :SS when needed."""
    sign = '-' if seconds < 0 else '+'
    minutes, second = divmod(abs(seconds), 60)
    hour, minute = divmod(minutes, 60)
    if second:
        return f"{sign}{hour:02d}:{minute:02d}:{second:02d}"
    return f"{sign}{hour:02d}:{minute:02d}"


def parse_fixed(name: str) -> FixedTimeZone:
    """
    Build the FixedTimeZone described by name.

    Raises ValueError when name is not a fixed offset string.
    """
    match = FIXED_TIME_ZONE_REGEX.fullmatch(name)
    if match is None:
        raise ValueError(f"Not a fixed offset time zone: {name!r}")

    if match.group('name'):
        return FixedTimeZone('GMT' if match.group('name') == 'GMT' else 'UTC', 0)

    seconds = (
        int(match.group('hour')) * 3600
        + int(match.group('minute') or 0) * 60
        + int(match.group('second') or 0)
    )
    if match.group('sign') == '-':
        seconds = -seconds

    if seconds == 0:
        return FixedTimeZone('UTC', 0)
    return FixedTimeZone(f"UTC{format_offset(seconds)}", seconds)
