"""
errors.py - Exceptions raised while resolving time zone names

All errors derive from TimeZoneError, itself a ValueError, so callers that
treat a bad zone name like any other bad argument keep working.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""


class TimeZoneError(ValueError):
    """Base class for time zone resolution errors."""


class DatabaseMissing(TimeZoneError):
    """
    The compiled database root is missing or empty.

    Raised instead of UnknownTimeZone so that a build step that never ran is
    not mistaken for a misspelled name.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f'Unable to find time zone "{name}". Try running `tzresolve-build`.'
        )


class UnknownTimeZone(TimeZoneError):
    """Name is neither a compiled zone nor a fixed offset."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Unknown time zone "{name}"')


class DisallowedClass(TimeZoneError):
    """The zone resolved but its class is excluded by the caller's mask."""

    def __init__(self, name: str, actual, mask):
        self.name = name
        self.actual = actual
        self.mask = mask
        super().__init__(
            f'The time zone "{name}" is of class `{actual!r}` which is '
            f'currently not allowed by the mask: `{mask!r}`'
        )


class CorruptTimeZoneFile(TimeZoneError):
    """A compiled zone file exists but cannot be decoded."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt compiled time zone file {path}: {reason}")


class TimeOutOfRange(TimeZoneError):
    """Instant precedes the first transition of a variable zone."""

    def __init__(self, zone_name: str, when):
        self.zone_name = zone_name
        self.when = when
        super().__init__(
            f"{when} is before the first transition of time zone \"{zone_name}\""
        )
