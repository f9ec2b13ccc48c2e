"""
zones.py - Fixed and variable time zone representations

Both zone types implement datetime.tzinfo. A FixedTimeZone has a constant
offset; a VariableTimeZone holds an immutable, strictly increasing sequence of
transitions, each pointing at the FixedTimeZone that applies from that instant.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional

from .errors import TimeOutOfRange

_MAX_OFFSET = 24 * 3600


class FixedTimeZone(tzinfo):
    """
    Time zone with a constant offset from UTC.

    utc_offset is the standard offset in seconds; dst_offset is the saving
    applied on top of it, kept separately so dst() can report it.
    """

    def __init__(self, name: str, utc_offset: int = 0, dst_offset: int = 0):
        if not -_MAX_OFFSET < utc_offset + dst_offset < _MAX_OFFSET:
            raise ValueError(
                f"Offset of time zone {name!r} must be strictly within 24 hours, "
                f"got {utc_offset + dst_offset} seconds"
            )
        self._name = name
        self._utc_offset = int(utc_offset)
        self._dst_offset = int(dst_offset)

    @property
    def name(self) -> str:
        return self._name

    @property
    def utc_offset(self) -> int:
        return self._utc_offset

    @property
    def dst_offset(self) -> int:
        return self._dst_offset

    @property
    def offset(self) -> int:
        """Total offset from UTC in seconds."""
        return self._utc_offset + self._dst_offset

    def utcoffset(self, dt):
        return timedelta(seconds=self.offset)

    def dst(self, dt):
        return timedelta(seconds=self._dst_offset)

    def tzname(self, dt):
        return self._name

    def fromutc(self, dt):
        return dt + timedelta(seconds=self.offset)

    def __repr__(self):
        if self._dst_offset:
            return (
                f"FixedTimeZone({self._name!r}, {self._utc_offset}, "
                f"{self._dst_offset})"
            )
        return f"FixedTimeZone({self._name!r}, {self._utc_offset})"

    def __str__(self):
        return self._name

    def __eq__(self, other):
        if isinstance(other, FixedTimeZone):
            return (self._name, self._utc_offset, self._dst_offset) == (
                other._name, other._utc_offset, other._dst_offset
            )
        return NotImplemented

    def __hash__(self):
        return hash((self._name, self._utc_offset, self._dst_offset))


@dataclass(frozen=True)
class Transition:
    """A change of offset taking effect at utc_datetime (naive, UTC)."""

    utc_datetime: datetime
    zone: FixedTimeZone


class VariableTimeZone(tzinfo):
    """
    Time zone whose offset changes over time.

    Instants before the first transition are not covered and raise
    TimeOutOfRange. Wall times follow PEP 495: in a repeated hour fold=0 is
    the earlier offset, and in a skipped hour fold=0 is the offset before the
    shift while fold=1 is the offset after it.
    """

    def __init__(self, name: str, transitions: Iterable[Transition]):
        transitions = tuple(transitions)
        if not transitions:
            raise ValueError(f"Time zone {name!r} requires at least one transition")

        for prev, curr in zip(transitions, transitions[1:]):
            if curr.utc_datetime <= prev.utc_datetime:
                raise ValueError(
                    f"Transitions of time zone {name!r} must be strictly increasing: "
                    f"{curr.utc_datetime} follows {prev.utc_datetime}"
                )

        self._name = name
        self._transitions = transitions
        self._instants = tuple(t.utc_datetime for t in transitions)
        # Wall clock time at which each transition starts, in its own offset
        self._local_starts = tuple(
            t.utc_datetime + timedelta(seconds=t.zone.offset) for t in transitions
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def transitions(self) -> tuple:
        return self._transitions

    def transition_at(self, utc_dt: datetime) -> Transition:
        """Return the transition in effect at a naive UTC datetime."""
        index = bisect_right(self._instants, utc_dt) - 1
        if index < 0:
            raise TimeOutOfRange(self._name, utc_dt)
        return self._transitions[index]

    def _local_transition(self, dt: datetime) -> Optional[Transition]:
        if dt is None:
            return None

        local = dt.replace(tzinfo=None)
        index = bisect_right(self._local_starts, local) - 1
        if index < 0:
            raise TimeOutOfRange(self._name, local)

        # Ambiguous wall time after a backward shift: fold=0 keeps the earlier offset
        if index > 0 and dt.fold == 0:
            prev = self._transitions[index - 1]
            if local < self._instants[index] + timedelta(seconds=prev.zone.offset):
                index -= 1
        # Skipped wall time before a forward shift: fold=1 takes the later offset
        elif dt.fold == 1 and index + 1 < len(self._transitions):
            current = self._transitions[index]
            if local >= self._instants[index + 1] + timedelta(seconds=current.zone.offset):
                index += 1
        return self._transitions[index]

    def utcoffset(self, dt):
        transition = self._local_transition(dt)
        if transition is None:
            return None
        return transition.zone.utcoffset(dt)

    def dst(self, dt):
        transition = self._local_transition(dt)
        if transition is None:
            return None
        return transition.zone.dst(dt)

    def tzname(self, dt):
        transition = self._local_transition(dt)
        if transition is None:
            return None
        return transition.zone.name

    def fromutc(self, dt):
        utc = dt.replace(tzinfo=None)
        index = bisect_right(self._instants, utc) - 1
        if index < 0:
            raise TimeOutOfRange(self._name, utc)

        offset = self._transitions[index].zone.offset
        local = utc + timedelta(seconds=offset)
        # Second pass through a repeated hour after a backward shift
        if index > 0:
            prev_offset = self._transitions[index - 1].zone.offset
            if (prev_offset > offset and
                    local < self._instants[index] + timedelta(seconds=prev_offset)):
                return local.replace(tzinfo=self, fold=1)
        return local.replace(tzinfo=self)

    def __repr__(self):
        return f"VariableTimeZone({self._name!r}, <{len(self._transitions)} transitions>)"

    def __str__(self):
        return self._name

    def __eq__(self, other):
        if isinstance(other, VariableTimeZone):
            return (
                self._name == other._name
                and self._transitions == other._transitions
            )
        return NotImplemented

    def __hash__(self):
        return hash((self._name, self._transitions))
