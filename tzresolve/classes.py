"""
classes.py - Classification of time zones as a bitmask

A zone's Class combines its structure (FIXED or VARIABLE) with the provenance
of its data (STANDARD or LEGACY). Masks built from the same flags select which
classes a caller is willing to accept.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

from typing import Iterable, List, Optional, Union

from .zones import FixedTimeZone, VariableTimeZone

# IANA source files whose names are kept only for backwards compatibility
LEGACY_SOURCES = frozenset({'backward', 'etcetera'})


class Class:
    """
    Bitmask over the flags FIXED, VARIABLE, STANDARD and LEGACY.

    Equality and the & / | operators work on the raw bits, so values carrying
    undefined bits are preserved rather than rejected.
    """

    __slots__ = ('_value',)

    # Filled in below once the class exists
    NONE: 'Class'
    FIXED: 'Class'
    VARIABLE: 'Class'
    STANDARD: 'Class'
    LEGACY: 'Class'
    DEFAULT: 'Class'
    ALL: 'Class'

    def __init__(self, value: int = 0):
        if isinstance(value, Class):
            value = value._value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Class value must be an int, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"Class value must be non-negative, got {value}")
        object.__setattr__(self, '_value', value)

    def __setattr__(self, key, value):
        raise AttributeError("Class values are immutable")

    @property
    def value(self) -> int:
        return self._value

    def __or__(self, other):
        if not isinstance(other, Class):
            return NotImplemented
        return Class(self._value | other._value)

    def __and__(self, other):
        if not isinstance(other, Class):
            return NotImplemented
        return Class(self._value & other._value)

    def __eq__(self, other):
        if isinstance(other, Class):
            return self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash((Class, self._value))

    def __bool__(self):
        return self._value != 0

    def __str__(self):
        return ' | '.join(labels(self))

    def __repr__(self):
        names = labels(self)
        if not names:
            return f"Class(0x{self._value:02x})"
        return ' | '.join(f"Class.{name}" for name in names)


Class.NONE = Class(0x00)
Class.FIXED = Class(0x01)
Class.VARIABLE = Class(0x02)
Class.STANDARD = Class(0x04)
Class.LEGACY = Class(0x08)
Class.DEFAULT = Class.FIXED | Class.STANDARD
Class.ALL = Class.FIXED | Class.VARIABLE | Class.STANDARD | Class.LEGACY

_FLAG_NAMES = ('FIXED', 'VARIABLE', 'STANDARD', 'LEGACY')


def labels(c: Class) -> List[str]:
    """
    Names of the known flags set in c, in canonical order.

    Class.NONE is labelled ["NONE"]; undefined bits are never labelled, so a
    value carrying only undefined bits yields an empty list.
    """
    if c == Class.NONE:
        return ['NONE']
    return [name for name in _FLAG_NAMES if c & getattr(Class, name) != Class.NONE]


def source_class(source: str) -> Class:
    """Provenance contributed by a single IANA source file."""
    return Class.LEGACY if source in LEGACY_SOURCES else Class.STANDARD


def classify(zone, sources: Optional[Union[str, Iterable[str]]] = None) -> Class:
    """
    Class of a zone: its structure, plus the provenance of the source file(s)
    it was compiled from when given.
    """
    if isinstance(zone, FixedTimeZone):
        mask = Class.FIXED
    elif isinstance(zone, VariableTimeZone):
        mask = Class.VARIABLE
    else:
        raise TypeError(f"Cannot classify {type(zone).__name__}")

    if sources is None:
        return mask
    if isinstance(sources, str):
        sources = (sources,)
    for source in sources:
        mask = mask | source_class(source)
    return mask
