"""
tzresolve - Time zone resolution with class policies and per-worker caching

    from tzresolve import resolve, exists, Class

    resolve("Europe/Warsaw")                 # VariableTimeZone
    resolve("UTC+02:00")                     # FixedTimeZone
    resolve("US/Pacific", Class.LEGACY)      # legacy names must be allowed

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import logging

from .cache import WorkerCache, WorkerIds
from .classes import Class, classify, labels
from .errors import (
    CorruptTimeZoneFile,
    DatabaseMissing,
    DisallowedClass,
    TimeOutOfRange,
    TimeZoneError,
    UnknownTimeZone,
)
from .fixed import is_fixed, parse_fixed
from .resolver import (
    Resolver,
    compiled_dir,
    default_resolver,
    exists,
    reset_cache,
    resolve,
    set_compiled_dir,
    tz,
)
from .zones import FixedTimeZone, Transition, VariableTimeZone

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'

__all__ = [
    'Class',
    'CorruptTimeZoneFile',
    'DatabaseMissing',
    'DisallowedClass',
    'FixedTimeZone',
    'Resolver',
    'TimeOutOfRange',
    'TimeZoneError',
    'Transition',
    'UnknownTimeZone',
    'VariableTimeZone',
    'WorkerCache',
    'WorkerIds',
    'classify',
    'compiled_dir',
    'default_resolver',
    'exists',
    'is_fixed',
    'labels',
    'parse_fixed',
    'reset_cache',
    'resolve',
    'set_compiled_dir',
    'tz',
]
