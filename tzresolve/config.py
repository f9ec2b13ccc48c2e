"""
config.py - Defaults taken from the environment

    TZRESOLVE_COMPILED_DIR  root of the compiled time zone database
                            (default: ~/.cache/tzresolve/compiled)
    TZRESOLVE_WORKERS       initial number of per-worker cache slots
                            (default: number of CPUs)

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import os
from pathlib import Path

COMPILED_DIR_ENV = 'TZRESOLVE_COMPILED_DIR'
WORKERS_ENV = 'TZRESOLVE_WORKERS'


def default_compiled_dir() -> Path:
    """Database root from TZRESOLVE_COMPILED_DIR, or the per-user cache."""
    value = os.environ.get(COMPILED_DIR_ENV, '').strip()
    if value:
        return Path(value).expanduser()
    return Path.home() / '.cache' / 'tzresolve' / 'compiled'


def default_worker_count() -> int:
    """Initial cache slot count from TZRESOLVE_WORKERS, or the CPU count."""
    value = os.environ.get(WORKERS_ENV, '').strip()
    if not value:
        return os.cpu_count() or 1
    try:
        count = int(value)
    except ValueError:
        raise ValueError(f"{WORKERS_ENV} must be an integer, got {value!r}") from None
    if count < 1:
        raise ValueError(f"{WORKERS_ENV} must be at least 1, got {count}")
    return count
