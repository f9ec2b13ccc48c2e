"""
resolver.py - Turn time zone names into zones, honouring a class mask

A name is looked up in the calling worker's cache. On a miss it is decoded
from the compiled database, or parsed as a fixed offset, and the result is
cached before the mask is checked, so a later call with a wider mask reuses
the decoded zone.

Usage:
    from tzresolve import resolve, exists, Class

    warsaw = resolve("Europe/Warsaw")
    pacific = resolve("US/Pacific", Class.LEGACY)
    exists("UTC+02:00")  # True, no database access

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from . import tzfile
from .cache import WorkerCache
from .classes import Class
from .config import default_compiled_dir
from .errors import DatabaseMissing, DisallowedClass, UnknownTimeZone
from .fixed import is_fixed, parse_fixed

logger = logging.getLogger(__name__)

Decoder = Callable[[Path, str], Tuple[object, Class]]


class Resolver:
    """
    Resolves names against one compiled database with a per-worker cache.

    decoder is called as decoder(path, name) and returns (zone, class); it
    defaults to tzfile.read.
    """

    def __init__(self, compiled_dir: Optional[Union[str, Path]] = None,
                 decoder: Optional[Decoder] = None,
                 workers: Optional[int] = None):
        self._compiled_dir = (
            Path(compiled_dir) if compiled_dir is not None else default_compiled_dir()
        )
        self._decoder = decoder or tzfile.read
        self.cache = WorkerCache(workers)

    @property
    def compiled_dir(self) -> Path:
        return self._compiled_dir

    @compiled_dir.setter
    def compiled_dir(self, path: Union[str, Path]):
        self._compiled_dir = Path(path)
        self.reset_cache()

    def reset_cache(self):
        """Forget every cached zone. Not safe while other threads resolve."""
        self.cache.reset()

    def _compiled_path(self, name: str) -> Optional[Path]:
        parts = name.split('/')
        # Dot segments never name a zone: '.', '..' and the database marker
        if any(not part or part.startswith('.') for part in parts):
            return None
        path = self._compiled_dir.joinpath(*parts)
        return path if path.is_file() else None

    def _database_missing(self) -> bool:
        root = self._compiled_dir
        if not root.is_dir():
            return True
        return all(entry.name == tzfile.DATABASE_MARKER for entry in root.iterdir())

    def _decode_compiled(self, name: str) -> Optional[Tuple[object, Class]]:
        path = self._compiled_path(name)
        if path is None:
            return None
        logger.debug("Decoding %s from %s", name, path)
        return self._decoder(path, name)

    def _decode(self, name: str) -> Tuple[object, Class]:
        entry = self._decode_compiled(name)
        if entry is not None:
            return entry
        if is_fixed(name):
            return parse_fixed(name), Class.FIXED
        if self._database_missing():
            raise DatabaseMissing(name)
        raise UnknownTimeZone(name)

    def resolve(self, name: str, mask: Class = Class.DEFAULT):
        """
        Zone for name.

        Raises DatabaseMissing, UnknownTimeZone, or DisallowedClass when the
        zone's class shares no flag with mask.
        """
        zone, cls = self.cache.get_or_compute(
            self.cache.current_worker(), name, lambda: self._decode(name)
        )
        if mask & cls == Class.NONE:
            raise DisallowedClass(name, cls, mask)
        return zone

    def exists(self, name: str, mask: Class = Class.DEFAULT) -> bool:
        """
        Whether resolve(name, mask) would succeed.

        Unknown names give False; a corrupt compiled file still raises.
        """
        if mask & Class.FIXED != Class.NONE and is_fixed(name):
            return True

        entry = self.cache.probe(
            self.cache.current_worker(), name, lambda: self._decode_compiled(name)
        )
        if entry is None:
            return False
        zone, cls = entry
        return zone is not None and mask & cls != Class.NONE


_default: Optional[Resolver] = None
_default_lock = threading.Lock()


def default_resolver() -> Resolver:
    """
    Resolver behind the module level functions, created on first use so that
    configuration errors surface there rather than at import.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Resolver()
    return _default


def resolve(name: str, mask: Class = Class.DEFAULT):
    """Resolve name with the default resolver. See Resolver.resolve."""
    return default_resolver().resolve(name, mask)


def exists(name: str, mask: Class = Class.DEFAULT) -> bool:
    """Check name with the default resolver. See Resolver.exists."""
    return default_resolver().exists(name, mask)


def tz(name: str):
    """
    Resolve a name known ahead of time, e.g. for module level constants:

        WARSAW = tz("Europe/Warsaw")
    """
    return resolve(name)


def compiled_dir() -> Path:
    return default_resolver().compiled_dir


def set_compiled_dir(path: Union[str, Path]):
    """Point the default resolver at another database and clear its cache."""
    default_resolver().compiled_dir = path


def reset_cache():
    default_resolver().reset_cache()
