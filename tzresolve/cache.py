"""
cache.py - Per-worker time zone cache

Every worker (thread) owns one table mapping a name to its (zone, class)
pair. Tables are never shared, so reads and writes need no locking; the cost
is that each worker decodes and stores its own copy of a zone. Worker ids are
small dense integers so the tables can live in a plain list.

reset() replaces the whole store and must not run while any worker is
resolving names.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import heapq
import logging
import threading
import weakref
from collections import deque
from typing import Callable, Dict, List, Optional, Tuple

from .config import default_worker_count

logger = logging.getLogger(__name__)

Entry = Tuple[object, object]


class _Slot:
    __slots__ = ('id', '__weakref__')

    def __init__(self, worker_id: int):
        self.id = worker_id


class WorkerIds:
    """
    Hands out a stable worker id to each thread on first use.

    Ids of finished threads go back to a pool and are reused, lowest first,
    so the number of ids stays close to the number of live threads. Only
    assignment takes a lock; looking up the calling thread's id does not.
    """

    def __init__(self, count: Optional[int] = None,
                 on_grow: Optional[Callable[[int], None]] = None):
        self._count = default_worker_count() if count is None else count
        self._on_grow = on_grow
        self._local = threading.local()
        self._lock = threading.Lock()
        self._next = 0
        self._free: List[int] = []
        # Filled by finalizers of exited threads, drained on the next assignment
        self._released = deque()

    @property
    def count(self) -> int:
        """Number of worker slots; always above the highest id handed out."""
        return self._count

    def current(self) -> int:
        """Worker id of the calling thread."""
        try:
            return self._local.slot.id
        except AttributeError:
            return self._assign()

    def _assign(self) -> int:
        with self._lock:
            while self._released:
                heapq.heappush(self._free, self._released.popleft())

            if self._free:
                worker_id = heapq.heappop(self._free)
            else:
                worker_id = self._next
                self._next += 1
                if self._next > self._count:
                    self._count = self._next
                    if self._on_grow is not None:
                        self._on_grow(self._count)

        slot = _Slot(worker_id)
        weakref.finalize(slot, self._released.append, worker_id)
        self._local.slot = slot
        logger.debug("Assigned worker id %d to thread %s",
                     worker_id, threading.current_thread().name)
        return worker_id


def _capacity_violation(worker_id: int, capacity: int):
    raise AssertionError(
        f"0 <= worker_id < capacity violated (worker_id={worker_id}, "
        f"capacity={capacity}); worker ids were assigned incorrectly"
    )


class WorkerCache:
    """
    One lazily created table per worker slot.

    Entries are written once and only dropped by reset(). A compute callback
    that raises stores nothing.
    """

    def __init__(self, worker_count: Optional[int] = None):
        self.workers = WorkerIds(worker_count, on_grow=self.grow)
        self._tables: List[Optional[Dict[str, Entry]]] = [None] * self.workers.count

    @property
    def capacity(self) -> int:
        return len(self._tables)

    def current_worker(self) -> int:
        return self.workers.current()

    def _table(self, worker_id: int) -> Dict[str, Entry]:
        tables = self._tables
        if not 0 <= worker_id < len(tables):
            _capacity_violation(worker_id, len(tables))

        table = tables[worker_id]
        if table is None:
            table = tables[worker_id] = {}
        return table

    def get_or_compute(self, worker_id: int, name: str,
                       compute: Callable[[], Entry]) -> Entry:
        """Cached entry for name, computing and storing it on a miss."""
        table = self._table(worker_id)
        entry = table.get(name)
        if entry is None:
            entry = compute()
            table[name] = entry
        return entry

    def probe(self, worker_id: int, name: str,
              compute: Callable[[], Optional[Entry]]) -> Optional[Entry]:
        """
        Like get_or_compute, but compute may return None for an unknown name.

        Unknown names are not cached, so a zone compiled later is still found.
        """
        table = self._table(worker_id)
        entry = table.get(name)
        if entry is None:
            entry = compute()
            if entry is not None:
                table[name] = entry
        return entry

    def grow(self, capacity: int):
        """Add empty slots so that at least `capacity` workers fit."""
        missing = capacity - len(self._tables)
        if missing > 0:
            self._tables.extend([None] * missing)

    def reset(self):
        """
        Drop every table and resize the store to the current worker count.

        Callers must ensure no lookups are in flight on any worker.
        """
        self._tables = [None] * self.workers.count
        logger.debug("Reset time zone cache (%d worker slots)", self.capacity)

    def __len__(self):
        return sum(len(table) for table in self._tables if table is not None)
