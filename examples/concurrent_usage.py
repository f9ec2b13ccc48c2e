"""
Resolving time zones from a thread pool

Each worker thread keeps its own cache, so lookups never wait on a lock.
The first lookup of a name in a thread decodes it; later ones are dict reads.

Note: Requires a compiled database (see basic_usage.py).
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from tzresolve import default_resolver, resolve

NAMES = ["Europe/Warsaw", "America/New_York", "Australia/Adelaide", "UTC+05:30"]


def local_time(name):
    now = datetime.now(timezone.utc)
    for _ in range(10_000):
        zone = resolve(name)
    return now.astimezone(zone)


start = time.perf_counter()
with ThreadPoolExecutor(max_workers=4) as pool:
    for name, local in zip(NAMES * 4, pool.map(local_time, NAMES * 4)):
        print(f"  {name:20} {local.isoformat()}")

elapsed = time.perf_counter() - start
cache = default_resolver().cache
print(f"\n{len(cache)} cached entries across {cache.capacity} worker slots "
      f"in {elapsed:.2f}s")
