"""Per-record locks for serializing writes to a single leg or order.

Writes are serialized around the whole ``domain.process`` call, so the lock
is held until the unit of work has committed and a competing writer always
reads the committed state. Nothing here is shared across record ids.

Entries are reference counted and dropped once the last holder or waiter
leaves, so the registry only ever holds records with a write in flight.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

_registry_lock = threading.Lock()
_locks: dict[str, list] = {}  # key -> [lock, users]


def _acquire_entry(key: str) -> threading.Lock:
    with _registry_lock:
        entry = _locks.get(key)
        if entry is None:
            entry = [threading.Lock(), 0]
            _locks[key] = entry
        entry[1] += 1
        return entry[0]


def _release_entry(key: str) -> None:
    with _registry_lock:
        entry = _locks.get(key)
        if entry is None:
            return
        entry[1] -= 1
        if entry[1] <= 0:
            del _locks[key]


@contextmanager
def record_lock(scope: str, record_id: str) -> Iterator[None]:
    """Hold the lock for ``scope:record_id`` for the duration of the block."""
    key = f"{scope}:{record_id}"
    lock = _acquire_entry(key)
    try:
        with lock:
            yield
    finally:
        _release_entry(key)


def held_lock_count() -> int:
    """Number of records that currently have a holder or a waiter."""
    with _registry_lock:
        return len(_locks)


def reset_locks() -> None:
    """Drop all lock objects (useful for testing)."""
    with _registry_lock:
        _locks.clear()
