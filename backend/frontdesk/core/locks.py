"""
Per-key mutual exclusion for read-then-write sequences.

Row locks (``SELECT ... FOR UPDATE``) cover multi-process deployments on
PostgreSQL; these locks cover the single-process case and SQLite, where
``with_for_update`` renders nothing. Locks are reentrant so a service may
hold a key while calling another service that takes it again.

Lock order when nesting: handover, then ledger.
"""
import threading
import weakref
from contextlib import contextmanager
from typing import Hashable, Iterator


class _KeyLock:
    def __init__(self):
        self.lock = threading.RLock()


class KeyedLock:
    def __init__(self, name: str):
        self.name = name
        self._guard = threading.Lock()
        # An entry lives only while some caller holds or waits on it
        self._locks: "weakref.WeakValueDictionary[Hashable, _KeyLock]" = weakref.WeakValueDictionary()

    def _lock_for(self, key: Hashable) -> _KeyLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = _KeyLock()
                self._locks[key] = entry
            return entry

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        entry = self._lock_for(key)
        with entry.lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


ledger_locks = KeyedLock("ledger")
staff_locks = KeyedLock("staff")
handover_locks = KeyedLock("handover")
