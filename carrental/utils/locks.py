import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLockRegistry:
    """One process-local mutex per key.

    An entry exists only while some thread holds or waits on it, so the
    registry stays as small as the number of keys in use at once.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: dict[Hashable, list] = {}

    def _acquire_entry(self, key: Hashable) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: Hashable) -> None:
        with self._guard:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)


# Serializes check-then-insert of bookings per vehicle within this process.
vehicle_booking_locks = KeyedLockRegistry()
