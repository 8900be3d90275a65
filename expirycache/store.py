from __future__ import annotations

from threading import RLock
from typing import Generic, Hashable, Iterable, TypeVar

from expirycache import clock

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Absent:
    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


Absent = _Absent
ABSENT = _Absent()


class CacheStore(Generic[K, V]):
    def __init__(self) -> None:
        self._values: dict[K, V] = {}
        self._inserted_at: dict[K, int] = {}
        self._lock = RLock()

    def put(self, key: K, value: V) -> bool:
        with self._lock:
            if key in self._values:
                return False
            self._values[key] = value
            self._inserted_at[key] = clock.now_ns()
            return True

    def get_if_present(self, key: K) -> V | _Absent:
        with self._lock:
            return self._values.get(key, ABSENT)

    def contains(self, key: K) -> bool:
        with self._lock:
            return key in self._values

    def inserted_at(self, key: K) -> int | None:
        with self._lock:
            return self._inserted_at.get(key)

    def remove(self, key: K) -> bool:
        with self._lock:
            self._inserted_at.pop(key, None)
            return self._values.pop(key, ABSENT) is not ABSENT

    def remove_many(self, keys: Iterable[K]) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self.remove(key):
                    removed += 1
        return removed

    def snapshot_timestamps(self) -> list[tuple[K, int]]:
        with self._lock:
            return list(self._inserted_at.items())

    def size(self) -> int:
        with self._lock:
            return len(self._values)
