from __future__ import annotations

import logging
import math
from threading import RLock
from typing import Any, Generic, Hashable, TypeVar

from expirycache import eviction
from expirycache.clock import MAX_TIMEOUT, TimeUnit, clamp, coerce_time_unit
from expirycache.config import MAX_LIMIT, Settings, get_settings
from expirycache.scheduler import SweepScheduler
from expirycache.store import ABSENT, Absent, CacheStore

logger = logging.getLogger("expirycache")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class InvalidArgumentError(ValueError):
    pass


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise InvalidArgumentError("Limit cannot be smaller than 1")


def _check_timeout(timeout: int | float) -> int | float:
    if isinstance(timeout, float) and not math.isfinite(timeout):
        raise InvalidArgumentError("Timeout must be a finite number")
    if timeout < 0:
        raise InvalidArgumentError("Timeout cannot be negative")
    return clamp(0, MAX_TIMEOUT, timeout)


class Cache(Generic[K, V]):
    def __init__(
        self,
        timeout: int | float = 0,
        time_unit: TimeUnit | str | None = None,
        limit: int = MAX_LIMIT,
        *,
        settings: Settings | None = None,
    ) -> None:
        time_unit = coerce_time_unit(time_unit)
        timeout = _check_timeout(timeout)
        if timeout > 0 and time_unit is None:
            raise InvalidArgumentError("TimeUnit cannot be None if timeout is > 0")
        _check_limit(limit)

        self._store: CacheStore[K, V] = CacheStore()
        self._config_lock = RLock()
        self._timeout = timeout
        self._time_unit = time_unit
        self._limit = limit
        self._scheduler = SweepScheduler(self._sweep, settings=settings)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Cache[Any, Any]:
        settings = settings or get_settings()
        cache: Cache[Any, Any] = cls(settings=settings)
        return (
            builder(cache)
            .with_timeout(settings.default_timeout, settings.default_time_unit)
            .with_limit(settings.default_limit)
            .build()
        )

    @staticmethod
    def builder(cache: Cache | None = None) -> CacheBuilder:
        return builder(cache)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def timeout(self) -> int | float:
        return self._timeout

    @property
    def time_unit(self) -> TimeUnit | None:
        return self._time_unit

    @property
    def sweeping(self) -> bool:
        return self._scheduler.installed

    def put(self, key: K, value: V) -> None:
        self._store.put(key, value)

    def get_if_present(self, key: K) -> V | Absent:
        return self._store.get_if_present(key)

    def get(self, key: K, default: V | None = None) -> V | None:
        value = self._store.get_if_present(key)
        if value is ABSENT:
            return default
        return value

    def is_cached(self, key: K) -> bool:
        return self._store.contains(key)

    def remove(self, key: K) -> None:
        self._store.remove(key)

    def size(self) -> int:
        return self._store.size()

    def close(self) -> None:
        self._scheduler.shutdown()

    def check_time(self) -> int:
        with self._config_lock:
            timeout, time_unit = self._timeout, self._time_unit
        return eviction.check_time(self._store, timeout, time_unit)

    def check_size(self) -> int:
        with self._config_lock:
            limit = self._limit
        return eviction.check_size(self._store, limit)

    def _sweep(self) -> None:
        for step in (self.check_time, self.check_size):
            try:
                step()
            except Exception:
                logger.exception("Cache %s failed", step.__name__)

    def __contains__(self, key: object) -> bool:
        return self._store.contains(key)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self._store.size()

    def __enter__(self) -> Cache[K, V]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Cache(size={self.size()}, limit={self._limit}, "
            f"timeout={self._timeout}, time_unit={self._time_unit})"
        )


class CacheBuilder(Generic[K, V]):
    def __init__(self, cache: Cache[K, V]) -> None:
        self.cache = cache

    def with_limit(self, limit: int) -> CacheBuilder[K, V]:
        _check_limit(limit)
        with self.cache._config_lock:
            self.cache._limit = limit
        self.cache.check_size()
        return self

    def with_timeout(self, timeout: int | float, time_unit: TimeUnit | str | None) -> CacheBuilder[K, V]:
        timeout = _check_timeout(timeout)
        unit = coerce_time_unit(time_unit)
        if unit is None:
            raise InvalidArgumentError("TimeUnit cannot be None")
        with self.cache._config_lock:
            self.cache._timeout = timeout
            self.cache._time_unit = unit
        return self

    def build(self) -> Cache[K, V]:
        cache = self.cache
        with cache._config_lock:
            if cache._timeout > 0 and cache._time_unit is None:
                raise InvalidArgumentError("TimeUnit cannot be None if timeout is > 0")
            _check_limit(cache._limit)

            if cache._timeout != 0:
                cache._scheduler.schedule(cache._timeout, cache._time_unit)
            else:
                cache._scheduler.unschedule()
        return cache


def builder(cache: Cache[K, V] | None = None) -> CacheBuilder[K, V]:
    return CacheBuilder(cache if cache is not None else Cache())


def default_cache() -> Cache[Any, Any]:
    return Cache()


def timed_cache(timeout: int | float, time_unit: TimeUnit | str | None) -> Cache[Any, Any]:
    return Cache(timeout, time_unit)


def bounded_cache(limit: int) -> Cache[Any, Any]:
    return Cache(0, TimeUnit.milliseconds, limit)


def timed_bounded_cache(timeout: int | float, time_unit: TimeUnit | str | None, limit: int) -> Cache[Any, Any]:
    return Cache(timeout, time_unit, limit)
