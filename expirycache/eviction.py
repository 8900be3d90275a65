from __future__ import annotations

import logging
from typing import Hashable

from expirycache import clock
from expirycache.clock import TimeUnit
from expirycache.store import CacheStore

logger = logging.getLogger("expirycache")


def expired_keys(store: CacheStore, timeout: int | float, time_unit: TimeUnit) -> list[Hashable]:
    cutoff = clock.now_ns() - time_unit.to_nanos(timeout)
    # Entries stamped exactly at the cutoff survive.
    return [key for key, inserted_at in store.snapshot_timestamps() if inserted_at < cutoff]


def surplus_keys(store: CacheStore, limit: int) -> list[Hashable]:
    snapshot = store.snapshot_timestamps()
    surplus = len(snapshot) - limit
    if surplus <= 0:
        return []
    # Newest first: the most recently inserted entries are the ones dropped.
    ordered = sorted(snapshot, key=lambda item: item[1], reverse=True)
    return [key for key, _ in ordered[:surplus]]


def check_time(store: CacheStore, timeout: int | float, time_unit: TimeUnit | None) -> int:
    if timeout <= 0 or time_unit is None:
        return 0
    removed = store.remove_many(expired_keys(store, timeout, time_unit))
    if removed:
        logger.debug("Age sweep removed %d entries (timeout=%s %s)", removed, timeout, time_unit)
    return removed


def check_size(store: CacheStore, limit: int) -> int:
    if store.size() <= limit:
        return 0
    removed = store.remove_many(surplus_keys(store, limit))
    if removed:
        logger.debug("Size trim removed %d entries (limit=%d)", removed, limit)
    return removed
