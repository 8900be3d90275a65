from __future__ import annotations

import logging
import time
from enum import StrEnum

logger = logging.getLogger("expirycache")

MAX_TIMEOUT = 2**63 - 1


class TimeUnit(StrEnum):
    nanoseconds = "nanoseconds"
    microseconds = "microseconds"
    milliseconds = "milliseconds"
    seconds = "seconds"
    minutes = "minutes"
    hours = "hours"
    days = "days"

    @property
    def nanos(self) -> int:
        return _UNIT_NANOS[self]

    def to_nanos(self, duration: int | float) -> int:
        return int(duration * self.nanos)

    def to_seconds(self, duration: int | float) -> float:
        return duration * self.nanos / 1_000_000_000


_UNIT_NANOS: dict[TimeUnit, int] = {
    TimeUnit.nanoseconds: 1,
    TimeUnit.microseconds: 1_000,
    TimeUnit.milliseconds: 1_000_000,
    TimeUnit.seconds: 1_000_000_000,
    TimeUnit.minutes: 60 * 1_000_000_000,
    TimeUnit.hours: 3_600 * 1_000_000_000,
    TimeUnit.days: 86_400 * 1_000_000_000,
}


def coerce_time_unit(value: TimeUnit | str | None) -> TimeUnit | None:
    if value is None:
        return None
    if isinstance(value, TimeUnit):
        return value
    if not str(value).strip():
        return None
    try:
        return TimeUnit(str(value).strip().lower())
    except ValueError:
        # Unknown units get millisecond granularity.
        logger.warning("Unknown time unit %r, falling back to milliseconds", value)
        return TimeUnit.milliseconds


def now_ns() -> int:
    return time.monotonic_ns()


def clamp(minimum: int | float, maximum: int | float, value: int | float) -> int | float:
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value
