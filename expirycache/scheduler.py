from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from expirycache.clock import TimeUnit, clamp
from expirycache.config import Settings, get_settings

logger = logging.getLogger("expirycache")

SWEEP_JOB_ID = "sweep"


class SweepScheduler:
    def __init__(self, sweep: Callable[[], object], settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._sweep = sweep
        self._scheduler = BackgroundScheduler(
            daemon=True,
            timezone=timezone.utc,
            job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": None},
        )

    @property
    def running(self) -> bool:
        return self._scheduler.running

    @property
    def installed(self) -> bool:
        return self._scheduler.get_job(SWEEP_JOB_ID) is not None

    def interval_seconds(self, timeout: int | float, time_unit: TimeUnit) -> float:
        return float(
            clamp(
                self.settings.min_sweep_interval_seconds,
                self.settings.max_sweep_interval_seconds,
                time_unit.to_seconds(timeout),
            )
        )

    def schedule(self, timeout: int | float, time_unit: TimeUnit) -> None:
        interval = self.interval_seconds(timeout, time_unit)
        self._scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(seconds=interval, timezone=timezone.utc),
            id=SWEEP_JOB_ID,
            name=self.settings.scheduler_thread_name,
            replace_existing=True,
            next_run_time=datetime.now(timezone.utc),
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Sweep scheduled every %.6fs (timeout=%s %s)", interval, timeout, time_unit)

    def unschedule(self) -> None:
        if self.installed:
            self._scheduler.remove_job(SWEEP_JOB_ID)
            logger.info("Sweep unscheduled")

    def run_once(self) -> None:
        try:
            self._sweep()
        except Exception:
            logger.exception("Cache sweep failed; retrying at next tick")

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Sweep scheduler stopped")
