from __future__ import annotations

import logging
from typing import Callable, Protocol

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

LOG = logging.getLogger(__name__)

Job = Callable[[], None]


class Scheduler(Protocol):
    def schedule(self, cron_expression: str, callback: Job, name: str | None = None) -> None: ...

    def start(self) -> None: ...

    def shutdown(self) -> None: ...


class CronScheduler:
    """Runs callbacks on crontab expressions until ``shutdown`` is called."""

    def __init__(self) -> None:
        self._scheduler = BlockingScheduler()

    def schedule(self, cron_expression: str, callback: Job, name: str | None = None) -> None:
        trigger = CronTrigger.from_crontab(cron_expression, timezone=self._scheduler.timezone)
        job = self._scheduler.add_job(
            callback,
            trigger,
            name=name or getattr(callback, "__name__", None),
            max_instances=1,
            coalesce=True,
        )
        LOG.info("scheduled job=%s cron=%r", job.name, cron_expression)

    def start(self) -> None:
        LOG.info("scheduler starting")
        self._scheduler.start()

    def shutdown(self) -> None:
        # wait=False: this is called from inside a running job on termination.
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            LOG.info("scheduler stopped")
