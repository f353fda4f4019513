from __future__ import annotations

import logging

from sizewatch.alerts import Notifier
from sizewatch.scheduling import Scheduler
from sizewatch.state import UNSET_SUMMARY, MonitorState

LOG = logging.getLogger(__name__)


def digest_message(summary: str) -> str:
    return f"Daily stock update:\n{summary}"


class DigestGate:
    """Registers the daily status digest once the monitor has recorded a status."""

    def __init__(self, state: MonitorState, notifier: Notifier, cron_expression: str) -> None:
        self.state = state
        self.notifier = notifier
        self.cron_expression = cron_expression

    def arm_once(self, scheduler: Scheduler) -> bool:
        if not self.state.mark_digest_armed():
            return False
        scheduler.schedule(self.cron_expression, self.send_digest, name="daily-digest")
        LOG.info("daily digest armed cron=%r", self.cron_expression)
        return True

    def send_digest(self) -> None:
        summary = self.state.read_summary()
        if summary == UNSET_SUMMARY:
            LOG.info("no status recorded yet, skipping digest")
            return
        LOG.info("sending daily digest")
        self.notifier.send(digest_message(summary))
