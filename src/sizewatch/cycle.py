from __future__ import annotations

import logging
from typing import Callable

from sizewatch.alerts import Notifier
from sizewatch.errors import ExtractionError, SizeWatchError
from sizewatch.fetchers.base import PageFetcher
from sizewatch.models import AppConfig, AvailabilityRecord, CycleResult, Outcome
from sizewatch.state import MonitorState

LOG = logging.getLogger(__name__)

FetcherFactory = Callable[[], PageFetcher]


def find_target(records: list[AvailabilityRecord], target_label: str) -> AvailabilityRecord:
    for record in records:
        if target_label in record.label:
            return record
    labels = ", ".join(r.label for r in records) or "none"
    raise ExtractionError(f"size {target_label} not found among extracted sizes: {labels}")


def build_status_summary(records: list[AvailabilityRecord]) -> str:
    return "\n".join(record.status_line() for record in records)


def available_message(label: str, url: str) -> str:
    return f"Size {label} is now in stock! Check the link: {url}"


def escalation_message(failures: int, error: str) -> str:
    return f"Error occurred {failures} times in a row. Last error: {error}"


class CheckCycle:
    """One check of the tracked page, classified into an :class:`Outcome`.

    Fetch and extraction errors never escape ``run``; they are counted in
    ``MonitorState`` and escalate once ``max_consecutive_errors`` is reached.
    Terminal outcomes are returned, the caller decides how to exit.
    """

    def __init__(
        self,
        config: AppConfig,
        state: MonitorState,
        fetcher_factory: FetcherFactory,
        notifier: Notifier,
    ) -> None:
        self.config = config
        self.state = state
        self.fetcher_factory = fetcher_factory
        self.notifier = notifier

    @property
    def url(self) -> str:
        return str(self.config.url)

    def run(self) -> CycleResult:
        LOG.info("checking %s for size %s", self.url, self.config.target_label)
        try:
            records, target = self._fetch_target()
        except SizeWatchError as exc:
            LOG.error("check failed: %s", exc)
            return self._handle_failure(exc)
        except Exception as exc:  # noqa: BLE001
            LOG.exception("check failed with unexpected error: %s", exc)
            return self._handle_failure(exc)

        if target.available:
            LOG.info("size %s is in stock", target.label)
            self.notifier.send(available_message(target.label, self.url))
            return CycleResult(outcome=Outcome.TARGET_AVAILABLE, records=records)

        summary = build_status_summary(records)
        self.state.record_success(summary)
        LOG.info("size %s still out of stock", target.label)
        LOG.debug("status:\n%s", summary)
        return CycleResult(outcome=Outcome.RECORDED_STATUS, records=records)

    def _fetch_target(self) -> tuple[list[AvailabilityRecord], AvailabilityRecord]:
        with self.fetcher_factory() as fetcher:
            records = fetcher.fetch(self.url)
            LOG.debug("%s returned %d sizes", fetcher.name, len(records))
        return records, find_target(records, self.config.target_label)

    def _handle_failure(self, exc: Exception) -> CycleResult:
        limit = self.config.max_consecutive_errors
        transition = self.state.record_failure(limit)
        error = str(exc) or type(exc).__name__
        LOG.warning("consecutive failures: %d/%d", transition.consecutive_failures, limit)
        if not transition.should_escalate:
            return CycleResult(outcome=Outcome.TRANSIENT_FAILURE, error=error)

        message = escalation_message(transition.consecutive_failures, error)
        LOG.error(message)
        self.notifier.send(message)
        return CycleResult(outcome=Outcome.FATAL_ESCALATION, error=error)
