from __future__ import annotations

import pytest

from sizewatch.alerts import AlertSink, Notifier
from sizewatch.errors import FetchError
from sizewatch.fetchers.base import PageFetcher
from sizewatch.models import AppConfig, AvailabilityRecord

URL = "https://www.zara.com/us/en/carpenter-pocket-pants-p04676401.html?v1=381227758"


def rec(label: str, available: bool) -> AvailabilityRecord:
    return AvailabilityRecord(label=label, available=available)


class RecordingSink(AlertSink):
    def __init__(self) -> None:
        self.messages: list[str] = []

    def send(self, message: str) -> None:
        self.messages.append(message)


class ScriptedFetcher(PageFetcher):
    """Replays one scripted response per session."""

    name = "scripted"

    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls = 0
        self.open_sessions = 0
        self.closed_sessions = 0

    def __call__(self) -> "ScriptedFetcher":
        return self

    def __enter__(self) -> "ScriptedFetcher":
        self.open_sessions += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed_sessions += 1

    def fetch(self, url: str) -> list[AvailabilityRecord]:
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeScheduler:
    def __init__(self, max_ticks: int = 20) -> None:
        self.jobs: list[tuple[str, object, str | None]] = []
        self.started = False
        self.stopped = False
        self.max_ticks = max_ticks

    def schedule(self, cron_expression, callback, name=None) -> None:
        self.jobs.append((cron_expression, callback, name))

    def start(self) -> None:
        self.started = True
        tick = next(callback for _, callback, name in self.jobs if name == "stock-check")
        for _ in range(self.max_ticks):
            if self.stopped:
                return
            tick()

    def shutdown(self) -> None:
        self.stopped = True


def timeout() -> FetchError:
    return FetchError("page did not settle within 60s")


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(url=URL)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def notifier(sink: RecordingSink) -> Notifier:
    return Notifier(sink)
