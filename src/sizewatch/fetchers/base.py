from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from sizewatch.models import AvailabilityRecord


class PageFetcher(AbstractContextManager["PageFetcher"], ABC):
    """Fetches availability records. Used as a ``with`` session, one per check."""

    name: str

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    @abstractmethod
    def fetch(self, url: str) -> list[AvailabilityRecord]:
        raise NotImplementedError
