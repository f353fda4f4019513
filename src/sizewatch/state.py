from __future__ import annotations

import threading
from dataclasses import dataclass, field

UNSET_SUMMARY = "unset"


@dataclass(slots=True)
class FailureTransition:
    consecutive_failures: int
    should_escalate: bool


@dataclass
class MonitorState:
    """Mutable monitor state shared by the check cycle and the digest job.

    Owned by the service wiring and passed by reference. The check job is the
    only writer of the summary and failure count; the digest job only reads.
    """

    last_status_summary: str = UNSET_SUMMARY
    consecutive_failures: int = 0
    digest_armed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def read_summary(self) -> str:
        with self._lock:
            return self.last_status_summary

    def record_success(self, summary: str) -> None:
        with self._lock:
            self.last_status_summary = summary
            self.consecutive_failures = 0

    def record_failure(self, max_consecutive_errors: int) -> FailureTransition:
        with self._lock:
            self.consecutive_failures += 1
            return FailureTransition(
                consecutive_failures=self.consecutive_failures,
                should_escalate=self.consecutive_failures >= max_consecutive_errors,
            )

    def mark_digest_armed(self) -> bool:
        """Set the armed flag. Returns False if it was already set."""
        with self._lock:
            if self.digest_armed:
                return False
            self.digest_armed = True
            return True
