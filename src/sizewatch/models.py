from __future__ import annotations

from enum import Enum

from apscheduler.triggers.cron import CronTrigger
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

UNKNOWN_LABEL = "Unknown"


class AvailabilityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1)
    available: bool

    def status_line(self) -> str:
        return f"{self.label}: {'In Stock' if self.available else 'Out of Stock'}"


class Outcome(str, Enum):
    TARGET_AVAILABLE = "target_available"
    RECORDED_STATUS = "recorded_status"
    TRANSIENT_FAILURE = "transient_failure"
    FATAL_ESCALATION = "fatal_escalation"

    @property
    def is_terminal(self) -> bool:
        return self in (Outcome.TARGET_AVAILABLE, Outcome.FATAL_ESCALATION)

    @property
    def exit_code(self) -> int | None:
        if self is Outcome.TARGET_AVAILABLE:
            return 0
        if self is Outcome.FATAL_ESCALATION:
            return 1
        return None


class CycleResult(BaseModel):
    outcome: Outcome
    records: list[AvailabilityRecord] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome.is_terminal


class TwilioConfig(BaseModel):
    account_sid: str = Field(min_length=1)
    auth_token: str = Field(min_length=1)
    from_number: str = Field(min_length=1)
    to_number: str = Field(min_length=1)


class AlertsConfig(BaseModel):
    twilio: TwilioConfig | None = None
    discord_webhook: HttpUrl | None = None


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: HttpUrl
    name: str = "Zara"
    target_label: str = Field(default="30", min_length=1)
    check_cron: str = "* * * * *"
    digest_cron: str = "0 18 * * *"
    max_consecutive_errors: int = Field(default=5, ge=1)
    fetch_timeout_seconds: float = Field(default=60.0, gt=0)
    debug_html_path: str | None = None
    alerts: AlertsConfig = Field(default_factory=AlertsConfig)

    @field_validator("check_cron", "digest_cron")
    @classmethod
    def _validate_cron(cls, value: str) -> str:
        try:
            CronTrigger.from_crontab(value)
        except ValueError as exc:
            raise ValueError(f"invalid cron expression {value!r}: {exc}") from exc
        return value
