from __future__ import annotations

import logging

import requests

from sizewatch.errors import NotificationError
from sizewatch.models import TwilioConfig

LOG = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class AlertSink:
    def send(self, message: str) -> None:
        raise NotImplementedError


class DryRunAlertSink(AlertSink):
    def send(self, message: str) -> None:
        LOG.info("[DRY RUN] alert: %s", message)


class TwilioSmsAlertSink(AlertSink):
    def __init__(self, config: TwilioConfig, timeout_seconds: float = 10.0) -> None:
        self.config = config
        self.timeout_seconds = timeout_seconds

    @property
    def endpoint(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self.config.account_sid}/Messages.json"

    def send(self, message: str) -> None:
        try:
            response = requests.post(
                self.endpoint,
                data={
                    "From": self.config.from_number,
                    "To": self.config.to_number,
                    "Body": message,
                },
                auth=(self.config.account_sid, self.config.auth_token),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise NotificationError(f"twilio request failed: {exc}") from exc
        if response.status_code >= 300:
            raise NotificationError(
                f"twilio send failed ({response.status_code}): {response.text}"
            )


class DiscordWebhookAlertSink(AlertSink):
    def __init__(self, webhook_url: str, timeout_seconds: float = 10.0) -> None:
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds

    def send(self, message: str) -> None:
        try:
            response = requests.post(
                self.webhook_url,
                json={"content": message},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise NotificationError(f"discord request failed: {exc}") from exc
        if response.status_code >= 300:
            raise NotificationError(
                f"discord webhook failed ({response.status_code}): {response.text}"
            )


class Notifier:
    """Fire-and-forget front for an alert sink. Delivery failures are logged, never raised."""

    def __init__(self, sink: AlertSink) -> None:
        self.sink = sink

    def send(self, message: str) -> bool:
        try:
            self.sink.send(message)
        except Exception as exc:  # noqa: BLE001
            LOG.exception("alert delivery failed: %s", exc)
            return False
        LOG.info("alert sent via %s", type(self.sink).__name__)
        return True
