from __future__ import annotations

import logging
from pathlib import Path

from sizewatch.alerts import (
    AlertSink,
    DiscordWebhookAlertSink,
    DryRunAlertSink,
    Notifier,
    TwilioSmsAlertSink,
)
from sizewatch.config import load_config
from sizewatch.cycle import CheckCycle, FetcherFactory
from sizewatch.digest import DigestGate
from sizewatch.errors import ConfigError
from sizewatch.fetchers import ZaraSizeFetcher
from sizewatch.models import AppConfig, CycleResult, Outcome
from sizewatch.scheduling import CronScheduler, Scheduler
from sizewatch.state import MonitorState

LOG = logging.getLogger(__name__)


class MonitorService:
    def __init__(
        self,
        config: AppConfig,
        dry_run: bool = False,
        headless: bool = True,
        notifier: Notifier | None = None,
        fetcher_factory: FetcherFactory | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config
        self.dry_run = dry_run
        self.headless = headless
        self.state = MonitorState()
        self.notifier = notifier or Notifier(self._build_alert_sink())
        self.scheduler = scheduler or CronScheduler()
        self.cycle = CheckCycle(
            config=config,
            state=self.state,
            fetcher_factory=fetcher_factory or self._default_fetcher,
            notifier=self.notifier,
        )
        self.digest = DigestGate(self.state, self.notifier, config.digest_cron)
        self.exit_code: int | None = None

    def _build_alert_sink(self) -> AlertSink:
        if self.dry_run:
            return DryRunAlertSink()
        alerts = self.config.alerts
        if alerts.twilio:
            return TwilioSmsAlertSink(alerts.twilio)
        if alerts.discord_webhook:
            return DiscordWebhookAlertSink(str(alerts.discord_webhook))
        raise ConfigError("no notification channel configured (twilio or discord_webhook)")

    def _default_fetcher(self) -> ZaraSizeFetcher:
        return ZaraSizeFetcher(
            headless=self.headless,
            timeout_seconds=self.config.fetch_timeout_seconds,
            debug_html_path=self.config.debug_html_path,
        )

    def run_once(self) -> CycleResult:
        result = self.cycle.run()
        LOG.info("cycle outcome=%s", result.outcome.value)
        if result.is_terminal:
            self.exit_code = result.outcome.exit_code
        elif result.outcome is Outcome.RECORDED_STATUS:
            self.digest.arm_once(self.scheduler)
        return result

    def tick(self) -> None:
        if self.exit_code is not None:
            return
        LOG.info("running stock check...")
        result = self.run_once()
        if result.is_terminal:
            self.scheduler.shutdown()

    def run_forever(self) -> int:
        LOG.info("starting %s stock checker", self.config.name)
        self.notifier.send(f"{self.config.name} stock checker has started.")

        self.run_once()
        if self.exit_code is not None:
            return self.exit_code

        self.scheduler.schedule(self.config.check_cron, self.tick, name="stock-check")
        self.scheduler.start()
        # start() returns only after a terminal tick shut the scheduler down
        return self.exit_code if self.exit_code is not None else 0


def build_service(
    config_path: str | Path | None = None,
    dry_run: bool = False,
    headless: bool = True,
) -> MonitorService:
    config = load_config(config_path)
    return MonitorService(config=config, dry_run=dry_run, headless=headless)
