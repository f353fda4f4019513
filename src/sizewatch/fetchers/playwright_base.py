from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from playwright.sync_api import BrowserContext, Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from sizewatch.errors import FetchError
from sizewatch.fetchers.base import PageFetcher
from sizewatch.models import AvailabilityRecord

LOG = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)
# Headless Chromium reports navigator.webdriver = true, which bot walls check first.
HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"


class PlaywrightPageFetcher(PageFetcher):
    """One browser session; open it with ``with`` and it is torn down on every exit path."""

    blocked_resource_types = {"image", "media", "font"}

    def __init__(
        self,
        headless: bool = True,
        timeout_seconds: float = 60.0,
        debug_html_path: str | Path | None = None,
    ) -> None:
        self.headless = headless
        self.timeout_seconds = timeout_seconds
        self.debug_html_path = Path(debug_html_path) if debug_html_path else None
        self._playwright = None
        self._browser = None
        self._context: BrowserContext | None = None

    def __enter__(self) -> "PlaywrightPageFetcher":
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
            self._context = self._browser.new_context(
                user_agent=USER_AGENT,
                locale="en-US",
                viewport={"width": 1366, "height": 900},
            )
            self._context.add_init_script(script=HIDE_WEBDRIVER_SCRIPT)
            self._context.route("**/*", self._route_filter)
        except PlaywrightError as exc:
            self.close()
            raise FetchError(f"{self.name} browser launch failed: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None
        if context:
            self._release("context", context.close)
        if browser:
            self._release("browser", browser.close)
        if playwright:
            self._release("playwright driver", playwright.stop)

    def _release(self, what: str, release: Callable[[], None]) -> None:
        # A crashed browser fails every close call; keep going so nothing is left running.
        try:
            release()
        except PlaywrightError as exc:
            LOG.warning("%s: closing %s failed: %s", self.name, what, exc)

    def _route_filter(self, route) -> None:  # type: ignore[no-untyped-def]
        if route.request.resource_type in self.blocked_resource_types:
            route.abort()
            return
        route.continue_()

    def _new_page(self) -> Page:
        if not self._context:
            raise RuntimeError("fetcher session is not open")
        return self._context.new_page()

    def fetch(self, url: str) -> list[AvailabilityRecord]:
        page = self._new_page()
        try:
            try:
                page.goto(url, wait_until="networkidle", timeout=self.timeout_seconds * 1000)
            except PlaywrightTimeoutError as exc:
                raise FetchError(
                    f"page did not settle within {self.timeout_seconds:g}s: {url}"
                ) from exc
            except PlaywrightError as exc:
                raise FetchError(f"navigation failed for {url}: {exc}") from exc

            self._dump_html(page)
            try:
                return self._extract_records(page)
            except PlaywrightError as exc:
                raise FetchError(f"page evaluation failed for {url}: {exc}") from exc
        finally:
            page.close()

    def _dump_html(self, page: Page) -> None:
        if not self.debug_html_path:
            return
        try:
            self.debug_html_path.write_text(page.content(), encoding="utf-8")
        except (OSError, PlaywrightError) as exc:
            LOG.warning("could not write debug html to %s: %s", self.debug_html_path, exc)

    def _extract_records(self, page: Page) -> list[AvailabilityRecord]:
        raise NotImplementedError
