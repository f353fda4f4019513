from __future__ import annotations

import logging
from typing import Any

from playwright.sync_api import Page

from sizewatch.fetchers.playwright_base import PlaywrightPageFetcher
from sizewatch.models import UNKNOWN_LABEL, AvailabilityRecord

LOG = logging.getLogger(__name__)

SIZE_ITEM_SELECTOR = ".size-selector-list__item"
SIZE_LABEL_SELECTOR = ".product-size-info__main-label"
OUT_OF_STOCK_CLASS = "size-selector-list__item--out-of-stock"

# Runs in the page; returns one {label, outOfStock} object per size item in DOM order.
_EXTRACT_SCRIPT = """
(elements, [labelSelector, outOfStockClass]) => elements.map((element) => {
    const labelNode = element.querySelector(labelSelector);
    return {
        label: labelNode && labelNode.textContent ? labelNode.textContent : null,
        outOfStock: element.classList.contains(outOfStockClass),
    };
})
"""


def parse_size_entries(entries: list[dict[str, Any]]) -> list[AvailabilityRecord]:
    records = []
    for entry in entries:
        label = (entry.get("label") or "").strip() or UNKNOWN_LABEL
        records.append(AvailabilityRecord(label=label, available=not entry.get("outOfStock", False)))
    return records


class ZaraSizeFetcher(PlaywrightPageFetcher):
    name = "zara"

    def _extract_records(self, page: Page) -> list[AvailabilityRecord]:
        entries = page.eval_on_selector_all(
            SIZE_ITEM_SELECTOR,
            _EXTRACT_SCRIPT,
            [SIZE_LABEL_SELECTOR, OUT_OF_STOCK_CLASS],
        )
        records = parse_size_entries(entries)
        LOG.debug("zara extracted %d size entries", len(records))
        return records
