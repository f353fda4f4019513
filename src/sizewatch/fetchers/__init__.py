from sizewatch.fetchers.base import PageFetcher
from sizewatch.fetchers.playwright_base import PlaywrightPageFetcher
from sizewatch.fetchers.zara import ZaraSizeFetcher

__all__ = [
    "PageFetcher",
    "PlaywrightPageFetcher",
    "ZaraSizeFetcher",
]
