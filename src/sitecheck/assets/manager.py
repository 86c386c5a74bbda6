"""Registry of every asset seen during a crawl."""

import asyncio
import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import PurePosixPath
from urllib.parse import urldefrag, urlsplit

import httpx

from sitecheck.events import EventEmitter
from sitecheck.tools.http import HTTPClient

from .asset import Asset, AssetOptions
from .html_page import HtmlPage

logger = logging.getLogger(__name__)

PAGE_SUFFIXES = frozenset({"", ".html", ".htm", ".xhtml", ".php", ".asp", ".aspx", ".jsp"})


def normalize_url(url: str | httpx.URL) -> str:
    """Drop the fragment; everything else is left as given."""
    return urldefrag(str(url))[0]


class AssetManager:
    """Owns one asset per normalized URL and announces new ones.

    ``events`` emits ``"new-asset"`` with the asset right after it is
    registered, before its status has advanced.
    """

    def __init__(
        self,
        base_url: str,
        client: HTTPClient | None = None,
        skip_patterns: Iterable[str] = (),
    ):
        self.base_url = normalize_url(base_url)
        parts = urlsplit(self.base_url)
        self._origin = (parts.scheme.lower(), parts.netloc.lower())
        self.client = client
        self.events = EventEmitter()
        self._assets: dict[str, Asset] = {}
        self._skip_patterns = [re.compile(pattern) for pattern in skip_patterns]
        self._parsing: set[asyncio.Task] = set()
        self._parsed = asyncio.Event()
        self._parsed.set()

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets.values()))

    def is_local_url(self, url: str | httpx.URL) -> bool:
        parts = urlsplit(str(url))
        return (parts.scheme.lower(), parts.netloc.lower()) == self._origin

    def should_skip(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in self._skip_patterns)

    def get_asset(self, url: str | httpx.URL) -> Asset | None:
        return self._assets.get(normalize_url(url))

    def add_url(self, url: str | httpx.URL) -> Asset:
        """Return the asset for ``url``, registering it on first sight."""
        key = normalize_url(url)
        existing = self._assets.get(key)
        if existing is not None:
            return existing

        options = AssetOptions(skip=self.should_skip(key))
        if self.is_local_url(key) and self._looks_like_page(key):
            asset: Asset = HtmlPage(key, manager=self, options=options)
        else:
            asset = Asset(key, manager=self, options=options)
        self._assets[key] = asset
        logger.debug("Registered %r (skip=%s)", asset, options.skip)
        self.events.emit("new-asset", asset)
        return asset

    def track_parse(self, task: asyncio.Task) -> None:
        """Keep a parse task referenced and count it as in flight."""
        self._parsing.add(task)
        self._parsed.clear()
        task.add_done_callback(self._parse_finished)

    @property
    def parsing_count(self) -> int:
        return len(self._parsing)

    async def wait_parsed(self) -> None:
        """Wait until no parse is in flight."""
        await self._parsed.wait()

    def _parse_finished(self, task: asyncio.Task) -> None:
        self._parsing.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Parsing failed", exc_info=task.exception())
        if not self._parsing:
            self._parsed.set()

    @staticmethod
    def _looks_like_page(url: str) -> bool:
        return PurePosixPath(urlsplit(url).path).suffix.lower() in PAGE_SUFFIXES
