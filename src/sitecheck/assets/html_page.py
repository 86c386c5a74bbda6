"""HTML document assets that can be fetched and parsed for links."""

import asyncio
import logging

import httpx

from sitecheck.errors import AssetManagerMissingError
from sitecheck.tools.http import extract_links

from .asset import Asset, AssetStatus

logger = logging.getLogger(__name__)


class HtmlPage(Asset):
    """A page whose links feed further discovery."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.links: list[str] = []
        self._parse_task: asyncio.Task | None = None

    def parse(self) -> asyncio.Task:
        """Request a parse. Only the first call starts one; later calls share it.

        Raises ``AssetManagerMissingError`` right away for a page that is not
        registered with an asset manager.
        """
        if self.manager is None:
            raise AssetManagerMissingError(f"Cannot parse {self.url} without an asset manager")
        if self._parse_task is None:
            self._parse_task = asyncio.ensure_future(self._parse())
            self.manager.track_parse(self._parse_task)
        return self._parse_task

    async def exists(self) -> bool:
        if self._status == AssetStatus.UNKNOWN:
            await self.parse()
        return self._status >= AssetStatus.EXISTS

    async def _parse(self) -> None:
        if self._status == AssetStatus.MISSING or self._status >= AssetStatus.PARSING:
            return
        manager = self._require_manager()
        try:
            response = await manager.client.get(self.url)
        except httpx.HTTPError as exc:
            logger.debug("Fetching %s failed: %s", self.url, exc)
            self.status = AssetStatus.MISSING
            return
        if response.status_code >= 400:
            logger.debug("Fetching %s returned %d", self.url, response.status_code)
            self.status = AssetStatus.MISSING
            return

        self.status = AssetStatus.EXISTS
        self.status = AssetStatus.PARSING
        try:
            if response.is_html:
                self.links = extract_links(response.body, response.url)
                for link in self.links:
                    self._register(manager, link)
        finally:
            self.status = AssetStatus.PARSED

    def _register(self, manager, link: str) -> None:
        try:
            manager.add_url(link)
        except ValueError as exc:
            logger.debug("Skipping link %s on %s: %s", link, self.url, exc)
