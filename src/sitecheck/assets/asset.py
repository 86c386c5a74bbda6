"""Base asset model with a monotonically advancing status."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

import httpx

from sitecheck.errors import AssetManagerMissingError
from sitecheck.events import EventEmitter

if TYPE_CHECKING:
    from .manager import AssetManager

logger = logging.getLogger(__name__)


class AssetStatus(IntEnum):
    """Lifecycle of an asset. Values only ever increase."""

    UNKNOWN = 0
    MISSING = 100
    EXISTS = 200
    PARSING = 300
    PARSED = 400


@dataclass
class AssetOptions:
    """Per-asset settings decided when the asset is registered."""

    skip: bool = False


class Asset:
    """A URL-addressable resource discovered during a crawl.

    Identity is the object itself: the manager keeps exactly one asset per
    normalized URL. Every status advance emits ``"status-changed"`` on
    ``events`` with the asset as the only argument.
    """

    def __init__(
        self,
        url: str,
        manager: AssetManager | None = None,
        options: AssetOptions | None = None,
    ):
        self.url = url
        self.manager = manager
        self.options = options or AssetOptions()
        self.events = EventEmitter()
        self._status = AssetStatus.UNKNOWN
        self._existence_check: asyncio.Future | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url!r}, status={self._status.name})"

    @property
    def status(self) -> AssetStatus:
        return self._status

    @status.setter
    def status(self, value: AssetStatus) -> None:
        # MISSING is terminal, and nothing moves backwards.
        if self._status == AssetStatus.MISSING or value <= self._status:
            return
        self._status = AssetStatus(value)
        self.events.emit("status-changed", self)

    async def exists(self) -> bool:
        """Check the URL once and cache the answer in ``status``."""
        if self._status >= AssetStatus.EXISTS:
            return True
        if self._status == AssetStatus.MISSING:
            return False
        if self._existence_check is None:
            self._existence_check = asyncio.ensure_future(self._check_exists())
        await self._existence_check
        return self._status >= AssetStatus.EXISTS

    def _require_manager(self) -> AssetManager:
        if self.manager is None or self.manager.client is None:
            raise AssetManagerMissingError(f"No HTTP client available to fetch {self.url}")
        return self.manager

    async def _check_exists(self) -> None:
        client = self._require_manager().client
        try:
            response = await client.head(self.url)
            if response.status_code in (405, 501):
                response = await client.get(self.url)
        except httpx.HTTPError as exc:
            logger.debug("Existence check failed for %s: %s", self.url, exc)
            self.status = AssetStatus.MISSING
            return
        if response.status_code >= 400:
            self.status = AssetStatus.MISSING
        else:
            self.status = AssetStatus.EXISTS
