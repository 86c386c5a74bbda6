"""Data models shared by check plugins."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import httpx

from sitecheck.errors import PluginConfigError

if TYPE_CHECKING:
    from sitecheck.assets import Asset, HtmlPage
    from sitecheck.issues import Issue

MAX_TITLE_LENGTH = 10


@dataclass
class PluginOptions:
    """Display settings of a plugin."""

    title: str = "Plugin"
    check_label: str = "pages"

    def __post_init__(self) -> None:
        if len(self.title) > MAX_TITLE_LENGTH:
            raise PluginConfigError(
                f"Plugin title should be max {MAX_TITLE_LENGTH} characters. Given {self.title!r}"
            )


@dataclass
class Reference:
    """A link found on ``page`` pointing at ``url``."""

    url: str | httpx.URL
    page: HtmlPage


WorkItem = Union["Reference", "HtmlPage"]


@dataclass
class AddToQueueHelpers:
    """Callables handed to ``Plugin.add_to_queue``."""

    is_local_url: Callable[[str], bool]


@dataclass
class CheckContext:
    """Everything a check needs while inspecting one work item."""

    report: Callable[[Issue], None]
    item: WorkItem
    get_asset: Callable[[str], Asset | None]
    is_local_url: Callable[[str], bool]
