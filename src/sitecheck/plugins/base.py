"""Base class for checks that run over crawled pages."""

from __future__ import annotations

import asyncio
import functools
import logging
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from rich.text import Text

from sitecheck.assets import Asset, AssetManager, AssetStatus, HtmlPage
from sitecheck.errors import AssetManagerMissingError
from sitecheck.events import EventEmitter
from sitecheck.issues import Issue, IssueManager
from sitecheck.queue import TaskQueue

from .models import AddToQueueHelpers, CheckContext, PluginOptions, WorkItem

if TYPE_CHECKING:
    from sitecheck.runner import CheckWebsite

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """A check that subscribes to parsed pages and runs over derived items.

    The host calls ``on_new_parsed_asset`` for every asset it registers. Once
    a page reaches ``AssetStatus.PARSED`` it is expanded (once) through
    ``add_to_queue`` and every resulting item is checked on the plugin's
    queue. ``events`` emits ``"progress"`` after each item and ``"idle"``
    when the queue drains.

    Subclasses implement ``check``. Checks should report problems through
    ``context.report`` rather than raise; an escaping exception is reported
    as an issue and the item counts as failed.
    """

    def __init__(self, title: str = "Plugin", check_label: str = "pages", concurrency: int = 1):
        self.options = PluginOptions(title=title, check_label=check_label)
        self.issue_manager: IssueManager | None = None
        self.asset_manager: AssetManager | None = None
        self.host: CheckWebsite | None = None
        self.events = EventEmitter()

        self._passed = 0
        self._failed = 0
        self._skipped = 0
        self._queue = TaskQueue(concurrency=concurrency)
        self._processed_pages: weakref.WeakSet[HtmlPage] = weakref.WeakSet()
        self._dispatches: set[asyncio.Task] = set()

        self._queue.events.on("done", self._on_item_done)
        self._queue.events.on("idle", self._on_queue_idle)

    @property
    def title(self) -> str:
        return self.options.title

    @property
    def is_idle(self) -> bool:
        """No queued work and no page expansion in flight."""
        return self._queue.is_idle and not self._dispatches

    def setup(self, host: CheckWebsite | None) -> None:
        """Arm the duration clock and remember the host."""
        self._queue.arm()
        self.host = host

    def on_new_parsed_asset(self, asset: Asset) -> None:
        """Watch a newly registered page until it is parsed."""
        if not isinstance(asset, HtmlPage):
            return
        page_ref = weakref.ref(asset)

        def on_status_changed(*_: Any) -> None:
            page = page_ref()
            if page is None or page.status < AssetStatus.PARSED:
                return
            if page in self._processed_pages:
                return
            self._processed_pages.add(page)
            task = asyncio.ensure_future(self._dispatch(page))
            self._dispatches.add(task)
            task.add_done_callback(self._dispatches.discard)

        asset.events.on("status-changed", on_status_changed)

    async def add_to_queue(self, page: HtmlPage, helpers: AddToQueueHelpers) -> list[WorkItem]:
        """Turn a parsed page into work items. Defaults to the page itself."""
        return [page]

    @abstractmethod
    async def check(self, context: CheckContext) -> None:
        """Inspect ``context.item`` and report issues through ``context.report``."""

    def is_local_url(self, url: str) -> bool:
        return True

    async def wait_idle(self) -> None:
        """Wait until pending expansions and queued items are all done."""
        while not self.is_idle:
            if self._dispatches:
                await asyncio.gather(*self._dispatches, return_exceptions=True)
            await self._queue.wait_idle()

    def get_total(self) -> int:
        return self._queue.get_total()

    def get_done(self) -> int:
        return self._queue.get_done()

    def get_duration(self) -> int:
        return self._queue.get_duration()

    def get_passed(self) -> int:
        return self._passed

    def get_failed(self) -> int:
        return self._failed

    def get_skipped(self) -> int:
        return self._skipped

    def render(self) -> Text:
        from sitecheck.display import render_plugin_status

        return render_plugin_status(self)

    def _on_item_done(self) -> None:
        self.events.emit("progress")

    def _on_queue_idle(self) -> None:
        self.events.emit("idle")

    def _get_asset(self, url: str) -> Asset | None:
        if self.asset_manager is None:
            raise AssetManagerMissingError()
        return self.asset_manager.get_asset(url)

    async def _dispatch(self, page: HtmlPage) -> None:
        helpers = AddToQueueHelpers(is_local_url=self.is_local_url)
        try:
            items = await self.add_to_queue(page, helpers)
        except Exception:
            logger.exception("%s: expanding %s failed", self.title, page.url)
            return
        for item in items:
            self._queue.add(functools.partial(self._process_item, item))

    async def _process_item(self, item: WorkItem) -> None:
        raw_url = getattr(item, "url", None)
        url = str(raw_url) if raw_url is not None else ""
        had_issues = False

        def report(issue: Issue) -> None:
            nonlocal had_issues
            had_issues = True
            if not issue.plugin:
                issue.plugin = self.title
            if self.issue_manager is not None:
                self.issue_manager.add(issue)

        try:
            if url and self._gate_skips(url):
                self._skipped += 1
                return
            context = CheckContext(
                report=report,
                item=item,
                get_asset=self._get_asset,
                is_local_url=self.is_local_url,
            )
            await self.check(context)
        except Exception as exc:
            logger.exception("%s: check raised for %s", self.title, url or item)
            report(
                Issue(
                    message=f"Check raised {type(exc).__name__}: {exc}",
                    page=_page_url(item),
                    url=url,
                )
            )
        if had_issues:
            self._failed += 1
        else:
            self._passed += 1

    def _gate_skips(self, url: str) -> bool:
        """Request a parse of a local page target and tell whether to skip it."""
        target = self.asset_manager.get_asset(url) if self.asset_manager else None
        if self.is_local_url(url) and isinstance(target, HtmlPage):
            # Not awaited: the crawl grows independently of this item.
            target.parse()
        return target is not None and target.options.skip


def _page_url(item: WorkItem) -> str:
    page = getattr(item, "page", None)
    if page is not None:
        return str(page.url)
    return str(getattr(item, "url", "") or "")
