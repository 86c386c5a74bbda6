"""Host that wires assets, issues and plugins into one crawl."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from sitecheck.assets import Asset, AssetManager, HtmlPage
from sitecheck.issues import Issue, IssueManager
from sitecheck.plugins import Plugin
from sitecheck.tools.http import HTTPClient
from sitecheck.utils.debug import debug_print

logger = logging.getLogger(__name__)


@dataclass
class PluginResult:
    """Final counters of one plugin."""

    title: str
    total: int
    passed: int
    failed: int
    skipped: int
    duration: int


@dataclass
class CheckSummary:
    """Outcome of a full site check."""

    target: str
    assets: int
    results: list[PluginResult] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(result.failed for result in self.results)


class CheckWebsite:
    """Crawl a site starting at ``start_url`` and run every plugin over it.

    A client passed in must already be entered; otherwise one is created for
    the duration of ``run``.
    """

    def __init__(
        self,
        start_url: str,
        plugins: Sequence[Plugin],
        *,
        skip_patterns: Iterable[str] = (),
        timeout: float = 15.0,
        client: HTTPClient | None = None,
    ):
        self.start_url = start_url
        self.plugins = list(plugins)
        self.skip_patterns = list(skip_patterns)
        self.timeout = timeout
        self.client = client
        self.issue_manager = IssueManager()
        self.asset_manager: AssetManager | None = None

    @property
    def is_done(self) -> bool:
        if self.asset_manager is None:
            return False
        if self.asset_manager.parsing_count:
            return False
        return all(plugin.is_idle for plugin in self.plugins)

    async def run(self) -> CheckSummary:
        """Crawl until no page is being parsed and every plugin is idle."""
        if self.client is not None:
            return await self._run(self.client)
        async with HTTPClient(timeout=self.timeout) as client:
            return await self._run(client)

    async def wait_until_done(self) -> None:
        if self.asset_manager is None:
            return
        while not self.is_done:
            await self.asset_manager.wait_parsed()
            for plugin in self.plugins:
                await plugin.wait_idle()

    def summary(self) -> CheckSummary:
        return CheckSummary(
            target=self.start_url,
            assets=len(self.asset_manager) if self.asset_manager else 0,
            results=[
                PluginResult(
                    title=plugin.title,
                    total=plugin.get_total(),
                    passed=plugin.get_passed(),
                    failed=plugin.get_failed(),
                    skipped=plugin.get_skipped(),
                    duration=plugin.get_duration(),
                )
                for plugin in self.plugins
            ],
            issues=list(self.issue_manager.issues),
        )

    async def _run(self, client: HTTPClient) -> CheckSummary:
        self.asset_manager = AssetManager(
            self.start_url, client=client, skip_patterns=self.skip_patterns
        )
        self.asset_manager.events.on("new-asset", self._on_new_asset)
        for plugin in self.plugins:
            plugin.asset_manager = self.asset_manager
            plugin.issue_manager = self.issue_manager
            plugin.setup(self)

        root = self.asset_manager.add_url(self.start_url)
        if not isinstance(root, HtmlPage):
            logger.warning("Start URL %s does not look like a page; nothing to crawl", root.url)
        else:
            root.parse()
        await self.wait_until_done()
        logger.info("Checked %s: %d assets", self.start_url, len(self.asset_manager))
        return self.summary()

    def _on_new_asset(self, asset: Asset) -> None:
        debug_print("crawl", f"new asset {asset.url}", Type=type(asset).__name__)
        for plugin in self.plugins:
            plugin.on_new_parsed_asset(asset)
