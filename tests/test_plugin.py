"""Tests for the plugin queueing core."""

import asyncio

import pytest

from conftest import BASE_URL, RecordingPlugin
from sitecheck.assets import Asset, AssetManager, AssetStatus, HtmlPage
from sitecheck.errors import AssetManagerMissingError, PluginConfigError
from sitecheck.issues import Issue, IssueManager
from sitecheck.plugins import AddToQueueHelpers, CheckContext, Plugin, Reference


def _wire(plugin: Plugin, manager: AssetManager, issues: IssueManager | None = None) -> Plugin:
    plugin.asset_manager = manager
    plugin.issue_manager = issues
    plugin.setup(None)
    manager.events.on("new-asset", plugin.on_new_parsed_asset)
    return plugin


def _parse_by_hand(page: HtmlPage, links: list[str] | None = None) -> None:
    page.status = AssetStatus.EXISTS
    page.status = AssetStatus.PARSING
    page.links = links or []
    page.status = AssetStatus.PARSED


class CountingPlugin(RecordingPlugin):
    """Counts expansions and turns every link into a reference."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.expanded: list[HtmlPage] = []

    async def add_to_queue(self, page: HtmlPage, helpers: AddToQueueHelpers) -> list:
        self.expanded.append(page)
        return [Reference(url=link, page=page) for link in page.links]


class TestConstruction:
    """Plugin options and validation."""

    def test_defaults(self):
        plugin = RecordingPlugin()
        assert plugin.options.title == "Plugin"
        assert plugin.options.check_label == "pages"

    def test_title_over_ten_characters_rejected(self):
        with pytest.raises(PluginConfigError, match="max 10 characters"):
            RecordingPlugin(title="VeryLongTitle")

    def test_title_of_ten_characters_allowed(self):
        assert RecordingPlugin(title="0123456789").title == "0123456789"

    def test_check_is_abstract(self):
        with pytest.raises(TypeError):
            Plugin()

    def test_default_is_local_url(self):
        assert RecordingPlugin().is_local_url("https://elsewhere.org/") is True


@pytest.mark.asyncio
async def test_single_page_passes_with_progress_then_idle(asset_manager) -> None:
    plugin = _wire(RecordingPlugin(title="Links", check_label="pages"), asset_manager)
    events: list[str] = []
    plugin.events.on("progress", lambda: events.append("progress"))
    plugin.events.on("idle", lambda: events.append("idle"))

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert plugin.checked == [page]
    assert plugin.get_done() == 1
    assert plugin.get_passed() == 1
    assert plugin.get_failed() == 0
    assert plugin.get_skipped() == 0
    assert events == ["progress", "idle"]


@pytest.mark.asyncio
async def test_skipped_target_never_checked() -> None:
    manager = AssetManager(BASE_URL, skip_patterns=[r"example\.com/$"])
    plugin = _wire(RecordingPlugin(), manager)

    page = manager.add_url(BASE_URL)
    assert page.options.skip is True
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert plugin.checked == []
    assert plugin.get_skipped() == 1
    assert plugin.get_done() == 1


@pytest.mark.asyncio
async def test_dispatch_happens_once_per_page(asset_manager) -> None:
    plugin = _wire(CountingPlugin(), asset_manager)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "a"])
    for _ in range(3):
        page.events.emit("status-changed", page)
    await plugin.wait_idle()

    assert plugin.expanded == [page]
    assert plugin.get_total() == 1


@pytest.mark.asyncio
async def test_page_below_threshold_not_dispatched(asset_manager) -> None:
    plugin = _wire(RecordingPlugin(), asset_manager)

    page = asset_manager.add_url(BASE_URL)
    page.status = AssetStatus.EXISTS
    page.status = AssetStatus.PARSING
    await plugin.wait_idle()

    assert plugin.get_total() == 0
    assert page not in plugin._processed_pages


@pytest.mark.asyncio
async def test_non_page_assets_ignored(asset_manager) -> None:
    plugin = _wire(RecordingPlugin(), asset_manager)

    image = asset_manager.add_url(BASE_URL + "logo.png")
    assert type(image) is Asset
    image.status = AssetStatus.EXISTS
    image.events.emit("status-changed", image)
    await plugin.wait_idle()

    assert image.events.listener_count("status-changed") == 0
    assert plugin.get_total() == 0


@pytest.mark.asyncio
async def test_issues_classify_items_as_failed(asset_manager, issue_manager) -> None:
    plugin = _wire(CountingPlugin(broken=(BASE_URL + "missing",)), asset_manager, issue_manager)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "missing", BASE_URL + "ok.png"])
    await plugin.wait_idle()

    assert plugin.get_failed() == 1
    assert plugin.get_passed() == 1
    assert len(issue_manager) == 1
    assert issue_manager.issues[0].plugin == "Plugin"


@pytest.mark.asyncio
async def test_counters_match_done_at_every_progress(asset_manager) -> None:
    plugin = _wire(CountingPlugin(broken=(BASE_URL + "b",), concurrency=2), asset_manager)
    snapshots: list[tuple[int, int]] = []
    plugin.events.on(
        "progress",
        lambda: snapshots.append(
            (plugin.get_passed() + plugin.get_failed() + plugin.get_skipped(), plugin.get_done())
        ),
    )

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + name for name in ("a", "b", "c", "d")])
    await plugin.wait_idle()

    assert len(snapshots) == 4
    assert all(counted == done for counted, done in snapshots)


@pytest.mark.asyncio
async def test_local_target_page_gets_parse_requested(asset_manager) -> None:
    plugin = _wire(CountingPlugin(), asset_manager)
    child = asset_manager.add_url(BASE_URL + "child")
    requested: list[HtmlPage] = []
    child.parse = lambda: requested.append(child)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "child"])
    await plugin.wait_idle()

    assert requested == [child]


@pytest.mark.asyncio
async def test_external_target_page_not_parsed(asset_manager) -> None:
    class LocalOnly(CountingPlugin):
        def is_local_url(self, url: str) -> bool:
            return False

    plugin = _wire(LocalOnly(), asset_manager)
    child = asset_manager.add_url(BASE_URL + "child")
    requested: list[HtmlPage] = []
    child.parse = lambda: requested.append(child)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "child"])
    await plugin.wait_idle()

    assert requested == []
    assert plugin.get_passed() == 1


@pytest.mark.asyncio
async def test_raising_check_counts_as_failed(asset_manager, issue_manager, caplog) -> None:
    plugin = _wire(RecordingPlugin(raises=(BASE_URL,)), asset_manager, issue_manager)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert plugin.get_failed() == 1
    assert plugin.get_done() == 1
    assert "RuntimeError" in issue_manager.issues[0].message
    assert "check raised" in caplog.text


@pytest.mark.asyncio
async def test_get_asset_without_manager_raises() -> None:
    captured: list[Exception] = []

    class Lookup(RecordingPlugin):
        async def check(self, context: CheckContext) -> None:
            try:
                context.get_asset(BASE_URL)
            except AssetManagerMissingError as exc:
                captured.append(exc)

    plugin = Lookup()
    page = HtmlPage(BASE_URL)
    plugin.on_new_parsed_asset(page)
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert len(captured) == 1
    assert "Asset manager not available" in str(captured[0])
    assert plugin.get_passed() == 1


@pytest.mark.asyncio
async def test_report_without_issue_manager_still_fails_item() -> None:
    class Reporter(RecordingPlugin):
        async def check(self, context: CheckContext) -> None:
            context.report(Issue(message="bad", page=BASE_URL))

    plugin = Reporter()
    page = HtmlPage(BASE_URL)
    plugin.on_new_parsed_asset(page)
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert plugin.get_failed() == 1


@pytest.mark.asyncio
async def test_failing_expansion_is_logged(asset_manager, caplog) -> None:
    class Broken(RecordingPlugin):
        async def add_to_queue(self, page, helpers):
            raise ValueError("no links")

    plugin = _wire(Broken(), asset_manager)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page)
    await plugin.wait_idle()

    assert plugin.get_total() == 0
    assert "expanding" in caplog.text


@pytest.mark.asyncio
async def test_raising_locality_check_counts_as_failed(asset_manager, issue_manager, caplog) -> None:
    class BrokenLocality(CountingPlugin):
        def is_local_url(self, url: str) -> bool:
            raise RuntimeError("cannot classify")

    plugin = _wire(BrokenLocality(), asset_manager, issue_manager)
    asset_manager.add_url(BASE_URL + "child")

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "child"])
    await plugin.wait_idle()

    counted = plugin.get_passed() + plugin.get_failed() + plugin.get_skipped()
    assert plugin.get_done() == counted == 1
    assert plugin.get_failed() == 1
    assert plugin.checked == []
    assert "cannot classify" in issue_manager.issues[0].message
    assert issue_manager.issues[0].url == BASE_URL + "child"


@pytest.mark.asyncio
async def test_raising_progress_listener_does_not_stall_plugin(asset_manager, caplog) -> None:
    plugin = _wire(CountingPlugin(), asset_manager)

    def broken() -> None:
        raise RuntimeError("listener blew up")

    plugin.events.on("progress", broken)

    page = asset_manager.add_url(BASE_URL)
    _parse_by_hand(page, links=[BASE_URL + "a", BASE_URL + "b", BASE_URL + "c"])
    await asyncio.wait_for(plugin.wait_idle(), timeout=1)

    assert plugin.get_done() == plugin.get_total() == 3
    assert plugin.get_passed() == 3
