"""Test configuration and fixtures for sitecheck."""

from collections.abc import Generator
from pathlib import Path
import tempfile

import pytest

from sitecheck.assets import AssetManager
from sitecheck.issues import Issue, IssueManager
from sitecheck.plugins import CheckContext, Plugin

BASE_URL = "https://example.com/"


class RecordingPlugin(Plugin):
    """Plugin that remembers every item it checked.

    Items whose URL is listed in ``broken`` get one issue reported.
    """

    def __init__(self, broken: tuple[str, ...] = (), raises: tuple[str, ...] = (), **kwargs):
        super().__init__(**kwargs)
        self.broken = set(broken)
        self.raises = set(raises)
        self.checked: list[object] = []

    async def check(self, context: CheckContext) -> None:
        self.checked.append(context.item)
        url = str(context.item.url)
        if url in self.raises:
            raise RuntimeError(f"cannot check {url}")
        if url in self.broken:
            context.report(Issue(message="Broken", page=url, url=url))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def asset_manager() -> AssetManager:
    """Asset manager without an HTTP client; pages are advanced by hand."""
    return AssetManager(BASE_URL)


@pytest.fixture
def issue_manager() -> IssueManager:
    return IssueManager()
