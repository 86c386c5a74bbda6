"""Broken link detection."""

from sitecheck.assets import HtmlPage
from sitecheck.issues import Issue

from .base import Plugin
from .models import AddToQueueHelpers, CheckContext, Reference


class LinksPlugin(Plugin):
    """Report links whose target cannot be fetched.

    Every link of a parsed page becomes one ``Reference``. External links are
    only followed when ``check_external`` is set.
    """

    def __init__(
        self,
        title: str = "Links",
        check_label: str = "links",
        check_external: bool = False,
        concurrency: int = 4,
    ):
        super().__init__(title=title, check_label=check_label, concurrency=concurrency)
        self.check_external = check_external

    def is_local_url(self, url: str) -> bool:
        if self.asset_manager is None:
            return True
        return self.asset_manager.is_local_url(url)

    async def add_to_queue(self, page: HtmlPage, helpers: AddToQueueHelpers) -> list[Reference]:
        return [
            Reference(url=link, page=page)
            for link in page.links
            if self.check_external or helpers.is_local_url(link)
        ]

    async def check(self, context: CheckContext) -> None:
        reference = context.item
        url = str(reference.url)
        asset = context.get_asset(url)
        if asset is None:
            context.report(Issue(message="Link target is unknown", page=reference.page.url, url=url))
            return
        if not await asset.exists():
            context.report(Issue(message="Broken link", page=reference.page.url, url=url))
