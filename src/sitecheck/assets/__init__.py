"""Crawled resources and the registry that owns them."""

from .asset import Asset, AssetOptions, AssetStatus
from .html_page import HtmlPage
from .manager import AssetManager

__all__ = [
    "Asset",
    "AssetManager",
    "AssetOptions",
    "AssetStatus",
    "HtmlPage",
]
