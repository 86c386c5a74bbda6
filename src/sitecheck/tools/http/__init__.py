"""HTTP helpers for sitecheck."""

from .client import HTTPClient, HTTPResponse
from .links import extract_links

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "extract_links",
]
