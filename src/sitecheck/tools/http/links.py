"""Link extraction from fetched HTML."""

import logging
import re
from urllib.parse import urldefrag, urljoin

logger = logging.getLogger(__name__)

_LINK_RE = re.compile(r"""(?:href|src)\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_IGNORED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


def extract_links(html: str, base_url: str) -> list[str]:
    """Return absolute, fragment-free link targets in document order.

    Targets that cannot be parsed as URLs are skipped.
    """
    links: list[str] = []
    seen: set[str] = set()
    for raw in _LINK_RE.findall(html):
        raw = raw.strip()
        if not raw or raw.startswith("#") or raw.lower().startswith(_IGNORED_SCHEMES):
            continue
        try:
            absolute, _ = urldefrag(urljoin(base_url, raw))
        except ValueError as exc:
            logger.debug("Skipping malformed link %r on %s: %s", raw, base_url, exc)
            continue
        if absolute in seen:
            continue
        seen.add(absolute)
        links.append(absolute)
    return links
