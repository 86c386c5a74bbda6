"""Data models for reported issues."""

from dataclasses import dataclass


@dataclass
class Issue:
    """One finding reported by a check.

    ``page`` is the URL of the page the problem was found on, ``url`` the
    offending target (e.g. the broken link) when there is one.
    """

    message: str
    page: str
    url: str = ""
    plugin: str = ""
    severity: str = "error"
