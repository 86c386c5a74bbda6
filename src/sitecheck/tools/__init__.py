"""Network helpers for sitecheck."""
