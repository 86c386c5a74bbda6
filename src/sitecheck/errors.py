"""Exception types raised by sitecheck."""


class SitecheckError(Exception):
    """Base class for sitecheck errors."""


class PluginConfigError(SitecheckError, ValueError):
    """Raised when a plugin is constructed with invalid options."""


class AssetManagerMissingError(SitecheckError, RuntimeError):
    """Raised when a check needs the asset manager but none is wired."""

    def __init__(self, message: str = "Asset manager not available"):
        super().__init__(message)


class ConfigError(SitecheckError, ValueError):
    """Raised for unparseable configuration values."""
