"""Check plugins and the queueing core they share."""

from .base import Plugin
from .links import LinksPlugin
from .models import AddToQueueHelpers, CheckContext, PluginOptions, Reference

__all__ = [
    "AddToQueueHelpers",
    "CheckContext",
    "LinksPlugin",
    "Plugin",
    "PluginOptions",
    "Reference",
]
