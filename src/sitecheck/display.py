"""Rich rendering of plugin progress and collected issues."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from operator import attrgetter
from typing import TYPE_CHECKING

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from sitecheck.issues import Issue
    from sitecheck.plugins import Plugin

TITLE_WIDTH = 11
BAR_WIDTH = 30


def render_progress_bar(done: int, start: int, total: int, width: int = BAR_WIDTH) -> str:
    """Fixed-width bar for ``done`` within ``start..total``."""
    span = total - start
    ratio = (done - start) / span if span > 0 else 0.0
    ratio = min(max(ratio, 0.0), 1.0)
    filled = round(ratio * width)
    return "█" * filled + "░" * (width - filled)


def render_plugin_status(plugin: Plugin) -> Text:
    """One status line, e.g. ``Links:      ███░░ 3/10 links | 🕑 2s | 3 passed``."""
    total = plugin.get_total()
    done = str(plugin.get_done()).rjust(len(str(total)))
    passed = plugin.get_passed()
    failed = plugin.get_failed()
    skipped = plugin.get_skipped()

    line = Text(f"{plugin.options.title}:".ljust(TITLE_WIDTH))
    line.append(f" {render_progress_bar(plugin.get_done(), 0, total)}")
    line.append(f" {done}/{total} {plugin.options.check_label}")
    line.append(f" | 🕑 {plugin.get_duration()}s | ")
    line.append(f"{passed} passed", style="green" if passed > 0 else None)
    if failed > 0:
        line.append(", ")
        line.append(f"{failed} failed", style="red")
    if skipped > 0:
        line.append(", ")
        line.append(f"{skipped} skipped", style="bright_black")
    return line


def create_status_panel(plugins: Sequence[Plugin], target: str, assets: int) -> Panel:
    """Build the live panel shown while a crawl runs."""
    return Panel(
        Group(*(plugin.render() for plugin in plugins)),
        title="[bold cyan]Site Check[/]",
        subtitle=f"[dim]{target} · {assets} assets[/]",
        border_style="cyan",
        padding=(0, 1),
    )


def create_issue_table(issues: Iterable[Issue]) -> Table:
    """Table of all issues grouped by plugin, in report order within a plugin."""
    table = Table(title="Issues", show_lines=False)
    table.add_column("Check", style="bold")
    table.add_column("Page", style="cyan", overflow="fold")
    table.add_column("Target", overflow="fold")
    table.add_column("Problem", style="red")

    for issue in sorted(issues, key=attrgetter("plugin")):
        table.add_row(issue.plugin, issue.page, issue.url or "—", issue.message)
    return table
