"""sitecheck CLI - crawl a site and run checks over every page."""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live

from sitecheck.config import get_concurrency, get_skip_patterns, get_timeout, is_verbose
from sitecheck.display import create_issue_table, create_status_panel
from sitecheck.errors import ConfigError
from sitecheck.plugins import LinksPlugin
from sitecheck.runner import CheckSummary, CheckWebsite
from sitecheck.utils.debug import set_debug_enabled

app = typer.Typer(
    name="sitecheck",
    help="Crawl a website and check every page",
    no_args_is_help=True,
)
console = Console()


@app.command()
def version() -> None:
    """Show the installed sitecheck version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("sitecheck")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"sitecheck {current_version}")


@app.command()
def check(
    url: str = typer.Argument(..., help="Start URL of the crawl"),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", help="Items each check runs at once"
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds"),
    skip: Optional[list[str]] = typer.Option(
        None, "--skip", help="Regex of URLs to skip (repeatable)"
    ),
    external: bool = typer.Option(
        False, "--external/--no-external", help="Also check links to other hosts"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print crawl details"),
) -> None:
    """Crawl URL and report broken links."""
    if not url.startswith(("http://", "https://")):
        console.print(f"[red]Error: URL must start with http:// or https://, got {url}[/red]")
        raise typer.Exit(2)

    try:
        effective_concurrency = concurrency if concurrency is not None else get_concurrency()
        effective_timeout = timeout if timeout is not None else get_timeout()
        skip_patterns = list(skip or []) + get_skip_patterns()
        effective_verbose = verbose or is_verbose()
    except ConfigError as exc:
        console.print(f"[red]Configuration error: {exc}[/red]")
        raise typer.Exit(2)

    if effective_concurrency < 1:
        console.print(f"[red]Error: --concurrency must be at least 1, got {effective_concurrency}[/red]")
        raise typer.Exit(2)
    if effective_timeout <= 0:
        console.print(f"[red]Error: --timeout must be positive, got {effective_timeout}[/red]")
        raise typer.Exit(2)

    set_debug_enabled(effective_verbose)
    if effective_verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    runner = CheckWebsite(
        url,
        plugins=[LinksPlugin(check_external=external, concurrency=effective_concurrency)],
        skip_patterns=skip_patterns,
        timeout=effective_timeout,
    )

    try:
        summary = asyncio.run(run_with_live_display(runner))
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    print_summary(summary)
    if summary.failed:
        raise typer.Exit(1)


async def run_with_live_display(runner: CheckWebsite) -> CheckSummary:
    """Run the crawl while refreshing a status panel."""

    def panel():
        assets = len(runner.asset_manager) if runner.asset_manager else 0
        return create_status_panel(runner.plugins, runner.start_url, assets)

    with Live(panel(), console=console, refresh_per_second=4) as live:
        task = asyncio.ensure_future(runner.run())
        while not task.done():
            await asyncio.sleep(0.25)
            live.update(panel())
        live.update(panel())

    return task.result()


def print_summary(summary: CheckSummary) -> None:
    if summary.issues:
        console.print(create_issue_table(summary.issues))
        console.print(f"[red]✗[/] {len(summary.issues)} issue(s) on {summary.target}")
    else:
        console.print(f"[green]✓[/] No issues found on {summary.target} ({summary.assets} assets)")


def main():
    """Entry point for the CLI."""
    app()
