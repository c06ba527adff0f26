"""
Discover and search commands - Display TMDB lists and search results
"""

import logging
from typing import List

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..catalog import RemoteCatalogClient
from ..cli_config import report_failure
from ..models import Show

logger = logging.getLogger(__name__)
console = Console()


def render_shows(shows: List[Show], title: str):
    table = Table(title=f"{title} ({len(shows)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("First aired", style="dim")
    table.add_column("Rating", style="yellow")
    table.add_column("TVDB", style="blue")
    table.add_column("In library", style="magenta")

    for show in shows:
        rating = f"{show.vote_average:.1f}" if show.vote_average is not None else "-"
        if show.monitored is None:
            in_library = "-"
        else:
            in_library = "monitored" if show.monitored else "unmonitored"
        table.add_row(
            str(show.id),
            show.name,
            show.first_air_date or "-",
            rating,
            str(show.tvdb_id) if show.tvdb_id is not None else "-",
            in_library,
        )

    console.print(table)


def discover_command(
    catalog: RemoteCatalogClient,
    category: str,
    sort_by_rating: bool = False,
    limit: int | None = None,
) -> None:
    """Execute the discover command logic"""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(f"Fetching {category} shows...", total=None)
        outcome = catalog.list_discovery_shows(category)
        progress.update(task, completed=True)

    if not outcome:
        report_failure(outcome, f"load '{category}' shows")

    shows = outcome.value or []
    if sort_by_rating:
        shows = sorted(shows, key=lambda s: s.vote_average or 0, reverse=True)
    if limit:
        shows = shows[:limit]

    if not shows:
        console.print(f"[yellow]No shows found for '{category}'[/yellow]")
        return

    render_shows(shows, f"Discover: {category}")


def search_command(catalog: RemoteCatalogClient, query: str, library: bool = False) -> None:
    """Search TMDB, or the Sonarr lookup when ``library`` is set"""
    if library:
        outcome = catalog.search_library_shows(query)
        source = "Sonarr"
    else:
        outcome = catalog.search_discovery_shows(query)
        source = "TMDB"

    if not outcome:
        report_failure(outcome, f"search {source}")

    if not outcome.value:
        console.print(f"[yellow]No results for '{query}' on {source}[/yellow]")
        return

    render_shows(outcome.value, f"{source} results for '{query}'")
