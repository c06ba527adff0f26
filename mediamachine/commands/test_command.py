"""Test command to verify Sonarr and TMDB connections"""

import sys

from rich.console import Console

from ..catalog import RemoteCatalogClient
from ..config import Config

console = Console()


def test_command(config: Config, catalog: RemoteCatalogClient):
    """Test connection to Sonarr and TMDB (if configured)

    Args:
        config: Application configuration
        catalog: Authenticated catalog client
    """
    console.print("[bold]Testing Sonarr connection...[/bold]")
    console.print(f"URL: {config.sonarr_url}")

    library = catalog.fetch_library()
    if not library:
        console.print(f"[red]✗ Connection error:[/red] {library.error}")
        sys.exit(1)

    console.print("[green]✓ Connection successful![/green]")
    shows = library.value or []
    console.print(f"Number of series: {len(shows)}")
    console.print(f"Monitored series: {len([s for s in shows if s.monitored])}")

    indexers = catalog.check_indexers()
    if not indexers:
        console.print(f"[yellow]⚠ Could not read indexers:[/yellow] {indexers.error}")
    elif indexers.value:
        console.print("[green]✓ At least one indexer is enabled (episode search available)[/green]")
    else:
        console.print("[yellow]⚠ No enabled indexer (episode search unavailable)[/yellow]")

    roots = catalog.fetch_root_folders()
    if roots and roots.value:
        console.print(f"Default root folder: {roots.value[0]}")
    elif roots:
        console.print("[yellow]⚠ No root folder configured (shows cannot be added)[/yellow]")

    if config.tmdb_api_key:
        console.print("\n[bold]Testing TMDB connection...[/bold]")
        popular = catalog.list_discovery_shows("popular")
        if popular:
            console.print("[green]✓ TMDB connection successful![/green]")
        else:
            console.print(f"[red]✗ TMDB connection error:[/red] {popular.error}")
    else:
        console.print("\n[dim]TMDB not configured (skipping test)[/dim]")
