"""
Add command - Find a show, resolve its TVDB id and add it to Sonarr
"""

import logging
from typing import List

import click
from rich.console import Console

from ..catalog import RemoteCatalogClient
from ..cli_config import report_failure
from ..config import Config
from ..models import QualityProfile, Show

logger = logging.getLogger(__name__)
console = Console()


def _find_show(catalog: RemoteCatalogClient, config: Config, name: str) -> Show:
    """First TMDB match when a TMDB key is configured, else first Sonarr lookup match"""
    if config.tmdb_api_key:
        outcome = catalog.search_discovery_shows(name)
        source = "TMDB"
    else:
        outcome = catalog.search_library_shows(name)
        source = "Sonarr"

    if not outcome:
        report_failure(outcome, f"search {source} for '{name}'")
    if not outcome.value:
        console.print(f"[yellow]No show matching '{name}' on {source}[/yellow]")
        raise SystemExit(1)
    return outcome.value[0]


def _pick_profile(profiles: List[QualityProfile], wanted: int | None) -> QualityProfile:
    if wanted is not None:
        for profile in profiles:
            if profile.id == wanted:
                return profile
        console.print(f"[red]Error:[/red] Quality profile {wanted} does not exist")
        raise SystemExit(1)

    if len(profiles) == 1:
        return profiles[0]

    console.print("[bold]Quality profiles:[/bold]")
    for profile in profiles:
        console.print(f"  [cyan]{profile.id}[/cyan] {profile.name}")
    choice = click.prompt(
        "Quality profile",
        type=click.Choice([str(p.id) for p in profiles]),
        default=str(profiles[0].id),
    )
    return next(p for p in profiles if str(p.id) == choice)


def add_command(
    catalog: RemoteCatalogClient,
    config: Config,
    name: str,
    quality_profile_id: int | None = None,
    start_download: bool | None = None,
    dry_run: bool = False,
) -> None:
    """Execute the add command logic"""
    show = _find_show(catalog, config, name)
    console.print(f"Found [green]{show.name}[/green] ({show.first_air_date or 'unknown date'})")

    roots = catalog.fetch_root_folders()
    if not roots:
        report_failure(roots, "load root folders")
    if not roots.value:
        console.print("[red]Error:[/red] No root folder is configured in Sonarr")
        raise SystemExit(1)
    show.root_folder_path = roots.value[0]

    if show.tvdb_id is None:
        resolved = catalog.resolve_library_identifier(show.name)
        if not resolved:
            report_failure(resolved, f"resolve the TVDB id of '{show.name}'")
        if resolved.value is None:
            console.print(f"[red]Error:[/red] '{show.name}' could not be matched in Sonarr")
            raise SystemExit(1)
        show = show.with_tvdb_id(resolved.value)

    profiles = catalog.fetch_quality_profiles()
    if not profiles:
        report_failure(profiles, "load quality profiles")
    if not profiles.value:
        console.print("[red]Error:[/red] Sonarr has no quality profiles")
        raise SystemExit(1)

    profile = _pick_profile(profiles.value, quality_profile_id or config.default_quality_profile)
    search = config.search_on_add if start_download is None else start_download

    if dry_run:
        console.print(
            f"[yellow]DRY RUN:[/yellow] Would add '{show.name}' (TVDB {show.tvdb_id}) "
            f"to {show.root_folder_path}/{show.name} with profile '{profile.name}'"
        )
        return

    outcome = catalog.add_show_to_library(show, profile.id, search)
    if not outcome:
        report_failure(outcome, f"add '{show.name}'")

    console.print(f"[green]✓ '{show.name}' added to Sonarr[/green]")
    if search:
        console.print("[dim]Sonarr will search for existing episodes (queued, not downloaded yet)[/dim]")
