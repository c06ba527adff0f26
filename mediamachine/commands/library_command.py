"""
Library commands - Display the Sonarr library, episodes, stats and upcoming airings
"""

import logging

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..catalog import RemoteCatalogClient
from ..cli_config import report_failure
from ..models import Show
from ..utils import format_date, format_episode_info, format_size

logger = logging.getLogger(__name__)
console = Console()


def _season_summary(show: Show) -> tuple[str, str, int]:
    seasons = show.seasons or []
    monitored = sum(1 for s in seasons if s.monitored)
    have = sum(s.statistics.episode_file_count for s in seasons if s.statistics)
    total = sum(s.statistics.total_episode_count for s in seasons if s.statistics)
    size = sum(s.statistics.size_on_disk for s in seasons if s.statistics)
    return f"{monitored}/{len(seasons)}", f"{have}/{total}", size


def library_command(catalog: RemoteCatalogClient, limit: str | None = None) -> None:
    """Execute the library command logic"""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching library...", total=None)
        outcome = catalog.fetch_library()
        progress.update(task, completed=True)

    if not outcome:
        report_failure(outcome, "load the library")

    shows = outcome.value or []

    # Filter by name/ID if specified
    if limit:
        if limit.isdigit():
            shows = [s for s in shows if s.id == int(limit)]
        else:
            shows = [s for s in shows if limit.lower() in s.name.lower()]

    if not shows:
        console.print("[yellow]No series found in the library[/yellow]")
        return

    table = Table(title=f"Library ({len(shows)})")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Status", style="dim")
    table.add_column("Monitored", style="blue")
    table.add_column("Seasons", style="blue")
    table.add_column("Episodes", style="yellow")
    table.add_column("Size", style="cyan")
    table.add_column("Notify", style="magenta")

    for show in sorted(shows, key=lambda s: s.name.lower()):
        seasons, episodes, size = _season_summary(show)
        table.add_row(
            str(show.id),
            show.name,
            show.status or "-",
            "yes" if show.monitored else "no",
            seasons,
            episodes,
            format_size(size),
            "on" if show.notifications_enabled else "",
        )

    console.print(table)


def find_library_show(catalog: RemoteCatalogClient, show_id: int) -> Show:
    """Look a show up in the library, exiting when it is not there"""
    outcome = catalog.fetch_library()
    if not outcome:
        report_failure(outcome, "load the library")

    for show in outcome.value or []:
        if show.id == show_id:
            return show

    console.print(f"[red]Error:[/red] No series with ID {show_id} in the library")
    raise SystemExit(1)


def episodes_command(
    catalog: RemoteCatalogClient,
    show_id: int,
    season: int | None = None,
    server_side: bool = True,
) -> None:
    """List the episodes of one series"""
    show = find_library_show(catalog, show_id)

    outcome = catalog.fetch_episodes(show, season, server_side=server_side)
    if not outcome:
        report_failure(outcome, f"load episodes of '{show.name}'")

    episodes = outcome.value or []
    if not episodes:
        console.print(f"[yellow]No episodes found for '{show.name}'[/yellow]")
        return

    title = show.name if season is None else f"{show.name} - Season {season}"
    table = Table(title=f"{title} ({len(episodes)} episodes)")
    table.add_column("ID", style="cyan")
    table.add_column("Episode", style="green")
    table.add_column("Air date", style="dim")
    table.add_column("Monitored", style="blue")
    table.add_column("File", style="yellow")

    for episode in episodes:
        table.add_row(
            str(episode.id),
            format_episode_info(
                episode.show_title or show.name,
                episode.season_number,
                episode.episode_number,
                episode.title,
            ),
            format_date(episode.air_date),
            "yes" if episode.monitored else "no",
            "✓" if episode.has_file else "",
        )

    console.print(table)


def stats_command(catalog: RemoteCatalogClient) -> None:
    """Show the library dashboard"""
    outcome = catalog.fetch_stats()
    if not outcome:
        report_failure(outcome, "load stats")

    stats = outcome.value
    console.print(f"[bold cyan]Total shows:[/bold cyan] {stats.total_shows}")
    console.print(f"[bold cyan]Disk space used:[/bold cyan] {stats.disk_space_used_gb:.2f} GB")
    console.print(f"[bold cyan]Disk space free:[/bold cyan] {stats.disk_space_free_gb:.2f} GB")

    if stats.disks:
        table = Table(title="Disks")
        table.add_column("Path", style="green")
        table.add_column("Label", style="dim")
        table.add_column("Used", style="yellow")
        table.add_column("Free", style="cyan")
        table.add_column("Total", style="blue")
        for disk in stats.disks:
            table.add_row(
                disk.path,
                disk.label,
                format_size(disk.used_space),
                format_size(disk.free_space),
                format_size(disk.total_space),
            )
        console.print(table)


def upcoming_command(catalog: RemoteCatalogClient, window_hours: int = 24) -> None:
    """List episodes airing soon for shows with notifications on"""
    if not any(catalog.notification_preferences.values()):
        console.print(
            "[yellow]Notifications are off for every show. "
            "Use 'mediamachine notify SERIES_ID' to enable them.[/yellow]"
        )
        return

    outcome = catalog.upcoming_episodes(window_hours)
    if not outcome:
        report_failure(outcome, "check upcoming episodes")

    episodes = outcome.value or []
    if not episodes:
        console.print(f"[dim]Nothing airing in the next {window_hours} hours[/dim]")
        return

    for episode in episodes:
        info = format_episode_info(
            episode.show_title or "?",
            episode.season_number,
            episode.episode_number,
            episode.title,
        )
        console.print(f"[green]•[/green] {info} [dim]({episode.air_date_utc})[/dim]")
