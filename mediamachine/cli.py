"""
Command Line Interface (CLI) with Click
"""

import logging
import sys
import time
from pathlib import Path

import click
import schedule
from rich.console import Console

from mediamachine.catalog import RemoteCatalogClient
from mediamachine.cli_config import (
    build_catalog,
    load_config_from_args,
    report_failure,
    setup_context,
    validate_sonarr_connection,
)
from mediamachine.commands import (
    add_command,
    cancel_command,
    discover_command,
    episodes_command,
    library_command,
    queue_command,
    search_command,
    stats_command,
    test_command,
    upcoming_command,
)
from mediamachine.config import DEFAULT_CONFIG_PATH, VALID_WATCH_UNITS, Config
from mediamachine.utils import setup_logging

logger = logging.getLogger(__name__)
console = Console()


def _connected(ctx) -> RemoteCatalogClient:
    """Catalog client authenticated with the configured credentials"""
    config: Config = ctx.obj["config"]
    catalog: RemoteCatalogClient = ctx.obj["catalog"]
    validate_sonarr_connection(config, catalog)
    return catalog


@click.group()
@click.option("--config", "-c", type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--sonarr-url", envvar="SONARR_URL", help="Sonarr URL")
@click.option("--sonarr-api-key", envvar="SONARR_API_KEY", help="Sonarr API key")
@click.option("--tmdb-api-key", envvar="TMDB_API_KEY", help="TMDB API key")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level (default from config, else INFO)",
)
@click.pass_context
def cli(ctx, config, sonarr_url, sonarr_api_key, tmdb_api_key, log_level):
    """MediaMachine - Discover TV shows and manage your Sonarr library"""

    cfg = load_config_from_args(config, sonarr_url, sonarr_api_key, tmdb_api_key, log_level)

    # Setup logging
    setup_logging(cfg.log_level)

    config_path = Path(config) if config else DEFAULT_CONFIG_PATH

    ctx.ensure_object(dict)
    ctx.obj.update(setup_context(cfg, config_path, build_catalog(cfg)))


@cli.command()
@click.argument("server_url")
@click.argument("api_key")
@click.option("--no-save", is_flag=True, help="Don't store the credentials in the config file")
@click.pass_context
def connect(ctx, server_url, api_key, no_save):
    """Authenticate against Sonarr and remember the credentials"""
    config: Config = ctx.obj["config"]
    catalog: RemoteCatalogClient = ctx.obj["catalog"]

    outcome = catalog.authenticate(server_url, api_key)
    if not outcome:
        report_failure(outcome, f"connect to {server_url}")

    console.print(f"[green]✓ Connected to {outcome.value.base_url}[/green]")

    if no_save:
        return

    config.sonarr_url = outcome.value.base_url
    config.sonarr_api_key = outcome.value.api_key
    config.to_file(ctx.obj["config_path"])
    console.print(f"[dim]Credentials saved to {ctx.obj['config_path']}[/dim]")


@cli.command()
@click.pass_context
def disconnect(ctx):
    """Forget the stored Sonarr credentials"""
    config: Config = ctx.obj["config"]
    catalog: RemoteCatalogClient = ctx.obj["catalog"]

    catalog.disconnect()
    config.sonarr_url = None
    config.sonarr_api_key = None
    config.to_file(ctx.obj["config_path"])
    console.print("[green]✓ Disconnected[/green]")


@cli.command()
@click.pass_context
def test(ctx):
    """Test connection to Sonarr and TMDB"""
    catalog = _connected(ctx)
    test_command(ctx.obj["config"], catalog)


@cli.command()
@click.argument("category", default="popular")
@click.option("--sort-rating", "-r", is_flag=True, help="Sort by highest rating")
@click.option("--limit", "-l", type=int, help="Show at most this many results")
@click.pass_context
def discover(ctx, category, sort_rating, limit):
    """Browse TMDB: trending, popular, top-rated, or a genre (name or id)"""
    discover_command(ctx.obj["catalog"], category, sort_rating, limit)


@cli.command()
@click.argument("query")
@click.option("--library", "-L", is_flag=True, help="Search with the Sonarr lookup instead of TMDB")
@click.pass_context
def search(ctx, query, library):
    """Search shows by name"""
    catalog = _connected(ctx) if library else ctx.obj["catalog"]
    search_command(catalog, query, library)


@cli.command()
@click.option("--limit", "-l", help="Limit to specific series (name or ID)")
@click.pass_context
def library(ctx, limit):
    """List the series in the Sonarr library"""
    library_command(_connected(ctx), limit)


@cli.command()
@click.argument("series_id", type=int)
@click.option("--season", "-s", type=int, help="Only this season")
@click.option(
    "--client-filter",
    is_flag=True,
    help="Fetch every episode and filter the season locally",
)
@click.pass_context
def episodes(ctx, series_id, season, client_filter):
    """List the episodes of a series"""
    episodes_command(_connected(ctx), series_id, season, server_side=not client_filter)


@cli.command()
@click.argument("name")
@click.option("--profile", "-p", type=int, help="Quality profile ID")
@click.option(
    "--search/--no-search",
    default=None,
    help="Search for existing episodes right after adding",
)
@click.option("--dry-run", "-d", is_flag=True, help="Simulation mode (don't add)")
@click.pass_context
def add(ctx, name, profile, search, dry_run):
    """Add a show to Sonarr"""
    add_command(_connected(ctx), ctx.obj["config"], name, profile, search, dry_run)


@cli.command("monitor-season")
@click.argument("series_id", type=int)
@click.argument("season_number", type=int)
@click.option("--off", is_flag=True, help="Stop monitoring instead")
@click.pass_context
def monitor_season(ctx, series_id, season_number, off):
    """Monitor (or unmonitor) one season of a series"""
    catalog = _connected(ctx)
    catalog.fetch_library()

    outcome = catalog.update_season_monitoring(series_id, season_number, not off)
    if not outcome:
        report_failure(outcome, f"update season {season_number}")

    state = "unmonitored" if off else "monitored"
    console.print(f"[green]✓ Season {season_number} of series {series_id} {state}[/green]")


@cli.command("monitor-episode")
@click.argument("episode_id", type=int)
@click.option("--off", is_flag=True, help="Stop monitoring instead")
@click.pass_context
def monitor_episode(ctx, episode_id, off):
    """Monitor (or unmonitor) one episode"""
    outcome = _connected(ctx).update_episode_monitoring(episode_id, not off)
    if not outcome:
        report_failure(outcome, f"update episode {episode_id}")

    state = "unmonitored" if off else "monitored"
    console.print(f"[green]✓ Episode {episode_id} {state}[/green]")


@cli.command("search-episode")
@click.argument("episode_id", type=int)
@click.pass_context
def search_episode(ctx, episode_id):
    """Ask Sonarr to search for an episode"""
    catalog = _connected(ctx)

    indexers = catalog.check_indexers()
    if indexers and not indexers.value:
        console.print("[yellow]No enabled indexer in Sonarr, search is unavailable[/yellow]")
        sys.exit(1)

    outcome = catalog.search_episode(episode_id)
    if not outcome:
        report_failure(outcome, f"search episode {episode_id}")

    console.print(f"[green]✓ Search queued (command {outcome.value.id or '?'})[/green]")
    console.print("[dim]Sonarr runs the search in the background; check 'queue' later[/dim]")


@cli.command("delete-file")
@click.argument("episode_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete_file(ctx, episode_id, yes):
    """Delete the file of an episode from disk"""
    catalog = _connected(ctx)

    if not yes:
        click.confirm(
            f"Delete the file of episode {episode_id}? This removes it from disk",
            abort=True,
        )

    outcome = catalog.delete_episode_file(episode_id)
    if not outcome:
        report_failure(outcome, f"delete the file of episode {episode_id}")
    console.print(f"[green]✓ File of episode {episode_id} deleted[/green]")


@cli.command()
@click.pass_context
def queue(ctx):
    """Show the download queue"""
    queue_command(_connected(ctx))


@cli.command()
@click.argument("queue_id", type=int)
@click.pass_context
def cancel(ctx, queue_id):
    """Cancel a download"""
    cancel_command(_connected(ctx), queue_id)


@cli.command()
@click.pass_context
def profiles(ctx):
    """List quality profiles"""
    outcome = _connected(ctx).fetch_quality_profiles()
    if not outcome:
        report_failure(outcome, "load quality profiles")
    for profile in outcome.value or []:
        console.print(f"[cyan]{profile.id}[/cyan] {profile.name}")


@cli.command()
@click.pass_context
def rootfolders(ctx):
    """List root folders (the first is used for new shows)"""
    outcome = _connected(ctx).fetch_root_folders()
    if not outcome:
        report_failure(outcome, "load root folders")
    if not outcome.value:
        console.print("[yellow]No root folder configured in Sonarr[/yellow]")
        return
    for index, path in enumerate(outcome.value):
        marker = " [dim](default)[/dim]" if index == 0 else ""
        console.print(f"{path}{marker}")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show library and disk statistics"""
    stats_command(_connected(ctx))


@cli.command()
@click.argument("series_id", type=int)
@click.option("--off", is_flag=True, help="Disable notifications instead")
@click.pass_context
def notify(ctx, series_id, off):
    """Enable (or disable) upcoming-episode alerts for a series"""
    config: Config = ctx.obj["config"]
    catalog: RemoteCatalogClient = ctx.obj["catalog"]

    catalog.set_notifications(series_id, not off)
    config.notifications = catalog.notification_preferences
    config.to_file(ctx.obj["config_path"])
    console.print(
        f"[green]✓ Notifications {'disabled' if off else 'enabled'} for series {series_id}[/green]"
    )


@cli.command()
@click.option("--hours", type=int, help="Look-ahead window in hours")
@click.pass_context
def upcoming(ctx, hours):
    """List episodes airing soon for series with notifications on"""
    config: Config = ctx.obj["config"]
    upcoming_command(_connected(ctx), hours or config.upcoming_window_hours)


@cli.command()
@click.option("--interval", type=int, help="Override watch interval from config")
@click.option(
    "--unit",
    type=click.Choice(VALID_WATCH_UNITS),
    help="Override watch unit from config",
)
@click.pass_context
def watch(ctx, interval, unit):
    """Refresh the queue and upcoming episodes on a schedule"""
    config: Config = ctx.obj["config"]
    catalog = _connected(ctx)

    # Use command-line args if provided, otherwise use config
    watch_interval = interval if interval is not None else config.watch_interval
    watch_unit = unit if unit is not None else config.watch_unit

    if watch_unit not in VALID_WATCH_UNITS:
        console.print(f"[red]Invalid watch unit:[/red] {watch_unit}")
        console.print(f"Valid units: {', '.join(VALID_WATCH_UNITS)}")
        sys.exit(1)

    console.print("[bold cyan]MediaMachine - Watch Mode[/bold cyan]")
    console.print(f"Refreshing every {watch_interval} {watch_unit}")
    console.print("Press Ctrl+C to stop\n")

    def refresh():
        """Run one refresh"""
        console.print(f"\n[bold blue]{time.strftime('%Y-%m-%d %H:%M:%S')}[/bold blue]")
        try:
            queue_command(catalog)
            if any(catalog.notification_preferences.values()):
                upcoming_command(catalog, config.upcoming_window_hours)
        except SystemExit:
            # A failed refresh is reported; the next run retries
            logger.warning("Refresh failed, retrying on next run")
        console.print(f"\n[dim]Next refresh in {watch_interval} {watch_unit}[/dim]")

    job = schedule.every(watch_interval)
    getattr(job, watch_unit).do(refresh)

    refresh()

    try:
        while True:
            schedule.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Watch mode stopped by user[/yellow]")
        sys.exit(0)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
