"""
Queue commands - Display and manage the Sonarr download queue
"""

import logging

from rich.console import Console
from rich.table import Table

from ..catalog import RemoteCatalogClient
from ..cli_config import report_failure
from ..utils import format_date, format_size

logger = logging.getLogger(__name__)
console = Console()


def queue_command(catalog: RemoteCatalogClient) -> None:
    """Fetch and display the download queue"""
    outcome = catalog.fetch_download_queue()
    if not outcome:
        report_failure(outcome, "load the download queue")

    queue = outcome.value or []
    if not queue:
        console.print("[dim]No active downloads[/dim]")
        return

    table = Table(title=f"Download queue ({len(queue)})")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Quality", style="magenta")
    table.add_column("Progress", style="yellow")
    table.add_column("Size", style="blue")
    table.add_column("Status", style="dim")
    table.add_column("Time left", style="cyan")
    table.add_column("ETA", style="dim")

    for item in queue:
        quality = "-"
        if item.quality:
            quality = item.quality.name
            if item.quality.resolution:
                quality += f" ({item.quality.resolution}p)"
        table.add_row(
            str(item.id),
            item.title,
            quality,
            f"{item.progress * 100:.0f}%",
            format_size(item.size),
            item.status,
            item.time_left or "-",
            format_date(item.estimated_completion_time),
        )

    console.print(table)


def cancel_command(catalog: RemoteCatalogClient, queue_id: int) -> None:
    """Cancel one download"""
    catalog.fetch_download_queue()

    outcome = catalog.cancel_download(queue_id)
    if not outcome:
        report_failure(outcome, f"cancel download {queue_id}")

    console.print(f"[green]✓ Download {queue_id} cancelled[/green]")
    console.print(f"[dim]{len(catalog.state.download_queue)} downloads remaining[/dim]")
