"""
Miscellaneous utilities
"""

import logging
from datetime import datetime


def setup_logging(log_level: str = "INFO"):
    """Configure logging system"""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_episode_info(
    series_title: str, season: int, episode: int, title: str
) -> str:
    """Format episode information for display"""
    return f"{series_title} - S{season:02d}E{episode:02d} - {title}"


def format_size(size: float) -> str:
    """Human readable byte count"""
    if size <= 0:
        return "-"
    if size >= 1024**3:  # GB
        return f"{size / (1024**3):.2f} GB"
    if size >= 1024**2:  # MB
        return f"{size / (1024**2):.2f} MB"
    if size >= 1024:  # KB
        return f"{size / 1024:.2f} KB"
    return f"{int(size)} B"


def format_date(value: str | None) -> str:
    """Render an ISO date or timestamp as e.g. 'Jan 20, 2025'"""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%b %d, %Y")
