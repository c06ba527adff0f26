"""
Commands module for MediaMachine CLI
"""

from .add_command import add_command
from .discover_command import discover_command, search_command
from .library_command import (
    episodes_command,
    library_command,
    stats_command,
    upcoming_command,
)
from .queue_command import cancel_command, queue_command
from .test_command import test_command

__all__ = [
    "add_command",
    "cancel_command",
    "discover_command",
    "episodes_command",
    "library_command",
    "queue_command",
    "search_command",
    "stats_command",
    "test_command",
    "upcoming_command",
]
