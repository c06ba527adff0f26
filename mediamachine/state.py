"""
Observable state published by the catalog client
"""

import logging
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List

from .models import DownloadQueueItem, Episode, LibraryStats, QualityProfile, Show

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]


@dataclass
class CatalogState:
    """Fields populated by the last response of each operation"""

    is_authenticated: bool = False
    library: List[Show] = field(default_factory=list)
    discovery: Dict[str, List[Show]] = field(default_factory=dict)
    search_results: List[Show] = field(default_factory=list)
    episodes: List[Episode] = field(default_factory=list)
    download_queue: List[DownloadQueueItem] = field(default_factory=list)
    root_folder_path: str | None = None
    quality_profiles: List[QualityProfile] = field(default_factory=list)
    has_usable_indexer: bool | None = None
    stats: LibraryStats | None = None
    last_error: str | None = None


class StatePublisher:
    """Holds a CatalogState and notifies listeners of every change"""

    def __init__(self, state: CatalogState | None = None):
        self.state = state or CatalogState()
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._field_names = {f.name for f in fields(CatalogState)}

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it"""
        with self._lock:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, name: str, value: Any):
        if name not in self._field_names:
            raise AttributeError(f"Unknown state field: {name}")

        with self._lock:
            setattr(self.state, name, value)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(name, value)
            except Exception:
                logger.exception(f"State listener failed for '{name}'")

    def notify(self, name: str):
        """Re-announce a field mutated in place"""
        self.publish(name, getattr(self.state, name))
