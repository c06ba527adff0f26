"""
Optimistic local changes with rollback

A change is applied to local state before its request is sent, then either
committed or rolled back once the server answers. Each resource key carries
a version counter so that only the newest change for a key may touch local
state or reach the server, and a baseline holding the last value the server
is known to have. A failed change restores the baseline, never the value an
earlier unsent change left behind.

Keys are forgotten once nothing is pending or waiting on them.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterator

logger = logging.getLogger(__name__)


class ToggleState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class PendingChange:
    """One optimistic change setting the resource ``key`` to ``value``"""

    key: Hashable
    version: int
    value: Any
    assign: Callable[[Any], None]
    state: ToggleState = ToggleState.PENDING


@dataclass
class _Resource:
    version: int = 0
    state: ToggleState = ToggleState.IDLE
    baseline: Any = None
    # Changes begun but not yet committed or rolled back
    pending: int = 0
    # Threads inside sequenced()
    users: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)


class ToggleTracker:
    """Tracks optimistic changes per resource key"""

    def __init__(self):
        self._resources: Dict[Hashable, _Resource] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    def _discard_if_idle(self, key: Hashable, resource: _Resource):
        # Caller holds self._lock
        if resource.pending == 0 and resource.users == 0:
            if self._resources.get(key) is resource:
                del self._resources[key]

    def state(self, key: Hashable) -> ToggleState:
        with self._lock:
            resource = self._resources.get(key)
            return resource.state if resource else ToggleState.IDLE

    def begin(
        self,
        key: Hashable,
        value: Any,
        current: Any,
        assign: Callable[[Any], None],
    ) -> PendingChange:
        """Set ``key`` to ``value`` locally and return its token (state PENDING).

        ``current`` is the local value before the change. It becomes the
        baseline when no other change for the key is outstanding.
        """
        with self._lock:
            resource = self._resources.setdefault(key, _Resource())
            if resource.pending == 0:
                resource.baseline = current
            resource.pending += 1
            resource.version += 1
            resource.state = ToggleState.PENDING
            change = PendingChange(key=key, version=resource.version, value=value, assign=assign)
        assign(value)
        return change

    def is_current(self, change: PendingChange) -> bool:
        """Whether no newer change for the same key has begun"""
        with self._lock:
            resource = self._resources.get(change.key)
            return resource is not None and resource.version == change.version

    @contextmanager
    def sequenced(self, key: Hashable) -> Iterator[None]:
        """Serialise requests for one resource"""
        with self._lock:
            resource = self._resources.setdefault(key, _Resource())
            resource.users += 1
        try:
            with resource.lock:
                yield
        finally:
            with self._lock:
                resource.users -= 1
                self._discard_if_idle(key, resource)

    def commit(self, change: PendingChange):
        """The server accepted the change; its value is the new baseline"""
        change.state = ToggleState.COMMITTED
        with self._lock:
            resource = self._resources.get(change.key)
            if resource is None:
                return
            resource.baseline = change.value
            resource.pending -= 1
            if resource.version == change.version:
                resource.state = ToggleState.COMMITTED
            self._discard_if_idle(change.key, resource)

    def rollback(self, change: PendingChange):
        """Undo a failed change.

        Local state goes back to the baseline, and only if this change is
        still the newest one for its key; otherwise a newer change already
        owns that state.
        """
        change.state = ToggleState.ROLLED_BACK
        with self._lock:
            resource = self._resources.get(change.key)
            if resource is None:
                return
            resource.pending -= 1
            current = resource.version == change.version
            baseline = resource.baseline
            if current:
                resource.state = ToggleState.ROLLED_BACK
            self._discard_if_idle(change.key, resource)

        if not current:
            logger.debug(f"Not reverting {change.key}: superseded by a newer change")
            return
        change.assign(baseline)
