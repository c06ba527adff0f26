"""
RemoteCatalogClient: single point of contact with TMDB and Sonarr

Every public method returns an ``Outcome`` instead of raising, and
republishes what it fetched into the observable ``CatalogState``.
"""

import copy
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List

from .decoding import resolve_external_id
from .errors import (
    AuthenticationError,
    CatalogError,
    InvalidURLError,
    NoRootFolderError,
    NotConfiguredError,
    NotFoundError,
    SupersededError,
    TransportError,
    UnidentifiedShowError,
)
from .models import (
    CommandStatus,
    DownloadQueueItem,
    Episode,
    LibraryStats,
    QualityProfile,
    Show,
)
from .payloads import LibraryShowPayload
from .results import ErrorKind, Outcome
from .sonarr import SonarrClient
from .state import CatalogState, Listener, StatePublisher
from .tmdb import DiscoveryCategory, TMDBClient, resolve_genre
from .toggles import ToggleTracker

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024**3


@dataclass(frozen=True)
class Credentials:
    """Sonarr endpoint and API key"""

    base_url: str
    api_key: str


def parse_category(value: str) -> DiscoveryCategory | None:
    """Accept "trending", "popular", "top-rated" (or "top_rated")"""
    normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
    try:
        return DiscoveryCategory(normalized)
    except ValueError:
        return None


def set_season_monitored(
    payload: LibraryShowPayload, season_number: int, monitored: bool
) -> LibraryShowPayload:
    """Copy of a series record with one season's monitored flag changed.

    Raises:
        NotFoundError: if the record has no such season
    """
    updated = copy.deepcopy(payload)
    for season in updated.get("seasons") or []:
        if isinstance(season, dict) and season.get("seasonNumber") == season_number:
            season["monitored"] = monitored
            return updated
    raise NotFoundError(f"Season {season_number} not found")


def sort_episodes(episodes: List[Episode]) -> List[Episode]:
    return sorted(episodes, key=lambda e: (e.season_number, e.episode_number))


class RemoteCatalogClient:
    """Facade over the discovery service and the library service"""

    def __init__(
        self,
        tmdb_api_key: str | None = None,
        timeout: float | None = None,
        notifications: Dict[int, bool] | None = None,
    ):
        self.timeout = timeout
        self._tmdb_api_key = tmdb_api_key
        self._tmdb: TMDBClient | None = None
        self._credentials: Credentials | None = None
        self._sonarr: SonarrClient | None = None
        self._credentials_lock = threading.Lock()
        self._publisher = StatePublisher()
        self._toggles = ToggleTracker()
        self._notifications: Dict[int, bool] = dict(notifications or {})

    # State

    @property
    def state(self) -> CatalogState:
        return self._publisher.state

    @property
    def toggles(self) -> ToggleTracker:
        return self._toggles

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._publisher.subscribe(listener)

    @property
    def credentials(self) -> Credentials | None:
        with self._credentials_lock:
            return self._credentials

    @property
    def notification_preferences(self) -> Dict[int, bool]:
        with self._credentials_lock:
            return dict(self._notifications)

    def _library(self) -> SonarrClient:
        with self._credentials_lock:
            if self._sonarr is None:
                raise NotConfiguredError("Server URL or API key is missing")
            return self._sonarr

    def _discovery(self) -> TMDBClient:
        if not self._tmdb_api_key:
            raise NotConfiguredError("TMDB API key is missing")
        with self._credentials_lock:
            if self._tmdb is None:
                self._tmdb = TMDBClient(self._tmdb_api_key, timeout=self.timeout)
            return self._tmdb

    def _failure(self, operation: str, error: CatalogError) -> Outcome:
        logger.error(f"Failed to {operation}: {error.message}")
        self._publisher.publish("last_error", error.message)
        return Outcome.fail(error.kind, error.message, error.status_code)

    def _find_show(self, show_id: int) -> Show | None:
        for show in self.state.library:
            if show.id == show_id:
                return show
        return None

    def _apply_notifications(self, shows: List[Show]):
        preferences = self.notification_preferences
        for show in shows:
            show.notifications_enabled = preferences.get(show.id, False)

    # Session

    def authenticate(self, base_url: str, api_key: str) -> Outcome[Credentials]:
        """Check ``/system/status`` and keep the credential only on HTTP 200"""
        credentials = Credentials(base_url.strip().rstrip("/"), api_key.strip())
        client = SonarrClient(credentials.base_url, credentials.api_key, self.timeout)

        try:
            status = client.check_status()
        except InvalidURLError as e:
            client.close()
            logger.error(f"Authentication failed: {e.message}")
            return Outcome.fail(ErrorKind.INVALID_URL, "Invalid server URL.")
        except TransportError as e:
            client.close()
            logger.error(f"Authentication failed: {e.message}")
            return Outcome.fail(ErrorKind.TRANSPORT, e.message)
        except AuthenticationError as e:
            client.close()
            logger.error(f"Authentication failed (HTTP {e.status_code})")
            return Outcome.fail(ErrorKind.AUTHENTICATION, e.message, e.status_code)

        with self._credentials_lock:
            previous = self._sonarr
            self._credentials = credentials
            self._sonarr = client
        if previous is not None:
            previous.close()

        logger.info(f"Connected to Sonarr at {credentials.base_url}")
        self._publisher.publish("is_authenticated", True)
        return Outcome.ok(credentials, status_code=status)

    def disconnect(self):
        """Forget the credential; later library calls fail as not configured"""
        with self._credentials_lock:
            previous = self._sonarr
            self._credentials = None
            self._sonarr = None
        if previous is not None:
            previous.close()
        self._publisher.publish("is_authenticated", False)

    # Discovery service

    def list_discovery_shows(
        self, category: DiscoveryCategory | str | int
    ) -> Outcome[List[Show]]:
        """Fetch a fixed TMDB list ("trending", "popular", "top-rated") or a genre"""
        try:
            tmdb = self._discovery()
            if isinstance(category, DiscoveryCategory):
                resolved = category
            elif isinstance(category, str):
                resolved = parse_category(category)
            else:
                resolved = None

            if resolved is not None:
                key = resolved.value
                shows = tmdb.get_category(resolved)
            else:
                genre_id = resolve_genre(category)
                if genre_id is None:
                    raise NotFoundError(f"Unknown category or genre: {category}")
                key = f"genre:{genre_id}"
                shows = tmdb.discover_by_genre(genre_id)
        except CatalogError as e:
            return self._failure("list discovery shows", e)

        discovery = dict(self.state.discovery)
        discovery[key] = shows
        self._publisher.publish("discovery", discovery)
        return Outcome.ok(shows)

    def search_discovery_shows(self, query: str) -> Outcome[List[Show]]:
        try:
            shows = self._discovery().search_tv(query)
        except CatalogError as e:
            return self._failure("search TMDB", e)

        self._publisher.publish("search_results", shows)
        return Outcome.ok(shows)

    # Library service

    def search_library_shows(self, query: str) -> Outcome[List[Show]]:
        """Sonarr lookup; results without a usable TVDB id are dropped"""
        try:
            shows = self._library().lookup_series(query)
        except CatalogError as e:
            return self._failure("search Sonarr", e)

        found = [s for s in shows if s.tvdb_id is not None]
        if len(found) < len(shows):
            logger.debug(f"Filtered {len(shows) - len(found)} unidentified lookup results")
        self._apply_notifications(found)
        self._publisher.publish("search_results", found)
        return Outcome.ok(found)

    def fetch_library(self) -> Outcome[List[Show]]:
        try:
            shows = self._library().get_all_series()
        except CatalogError as e:
            return self._failure("fetch library", e)

        self._apply_notifications(shows)
        self._publisher.publish("library", shows)
        return Outcome.ok(shows)

    def fetch_episodes(
        self, show: Show, season_number: int | None = None, server_side: bool = True
    ) -> Outcome[List[Episode]]:
        """Episodes of a show, optionally for one season.

        With ``server_side`` the season is passed as a query parameter;
        otherwise every episode is fetched and filtered here. Either way the
        result is sorted by season then episode and carries the show title.
        """
        try:
            episodes = self._library().get_series_episodes(
                show.id, season_number if server_side else None
            )
        except CatalogError as e:
            return self._failure(f"fetch episodes for '{show.name}'", e)

        if season_number is not None:
            episodes = [e for e in episodes if e.season_number == season_number]
        episodes = sort_episodes(episodes)
        for episode in episodes:
            episode.show_title = show.name

        self._publisher.publish("episodes", episodes)
        return Outcome.ok(episodes)

    def fetch_root_folders(self) -> Outcome[List[str]]:
        """Root folder paths; the first becomes the default for new shows"""
        try:
            folders = self._library().get_root_folders()
        except CatalogError as e:
            return self._failure("fetch root folders", e)

        paths = [f.path for f in folders]
        self._publisher.publish("root_folder_path", paths[0] if paths else None)
        return Outcome.ok(paths)

    def fetch_quality_profiles(self) -> Outcome[List[QualityProfile]]:
        try:
            profiles = self._library().get_quality_profiles()
        except CatalogError as e:
            return self._failure("fetch quality profiles", e)

        self._publisher.publish("quality_profiles", profiles)
        return Outcome.ok(profiles)

    def resolve_library_identifier(self, show_title: str) -> Outcome[int | None]:
        """TVDB id of the first lookup result, or None when unresolved"""
        try:
            results = self._library().lookup_series_payloads(show_title)
        except CatalogError as e:
            return self._failure(f"resolve TVDB id for '{show_title}'", e)

        if not results or not isinstance(results[0], dict):
            logger.info(f"No TVDB id found for '{show_title}'")
            return Outcome.ok(None)
        return Outcome.ok(resolve_external_id(results[0]))

    def add_show_to_library(
        self, show: Show, quality_profile_id: int, start_download: bool
    ) -> Outcome[Show | None]:
        """Create the series in Sonarr.

        The root folder is the show's own ``root_folder_path`` or, failing
        that, the default root folder. ``start_download`` asks Sonarr to
        search for existing episodes right away.
        """
        try:
            sonarr = self._library()
            if show.tvdb_id is None or show.tvdb_id <= 0:
                raise UnidentifiedShowError(f"'{show.name}' has no TVDB identifier")

            root = show.root_folder_path or self.state.root_folder_path
            if not root:
                folders = sonarr.get_root_folders()
                if not folders:
                    raise NoRootFolderError("No root folder available")
                root = folders[0].path
                self._publisher.publish("root_folder_path", root)

            body = show.to_library_model(root, quality_profile_id, start_download)
            added = sonarr.add_series(body)
        except CatalogError as e:
            return self._failure(f"add '{show.name}'", e)

        if added is not None:
            self._publisher.publish("library", self.state.library + [added])
        return Outcome.ok(added)

    def update_season_monitoring(
        self, show_id: int, season_number: int, monitored: bool
    ) -> Outcome[None]:
        """Read-modify-write of the whole series with one season toggled"""
        local_show = self._find_show(show_id)
        local_season = local_show.get_season(season_number) if local_show else None

        def assign(value):
            if local_season is not None:
                local_season.monitored = value
                self._publisher.notify("library")

        change = self._toggles.begin(
            ("season", show_id, season_number),
            monitored,
            local_season.monitored if local_season else None,
            assign,
        )
        try:
            sonarr = self._library()
            with self._toggles.sequenced(("series", show_id)):
                if not self._toggles.is_current(change):
                    raise SupersededError("Replaced by a newer season change")
                payload = sonarr.get_series_payload(show_id)
                updated = set_season_monitored(payload, season_number, monitored)
                status = sonarr.update_series(show_id, updated)
        except CatalogError as e:
            self._toggles.rollback(change)
            return self._failure(f"update season {season_number} of series {show_id}", e)

        self._toggles.commit(change)
        return Outcome.ok(status_code=status)

    def update_episode_monitoring(self, episode_id: int, monitored: bool) -> Outcome[None]:
        local = next((e for e in self.state.episodes if e.id == episode_id), None)

        def assign(value):
            if local is not None:
                local.monitored = value
                self._publisher.notify("episodes")

        key = ("episode", episode_id)
        change = self._toggles.begin(key, monitored, local.monitored if local else None, assign)
        try:
            sonarr = self._library()
            with self._toggles.sequenced(key):
                if not self._toggles.is_current(change):
                    raise SupersededError("Replaced by a newer episode change")
                status = sonarr.set_episodes_monitored([episode_id], monitored)
        except CatalogError as e:
            self._toggles.rollback(change)
            return self._failure(f"update monitoring of episode {episode_id}", e)

        self._toggles.commit(change)
        return Outcome.ok(status_code=status)

    def search_episode(self, episode_id: int) -> Outcome[CommandStatus]:
        """Ask Sonarr to search for releases.

        Success means the command was accepted and queued, not that
        anything was found or downloaded.
        """
        try:
            command = self._library().search_episodes([episode_id])
        except CatalogError as e:
            return self._failure(f"search episode {episode_id}", e)
        return Outcome.ok(command)

    def delete_episode_file(self, episode_id: int) -> Outcome[None]:
        try:
            sonarr = self._library()
            episode = sonarr.get_episode(episode_id)
            if episode.episode_file_id is None:
                raise NotFoundError(f"Episode {episode_id} has no file")
            status = sonarr.delete_episode_file(episode.episode_file_id)
        except CatalogError as e:
            return self._failure(f"delete file of episode {episode_id}", e)

        for local in self.state.episodes:
            if local.id == episode_id:
                local.has_file = False
                local.episode_file_id = None
                self._publisher.notify("episodes")
        return Outcome.ok(status_code=status)

    def fetch_download_queue(self) -> Outcome[List[DownloadQueueItem]]:
        try:
            queue = self._library().get_queue()
        except CatalogError as e:
            return self._failure("fetch download queue", e)

        self._publisher.publish("download_queue", queue)
        return Outcome.ok(queue)

    def cancel_download(self, queue_id: int) -> Outcome[None]:
        """Remove a download; it leaves the local queue only on HTTP 200"""
        snapshot = list(self.state.download_queue)
        index = next((i for i, item in enumerate(snapshot) if item.id == queue_id), None)

        def assign(present):
            if index is None:
                return
            current = [i for i in self.state.download_queue if i.id != queue_id]
            if present:
                current.insert(min(index, len(current)), snapshot[index])
            self._publisher.publish("download_queue", current)

        key = ("queue", queue_id)
        change = self._toggles.begin(key, False, True, assign)
        try:
            sonarr = self._library()
            with self._toggles.sequenced(key):
                if not self._toggles.is_current(change):
                    raise SupersededError("Replaced by a newer cancel request")
                status = sonarr.delete_queue_item(queue_id)
        except CatalogError as e:
            self._toggles.rollback(change)
            return self._failure(f"cancel download {queue_id}", e)

        self._toggles.commit(change)
        return Outcome.ok(status_code=status)

    def check_indexers(self) -> Outcome[bool]:
        """True when at least one indexer is enabled for searching"""
        try:
            indexers = self._library().get_indexers()
        except CatalogError as e:
            return self._failure("check indexers", e)

        usable = any(
            i.get("enable") or i.get("enableAutomaticSearch") or i.get("enableInteractiveSearch")
            for i in indexers
        )
        self._publisher.publish("has_usable_indexer", usable)
        return Outcome.ok(usable)

    # Dashboard and notifications

    def fetch_stats(self) -> Outcome[LibraryStats]:
        try:
            sonarr = self._library()
            total_shows = len(sonarr.get_all_series())
            disks = sonarr.get_disk_space()
        except CatalogError as e:
            return self._failure("fetch stats", e)

        stats = LibraryStats(
            total_shows=total_shows,
            disks=disks,
            disk_space_used_gb=sum(d.used_space for d in disks) / BYTES_PER_GB,
            disk_space_free_gb=sum(d.free_space for d in disks) / BYTES_PER_GB,
        )
        self._publisher.publish("stats", stats)
        return Outcome.ok(stats)

    def set_notifications(self, show_id: int, enabled: bool) -> Outcome[bool]:
        with self._credentials_lock:
            self._notifications[show_id] = enabled
        show = self._find_show(show_id)
        if show is not None:
            show.notifications_enabled = enabled
            self._publisher.notify("library")
        return Outcome.ok(enabled)

    def upcoming_episodes(
        self, window_hours: int = 24, now: datetime | None = None
    ) -> Outcome[List[Episode]]:
        """Episodes airing within the window for shows with notifications on"""
        now = now or datetime.now(timezone.utc)
        horizon = now + timedelta(hours=window_hours)

        try:
            sonarr = self._library()
            shows = self.state.library
            if not shows:
                shows = sonarr.get_all_series()
                self._apply_notifications(shows)
                self._publisher.publish("library", shows)
        except CatalogError as e:
            return self._failure("fetch upcoming episodes", e)

        preferences = self.notification_preferences
        upcoming = []
        for show in shows:
            if not preferences.get(show.id):
                continue
            try:
                episodes = sonarr.get_series_episodes(show.id)
            except CatalogError as e:
                logger.warning(f"Error fetching episodes for '{show.name}': {e.message}")
                continue

            for episode in episodes:
                aired = _parse_air_date(episode.air_date_utc)
                if aired is not None and now < aired <= horizon:
                    episode.show_title = show.name
                    upcoming.append(episode)

        upcoming.sort(key=lambda e: e.air_date_utc or "")
        return Outcome.ok(upcoming)


def _parse_air_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
