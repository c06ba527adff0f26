"""
Data models for MediaMachine
"""

from dataclasses import dataclass, field, replace
from typing import Any, List

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"


@dataclass
class SeasonStatistics:
    """Download progress of a season in Sonarr"""

    episode_file_count: int = 0
    episode_count: int = 0
    total_episode_count: int = 0
    size_on_disk: int = 0
    percent_of_episodes: float | None = None


@dataclass
class Season:
    """Represents a season in Sonarr, keyed by its season number"""

    season_number: int
    monitored: bool
    statistics: SeasonStatistics | None = None

    @property
    def id(self) -> int:
        return self.season_number


@dataclass
class AddOptions:
    """Options sent along with a new series"""

    search_for_missing_episodes: bool = False

    def to_payload(self) -> dict:
        return {"searchForMissingEpisodes": self.search_for_missing_episodes}


@dataclass
class ShowToAdd:
    """Body of a Sonarr create-series request"""

    title: str
    tvdb_id: int
    path: str
    root_folder_path: str
    quality_profile_id: int | None = None
    monitored: bool = True
    add_options: AddOptions | None = None

    def to_payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "tvdbId": self.tvdb_id,
            "qualityProfileId": self.quality_profile_id,
            "monitored": self.monitored,
            "path": self.path,
            "rootFolderPath": self.root_folder_path,
        }
        if self.add_options is not None:
            data["addOptions"] = self.add_options.to_payload()
        return data


@dataclass
class Show:
    """One television series, reconciled from TMDB or Sonarr data.

    ``monitored`` is None for shows that are not in the library yet and
    ``tvdb_id`` is None while the Sonarr identifier is unknown.
    """

    id: int
    name: str
    overview: str | None = None
    poster_path: str | None = None
    poster_url: str | None = None
    first_air_date: str | None = None
    vote_average: float | None = None
    monitored: bool | None = None
    seasons: List[Season] | None = None
    tvdb_id: int | None = None
    root_folder_path: str | None = None
    notifications_enabled: bool = False
    path: str | None = None
    quality_profile_id: int | None = None
    status: str | None = None
    network: str | None = None
    year: int | None = None
    runtime: int | None = None
    genres: List[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.name

    @property
    def poster(self) -> str | None:
        """Direct poster path when present, else the poster from the images list"""
        return self.poster_path or self.poster_url

    @property
    def in_library(self) -> bool:
        return self.monitored is not None

    def poster_image_url(self, size: str = "w500") -> str | None:
        """Absolute poster URL, expanding TMDB relative paths"""
        if self.poster_path:
            if self.poster_path.startswith("http"):
                return self.poster_path
            return f"{TMDB_IMAGE_BASE_URL}{size}{self.poster_path}"
        return self.poster_url

    def get_season(self, season_number: int) -> Season | None:
        for season in self.seasons or []:
            if season.season_number == season_number:
                return season
        return None

    def with_tvdb_id(self, tvdb_id: int) -> "Show":
        return replace(self, tvdb_id=tvdb_id)

    def to_library_model(
        self,
        root_folder_path: str | None = None,
        quality_profile_id: int | None = None,
        search_for_missing_episodes: bool | None = None,
    ) -> ShowToAdd:
        """Build the Sonarr create request for this show.

        Raises:
            ValueError: if the show has no Sonarr identifier or no root folder
        """
        if self.tvdb_id is None or self.tvdb_id <= 0:
            raise ValueError(f"Show '{self.name}' has no TVDB identifier")

        root = root_folder_path or self.root_folder_path
        if not root:
            raise ValueError(f"No root folder available for '{self.name}'")

        add_options = None
        if search_for_missing_episodes is not None:
            add_options = AddOptions(search_for_missing_episodes)

        return ShowToAdd(
            title=self.name,
            tvdb_id=self.tvdb_id,
            path=f"{root}/{self.name}",
            root_folder_path=root,
            quality_profile_id=quality_profile_id,
            monitored=True,
            add_options=add_options,
        )


@dataclass
class Episode:
    """Represents an episode in Sonarr"""

    id: int
    series_id: int
    season_number: int
    episode_number: int
    title: str
    monitored: bool
    has_file: bool
    air_date: str | None = None
    air_date_utc: str | None = None
    overview: str | None = None
    episode_file_id: int | None = None
    show_title: str | None = None


@dataclass
class QueueQuality:
    name: str
    resolution: int | None = None


@dataclass
class DownloadQueueItem:
    """One in-progress Sonarr download"""

    id: int
    title: str
    size: float
    size_left: float
    status: str
    time_left: str | None = None
    quality: QueueQuality | None = None
    estimated_completion_time: str | None = None
    series_id: int | None = None
    episode_id: int | None = None

    @property
    def progress(self) -> float:
        """Completed fraction between 0 and 1"""
        if self.size <= 0:
            return 0.0
        return max(0.0, min(1.0, (self.size - self.size_left) / self.size))


@dataclass
class QualityProfile:
    id: int
    name: str


@dataclass
class RootFolder:
    path: str
    id: int | None = None
    free_space: int | None = None


@dataclass
class DiskSpace:
    path: str
    label: str
    free_space: float
    total_space: float

    @property
    def used_space(self) -> float:
        return self.total_space - self.free_space


@dataclass
class LibraryStats:
    """Library summary shown on the stats dashboard"""

    total_shows: int
    disks: List[DiskSpace]
    disk_space_used_gb: float
    disk_space_free_gb: float


@dataclass
class CommandStatus:
    """A command Sonarr accepted. Accepted means queued, not completed."""

    name: str
    id: int | None = None
    status: str = "queued"
