"""
Wire formats of the discovery service (TMDB) and the library service (Sonarr)
"""

from typing import Any, NotRequired, TypedDict

__all__ = (
    "ImagePayload",
    "RatingsPayload",
    "DiscoveryShowPayload",
    "DiscoveryResponsePayload",
    "SeasonStatisticsPayload",
    "SeasonPayload",
    "LibraryShowPayload",
    "EpisodePayload",
    "QueueQualityPayload",
    "QueueRecordPayload",
    "QueueResponsePayload",
    "QualityProfilePayload",
    "RootFolderPayload",
    "DiskSpacePayload",
    "IndexerPayload",
    "CommandPayload",
)


class ImagePayload(TypedDict):
    coverType: str
    url: NotRequired[str]
    remoteUrl: NotRequired[str]


class RatingsPayload(TypedDict):
    votes: NotRequired[int]
    value: float


class DiscoveryShowPayload(TypedDict):
    id: int
    name: str
    overview: NotRequired[str]
    poster_path: NotRequired[str | None]
    first_air_date: NotRequired[str]
    vote_average: NotRequired[float]
    genre_ids: NotRequired[list[int]]
    images: NotRequired[list[ImagePayload]]
    ratings: NotRequired[RatingsPayload]


class DiscoveryResponsePayload(TypedDict):
    page: NotRequired[int]
    results: list[DiscoveryShowPayload]


class SeasonStatisticsPayload(TypedDict):
    episodeFileCount: int
    episodeCount: int
    totalEpisodeCount: int
    sizeOnDisk: int
    releaseGroups: NotRequired[list[str]]
    percentOfEpisodes: NotRequired[float]


class SeasonPayload(TypedDict):
    seasonNumber: int
    monitored: bool
    statistics: NotRequired[SeasonStatisticsPayload]


class LibraryShowPayload(TypedDict):
    id: NotRequired[int]
    tvdbId: NotRequired[int]
    tvdb_id: NotRequired[int]
    title: str
    sortTitle: NotRequired[str]
    overview: NotRequired[str]
    status: NotRequired[str]
    network: NotRequired[str]
    year: NotRequired[int]
    runtime: NotRequired[int]
    firstAired: NotRequired[str]
    monitored: NotRequired[bool]
    genres: NotRequired[list[str]]
    ratings: NotRequired[RatingsPayload]
    seasons: NotRequired[list[SeasonPayload]]
    images: NotRequired[list[ImagePayload]]
    path: NotRequired[str]
    rootFolderPath: NotRequired[str]
    qualityProfileId: NotRequired[int]


class EpisodePayload(TypedDict):
    id: int
    seriesId: int
    seasonNumber: int
    episodeNumber: int
    title: NotRequired[str]
    airDate: NotRequired[str]
    airDateUtc: NotRequired[str]
    overview: NotRequired[str]
    monitored: bool
    hasFile: bool
    episodeFileId: NotRequired[int]


class _QueueQualityDetailPayload(TypedDict):
    name: str
    resolution: int


class QueueQualityPayload(TypedDict):
    quality: _QueueQualityDetailPayload


class QueueRecordPayload(TypedDict):
    id: int
    title: str
    size: float
    sizeleft: float
    status: str
    timeleft: NotRequired[str]
    quality: NotRequired[QueueQualityPayload]
    estimatedCompletionTime: NotRequired[str]
    seriesId: NotRequired[int]
    episodeId: NotRequired[int]


class QueueResponsePayload(TypedDict):
    page: NotRequired[int]
    totalRecords: NotRequired[int]
    records: list[QueueRecordPayload]


class QualityProfilePayload(TypedDict):
    id: int
    name: str


class RootFolderPayload(TypedDict):
    id: NotRequired[int]
    path: str
    freeSpace: NotRequired[int]


class DiskSpacePayload(TypedDict):
    path: str
    label: NotRequired[str]
    freeSpace: float
    totalSpace: float


class IndexerPayload(TypedDict):
    id: int
    name: str
    enable: NotRequired[bool]
    enableRss: NotRequired[bool]
    enableAutomaticSearch: NotRequired[bool]
    enableInteractiveSearch: NotRequired[bool]


class CommandPayload(TypedDict):
    id: NotRequired[int]
    name: str
    status: NotRequired[str]
    episodeIds: NotRequired[list[int]]
    body: NotRequired[dict[str, Any]]
