"""
Conversion of raw API payloads into MediaMachine models

TMDB and Sonarr describe shows with different JSON shapes. Each shape has
its own mapping function, and the fallback rules they share (identifier,
name, poster, rating) live in small resolver functions.
"""

import logging
from typing import Any, Callable, Iterable, List, TypeVar

from .errors import DecodeError
from .models import (
    DiskSpace,
    DownloadQueueItem,
    Episode,
    QualityProfile,
    QueueQuality,
    RootFolder,
    Season,
    SeasonStatistics,
    Show,
)
from .payloads import (
    DiscoveryResponsePayload,
    DiscoveryShowPayload,
    DiskSpacePayload,
    EpisodePayload,
    LibraryShowPayload,
    QualityProfilePayload,
    QueueRecordPayload,
    QueueResponsePayload,
    RootFolderPayload,
    SeasonPayload,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Identifier keys, in resolution order
IDENTIFIER_KEYS = ("id", "tvdb_id", "tvdbId")
NAME_KEYS = ("name", "title")
EXTERNAL_ID_KEYS = ("tvdbId", "tvdb_id")


def _int_or_none(value: Any) -> int | None:
    # bool is an int subclass but never an identifier
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _positive_int(value: Any) -> int | None:
    number = _int_or_none(value)
    if number is None or number <= 0:
        return None
    return number


def _float_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _required(value: T | None, field: str, what: str) -> T:
    """Raise DecodeError when a field is missing or has the wrong type"""
    if value is None:
        raise DecodeError(f"{what} without a valid '{field}'")
    return value


def _require_mapping(payload: Any, what: str) -> dict:
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected an object for {what}, got {type(payload).__name__}")
    return payload


def resolve_identifier(payload: dict) -> int:
    """Resolve the show identifier: ``id``, then ``tvdb_id``, then ``tvdbId``.

    Zero and negative values mean "not found" upstream and are skipped.
    """
    for key in IDENTIFIER_KEYS:
        value = _positive_int(payload.get(key))
        if value is not None:
            return value
    raise DecodeError("Neither 'id', 'tvdb_id' nor 'tvdbId' could be decoded")


def resolve_name(payload: dict) -> str:
    """Resolve the display name: ``name``, then ``title``"""
    for key in NAME_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    raise DecodeError("Neither 'name' nor 'title' could be decoded")


def resolve_external_id(payload: dict) -> int | None:
    """Sonarr identifier, or None when it is missing or not positive"""
    for key in EXTERNAL_ID_KEYS:
        value = _positive_int(payload.get(key))
        if value is not None:
            return value
    return None


def resolve_poster(payload: dict) -> tuple[str | None, str | None]:
    """Return ``(poster_path, poster_url)``.

    ``poster_url`` comes from the first image whose cover type is "poster".
    """
    poster_path = _str_or_none(payload.get("poster_path")) or None

    poster_url = None
    images = payload.get("images")
    if isinstance(images, list):
        for image in images:
            if isinstance(image, dict) and image.get("coverType") == "poster":
                poster_url = _str_or_none(image.get("remoteUrl")) or _str_or_none(
                    image.get("url")
                )
                break

    return poster_path, poster_url


def resolve_vote_average(payload: dict) -> float | None:
    """Rating: ``vote_average``, then ``ratings.value``"""
    vote_average = _float_or_none(payload.get("vote_average"))
    if vote_average is not None:
        return vote_average

    ratings = payload.get("ratings")
    if isinstance(ratings, dict):
        return _float_or_none(ratings.get("value"))
    return None


def season_from_payload(payload: SeasonPayload) -> Season:
    payload = _require_mapping(payload, "season")
    season_number = _int_or_none(payload.get("seasonNumber"))
    if season_number is None:
        raise DecodeError("Season without 'seasonNumber'")

    statistics = None
    stats = payload.get("statistics")
    if isinstance(stats, dict):
        statistics = SeasonStatistics(
            episode_file_count=_int_or_none(stats.get("episodeFileCount")) or 0,
            episode_count=_int_or_none(stats.get("episodeCount")) or 0,
            total_episode_count=_int_or_none(stats.get("totalEpisodeCount")) or 0,
            size_on_disk=_int_or_none(stats.get("sizeOnDisk")) or 0,
            percent_of_episodes=_float_or_none(stats.get("percentOfEpisodes")),
        )

    return Season(
        season_number=season_number,
        monitored=bool(payload.get("monitored", False)),
        statistics=statistics,
    )


def show_from_discovery(payload: DiscoveryShowPayload) -> Show:
    """Map a TMDB show onto a Show"""
    data = _require_mapping(payload, "show")
    poster_path, poster_url = resolve_poster(data)

    return Show(
        id=resolve_identifier(data),
        name=resolve_name(data),
        overview=_str_or_none(data.get("overview")),
        poster_path=poster_path,
        poster_url=poster_url,
        first_air_date=_str_or_none(data.get("first_air_date")) or None,
        vote_average=resolve_vote_average(data),
        tvdb_id=resolve_external_id(data),
    )


def show_from_library(payload: LibraryShowPayload) -> Show:
    """Map a Sonarr series (library or lookup result) onto a Show"""
    data = _require_mapping(payload, "series")
    poster_path, poster_url = resolve_poster(data)

    seasons = None
    if isinstance(data.get("seasons"), list):
        seasons = [season_from_payload(s) for s in data["seasons"]]

    monitored = data.get("monitored")
    genres = data.get("genres")

    return Show(
        id=resolve_identifier(data),
        name=resolve_name(data),
        overview=_str_or_none(data.get("overview")),
        poster_path=poster_path,
        poster_url=poster_url,
        first_air_date=_str_or_none(data.get("firstAired"))
        or _str_or_none(data.get("first_air_date")),
        vote_average=resolve_vote_average(data),
        monitored=monitored if isinstance(monitored, bool) else None,
        seasons=seasons,
        tvdb_id=resolve_external_id(data),
        root_folder_path=_str_or_none(data.get("rootFolderPath")),
        path=_str_or_none(data.get("path")),
        quality_profile_id=_int_or_none(data.get("qualityProfileId")),
        status=_str_or_none(data.get("status")),
        network=_str_or_none(data.get("network")),
        year=_int_or_none(data.get("year")),
        runtime=_int_or_none(data.get("runtime")),
        genres=[g for g in genres if isinstance(g, str)] if isinstance(genres, list) else [],
    )


def episode_from_payload(payload: EpisodePayload) -> Episode:
    data = _require_mapping(payload, "episode")
    return Episode(
        id=_required(_int_or_none(data.get("id")), "id", "Episode"),
        series_id=_int_or_none(data.get("seriesId")) or 0,
        season_number=_required(
            _int_or_none(data.get("seasonNumber")), "seasonNumber", "Episode"
        ),
        episode_number=_required(
            _int_or_none(data.get("episodeNumber")), "episodeNumber", "Episode"
        ),
        title=_str_or_none(data.get("title")) or "TBA",
        monitored=bool(data.get("monitored", False)),
        has_file=bool(data.get("hasFile", False)),
        air_date=_str_or_none(data.get("airDate")),
        air_date_utc=_str_or_none(data.get("airDateUtc")),
        overview=_str_or_none(data.get("overview")),
        episode_file_id=_positive_int(data.get("episodeFileId")),
    )


def queue_item_from_payload(payload: QueueRecordPayload) -> DownloadQueueItem:
    data = _require_mapping(payload, "queue record")

    quality = None
    wrapper = data.get("quality")
    if isinstance(wrapper, dict) and isinstance(wrapper.get("quality"), dict):
        detail = wrapper["quality"]
        quality = QueueQuality(
            name=_str_or_none(detail.get("name")) or "Unknown",
            resolution=_int_or_none(detail.get("resolution")),
        )

    return DownloadQueueItem(
        id=_required(_int_or_none(data.get("id")), "id", "Queue record"),
        title=_required(_str_or_none(data.get("title")), "title", "Queue record"),
        size=_required(_float_or_none(data.get("size", 0)), "size", "Queue record"),
        size_left=_required(
            _float_or_none(data.get("sizeleft", 0)), "sizeleft", "Queue record"
        ),
        status=_str_or_none(data.get("status")) or "unknown",
        time_left=_str_or_none(data.get("timeleft")),
        quality=quality,
        estimated_completion_time=_str_or_none(data.get("estimatedCompletionTime")),
        series_id=_int_or_none(data.get("seriesId")),
        episode_id=_int_or_none(data.get("episodeId")),
    )


def quality_profile_from_payload(payload: QualityProfilePayload) -> QualityProfile:
    data = _require_mapping(payload, "quality profile")
    return QualityProfile(
        id=_required(_int_or_none(data.get("id")), "id", "Quality profile"),
        name=_required(_str_or_none(data.get("name")), "name", "Quality profile"),
    )


def root_folder_from_payload(payload: RootFolderPayload) -> RootFolder:
    data = _require_mapping(payload, "root folder")
    path = _str_or_none(data.get("path"))
    if not path:
        raise DecodeError("Root folder without 'path'")
    return RootFolder(
        path=path,
        id=_int_or_none(data.get("id")),
        free_space=_int_or_none(data.get("freeSpace")),
    )


def disk_space_from_payload(payload: DiskSpacePayload) -> DiskSpace:
    data = _require_mapping(payload, "disk space")
    path = _required(_str_or_none(data.get("path")), "path", "Disk space entry")
    return DiskSpace(
        path=path,
        label=_str_or_none(data.get("label")) or path,
        free_space=_required(
            _float_or_none(data.get("freeSpace", 0)), "freeSpace", "Disk space entry"
        ),
        total_space=_required(
            _float_or_none(data.get("totalSpace", 0)), "totalSpace", "Disk space entry"
        ),
    )


def decode_list(
    items: Iterable[Any], mapper: Callable[[Any], T], what: str = "record"
) -> List[T]:
    """Decode every item, dropping (and logging) the ones that fail"""
    decoded = []
    for index, item in enumerate(items):
        try:
            decoded.append(mapper(item))
        except DecodeError as e:
            logger.warning(f"Dropping {what} #{index}: {e}")
    return decoded


def expect_list(payload: Any, what: str) -> list:
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a list of {what}, got {type(payload).__name__}")
    return payload


def discovery_results(payload: DiscoveryResponsePayload) -> list:
    """Extract ``results`` from a TMDB list response"""
    data = _require_mapping(payload, "discovery response")
    return expect_list(data.get("results"), "results")


def queue_records(payload: QueueResponsePayload | list) -> list:
    """Sonarr v3 pages the queue under ``records``; older versions return a list"""
    if isinstance(payload, list):
        return payload
    data = _require_mapping(payload, "queue response")
    return expect_list(data.get("records"), "queue records")
