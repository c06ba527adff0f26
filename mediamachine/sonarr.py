"""
Sonarr API Client
"""

import logging
from typing import List

from .base_client import BaseApiClient
from .decoding import (
    decode_list,
    disk_space_from_payload,
    episode_from_payload,
    expect_list,
    quality_profile_from_payload,
    queue_item_from_payload,
    queue_records,
    root_folder_from_payload,
    show_from_library,
)
from .errors import AuthenticationError, DecodeError, HTTPStatusError
from .models import (
    CommandStatus,
    DiskSpace,
    DownloadQueueItem,
    Episode,
    QualityProfile,
    RootFolder,
    Show,
    ShowToAdd,
)
from .payloads import CommandPayload, IndexerPayload, LibraryShowPayload

logger = logging.getLogger(__name__)


class SonarrClient(BaseApiClient):
    """Client to interact with Sonarr API"""

    api_prefix = "/api/v3"

    def __init__(self, url: str, api_key: str, timeout: float | None = None):
        super().__init__(url, timeout=timeout)
        self.api_key = api_key
        self.session.headers.update({"X-Api-Key": api_key})

    def check_status(self) -> int:
        """Call the status endpoint; only HTTP 200 counts

        Raises:
            AuthenticationError: if the server answers anything but 200
        """
        try:
            return self._request("GET", "system/status", expected=(200,)).status_code
        except HTTPStatusError as e:
            raise AuthenticationError(
                "Invalid API key or server response.", status_code=e.status_code
            ) from e

    def get_all_series(self) -> List[Show]:
        """Fetch all series"""
        data = expect_list(self._get("series"), "series")
        return decode_list(data, show_from_library, "series")

    def get_series_payload(self, series_id: int) -> LibraryShowPayload:
        """Fetch one series as the raw record Sonarr expects back on PUT"""
        data = self._get(f"series/{series_id}")
        if not isinstance(data, dict):
            raise DecodeError(f"Series {series_id} is not an object")
        return data

    def update_series(self, series_id: int, payload: LibraryShowPayload) -> int:
        """PUT the whole series record back; returns the status code"""
        response = self._request(
            "PUT", f"series/{series_id}", data=payload, expected=(200, 202)
        )
        return response.status_code

    def add_series(self, show: ShowToAdd) -> Show | None:
        """Create a series. Returns the created series when Sonarr echoes it."""
        logger.info(f"Adding '{show.title}' (TVDB {show.tvdb_id}) to {show.path}")
        response = self._request(
            "POST", "series", data=show.to_payload(), expected=(200, 201)
        )
        try:
            return show_from_library(self._json(response))
        except DecodeError as e:
            logger.warning(f"Series added but the response could not be read: {e}")
            return None

    def lookup_series_payloads(self, term: str) -> list:
        """Raw results of a series lookup by free text"""
        return expect_list(
            self._get("series/lookup", params={"term": term}), "lookup results"
        )

    def lookup_series(self, term: str) -> List[Show]:
        """Search series by free text"""
        return decode_list(self.lookup_series_payloads(term), show_from_library, "lookup result")

    def get_series_episodes(
        self, series_id: int, season_number: int | None = None
    ) -> List[Episode]:
        """Fetch episodes for a series"""
        params = {"seriesId": series_id}
        if season_number is not None:
            params["seasonNumber"] = season_number

        data = expect_list(self._get("episode", params=params), "episodes")
        return decode_list(data, episode_from_payload, "episode")

    def get_episode(self, episode_id: int) -> Episode:
        return episode_from_payload(self._get(f"episode/{episode_id}"))

    def set_episodes_monitored(self, episode_ids: List[int], monitored: bool) -> int:
        response = self._request(
            "PUT",
            "episode/monitor",
            data={"episodeIds": episode_ids, "monitored": monitored},
            expected=(200, 202),
        )
        return response.status_code

    def delete_episode_file(self, episode_file_id: int) -> int:
        logger.info(f"Deleting episode file {episode_file_id}")
        response = self._request(
            "DELETE", f"episodefile/{episode_file_id}", expected=(200, 202)
        )
        return response.status_code

    def search_episodes(self, episode_ids: List[int]) -> CommandStatus:
        """Queue an EpisodeSearch command"""
        data: CommandPayload = {"name": "EpisodeSearch", "episodeIds": episode_ids}
        response = self._request("POST", "command", data=data, expected=(200, 201))

        status = CommandStatus(name="EpisodeSearch")
        try:
            body = self._json(response)
        except DecodeError:
            return status
        if isinstance(body, dict):
            status.id = body.get("id")
            status.status = body.get("status") or status.status
        logger.info(f"Search queued for episodes {episode_ids} (command {status.id})")
        return status

    def get_root_folders(self) -> List[RootFolder]:
        data = expect_list(self._get("rootfolder"), "root folders")
        return decode_list(data, root_folder_from_payload, "root folder")

    def get_quality_profiles(self) -> List[QualityProfile]:
        data = expect_list(self._get("qualityprofile"), "quality profiles")
        return decode_list(data, quality_profile_from_payload, "quality profile")

    def get_queue(self) -> List[DownloadQueueItem]:
        data = queue_records(self._get("queue"))
        return decode_list(data, queue_item_from_payload, "queue record")

    def delete_queue_item(self, queue_id: int) -> int:
        """Remove a download from the queue. Only HTTP 200 counts."""
        response = self._request("DELETE", f"queue/{queue_id}", expected=(200,))
        return response.status_code

    def get_indexers(self) -> List[IndexerPayload]:
        data = expect_list(self._get("indexer"), "indexers")
        return [i for i in data if isinstance(i, dict)]

    def get_disk_space(self) -> List[DiskSpace]:
        data = expect_list(self._get("diskspace"), "disk space entries")
        return decode_list(data, disk_space_from_payload, "disk space entry")
