"""TMDB API client for show discovery."""

import logging
from enum import Enum
from typing import Dict, List

from .base_client import BaseApiClient
from .decoding import decode_list, discovery_results, show_from_discovery
from .models import Show

logger = logging.getLogger(__name__)


class DiscoveryCategory(str, Enum):
    """Fixed TMDB show lists"""

    TRENDING = "trending"
    POPULAR = "popular"
    TOP_RATED = "top-rated"

    @property
    def endpoint(self) -> str:
        return CATEGORY_ENDPOINTS[self]


CATEGORY_ENDPOINTS = {
    DiscoveryCategory.TRENDING: "tv/on_the_air",
    DiscoveryCategory.POPULAR: "tv/popular",
    DiscoveryCategory.TOP_RATED: "tv/top_rated",
}

GENRES: Dict[str, int] = {
    "Drama": 18,
    "Comedy": 35,
    "Action & Adventure": 10759,
    "Sci-Fi & Fantasy": 10765,
    "Crime": 80,
    "Mystery": 9648,
    "Animation": 16,
    "Family": 10751,
    "Documentary": 99,
    "Reality": 10764,
}


def resolve_genre(genre: str | int) -> int | None:
    """Map a genre name (case-insensitive) or numeric id to a TMDB genre id"""
    if isinstance(genre, int) and not isinstance(genre, bool):
        return genre
    text = str(genre).strip()
    if text.isdigit():
        return int(text)
    for name, genre_id in GENRES.items():
        if name.lower() == text.lower():
            return genre_id
    return None


class TMDBClient(BaseApiClient):
    """Client for The Movie Database API."""

    BASE_URL = "https://api.themoviedb.org"
    api_prefix = "/3"

    def __init__(self, api_key: str, url: str = BASE_URL, timeout: float | None = None):
        super().__init__(url, timeout=timeout)
        self.api_key = api_key
        self.session.params = {"api_key": api_key}  # type: ignore

    def _list_shows(self, endpoint: str, params: dict) -> List[Show]:
        results = discovery_results(self._get(endpoint, params))
        return decode_list(results, show_from_discovery, "TMDB show")

    def get_category(self, category: DiscoveryCategory, page: int = 1) -> List[Show]:
        """Fetch one of the fixed show lists."""
        return self._list_shows(category.endpoint, {"language": "en-US", "page": page})

    def discover_by_genre(self, genre_id: int, page: int = 1) -> List[Show]:
        """Fetch shows filtered by genre."""
        return self._list_shows("discover/tv", {"with_genres": genre_id, "page": page})

    def search_tv(self, query: str) -> List[Show]:
        """Search TV shows by free text."""
        return self._list_shows("search/tv", {"query": query, "language": "en-US"})
