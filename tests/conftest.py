import pytest
import requests
from unittest.mock import MagicMock, patch

from mediamachine.catalog import RemoteCatalogClient

SONARR_URL = "http://sonarr:8989"


def make_response(status_code=200, payload=None, invalid_json=False):
    """Stand-in for requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1")
    else:
        response.json.return_value = payload
    return response


def series_payload(series_id=1, title="Show", tvdb_id=100, seasons=(0, 1, 2)):
    return {
        "id": series_id,
        "title": title,
        "tvdbId": tvdb_id,
        "monitored": True,
        "path": f"/tv/{title}",
        "qualityProfileId": 1,
        "seasons": [
            {
                "seasonNumber": n,
                "monitored": n > 0,
                "statistics": {"episodeFileCount": 1, "totalEpisodeCount": 10},
            }
            for n in seasons
        ],
        "images": [{"coverType": "poster", "remoteUrl": f"https://img/{series_id}.jpg"}],
        "ratings": {"votes": 10, "value": 8.4},
    }


@pytest.fixture
def http():
    """Every requests.Session.request call goes through this mock"""
    with patch.object(requests.Session, "request") as request:
        yield request


@pytest.fixture
def catalog(http):
    client = RemoteCatalogClient(tmdb_api_key="tmdb-key")
    http.return_value = make_response(200, {"version": "3.0.10"})
    assert client.authenticate(SONARR_URL, "sonarr-key")
    http.reset_mock()
    return client
