import pytest

from mediamachine.decoding import show_from_library
from mediamachine.models import DiskSpace, DownloadQueueItem, Show
from tests.conftest import series_payload


def test_to_library_model_builds_path_from_root():
    show = Show(id=1399, name="Game of Thrones", tvdb_id=121361)

    body = show.to_library_model("/tv", quality_profile_id=6)

    assert body.path == "/tv/Game of Thrones"
    assert body.to_payload() == {
        "title": "Game of Thrones",
        "tvdbId": 121361,
        "qualityProfileId": 6,
        "monitored": True,
        "path": "/tv/Game of Thrones",
        "rootFolderPath": "/tv",
    }


def test_library_show_round_trips_into_create_request():
    show = show_from_library(series_payload(series_id=7, title="Breaking Bad", tvdb_id=81189))

    body = show.to_library_model("/media/tv", quality_profile_id=1)

    assert body.path == "/media/tv/" + show.name
    assert body.title == "Breaking Bad"
    assert body.tvdb_id == 81189
    assert body.to_payload()["tvdbId"] == show.tvdb_id


def test_to_library_model_uses_show_root_folder():
    show = Show(id=1, name="Dark", tvdb_id=334824, root_folder_path="/anime")
    assert show.to_library_model().root_folder_path == "/anime"


@pytest.mark.parametrize("tvdb_id", [None, 0, -1])
def test_to_library_model_requires_identifier(tvdb_id):
    with pytest.raises(ValueError):
        Show(id=1, name="Dark", tvdb_id=tvdb_id).to_library_model("/tv")


def test_to_library_model_requires_root():
    with pytest.raises(ValueError):
        Show(id=1, name="Dark", tvdb_id=334824).to_library_model()


def test_with_tvdb_id_returns_copy():
    show = Show(id=1, name="Dark")
    identified = show.with_tvdb_id(334824)

    assert identified.tvdb_id == 334824
    assert show.tvdb_id is None


def test_poster_image_url():
    assert Show(id=1, name="A", poster_url="https://img/a.jpg").poster_image_url() == (
        "https://img/a.jpg"
    )
    assert Show(id=1, name="A", poster_path="/a.jpg").poster_image_url("w92") == (
        "https://image.tmdb.org/t/p/w92/a.jpg"
    )
    assert Show(id=1, name="A").poster_image_url() is None


def test_queue_progress_bounds():
    assert DownloadQueueItem(id=1, title="a", size=0, size_left=0, status="queued").progress == 0.0
    assert DownloadQueueItem(id=1, title="a", size=100, size_left=0, status="completed").progress == 1.0


def test_disk_used_space():
    assert DiskSpace(path="/", label="root", free_space=30, total_space=100).used_space == 70
