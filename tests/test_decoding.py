import logging

import pytest

from mediamachine.decoding import (
    decode_list,
    discovery_results,
    disk_space_from_payload,
    episode_from_payload,
    quality_profile_from_payload,
    queue_item_from_payload,
    queue_records,
    resolve_external_id,
    resolve_identifier,
    resolve_name,
    resolve_poster,
    resolve_vote_average,
    show_from_discovery,
    show_from_library,
)
from mediamachine.errors import DecodeError
from tests.conftest import series_payload


def test_identifier_prefers_id():
    assert resolve_identifier({"id": 7, "tvdb_id": 8, "tvdbId": 9}) == 7


def test_identifier_falls_back_in_order():
    assert resolve_identifier({"tvdb_id": 8, "tvdbId": 9}) == 8
    assert resolve_identifier({"tvdbId": 9}) == 9


def test_identifier_skips_non_positive_and_wrong_types():
    assert resolve_identifier({"id": 0, "tvdbId": 81189}) == 81189
    assert resolve_identifier({"id": "12", "tvdb_id": True, "tvdbId": 3}) == 3


def test_identifier_missing_raises():
    with pytest.raises(DecodeError):
        resolve_identifier({"name": "Nameless", "id": -1})


def test_name_falls_back_to_title():
    assert resolve_name({"name": "Dark"}) == "Dark"
    assert resolve_name({"title": "Severance"}) == "Severance"
    assert resolve_name({"name": "", "title": "Andor"}) == "Andor"
    with pytest.raises(DecodeError):
        resolve_name({"id": 1})


def test_external_id_none_when_unknown():
    assert resolve_external_id({"tvdbId": 81189}) == 81189
    assert resolve_external_id({"tvdb_id": 5}) == 5
    assert resolve_external_id({"tvdbId": 0}) is None
    assert resolve_external_id({}) is None


def test_poster_direct_path_wins():
    payload = {
        "poster_path": "/direct.jpg",
        "images": [{"coverType": "poster", "remoteUrl": "https://img/remote.jpg"}],
    }
    assert resolve_poster(payload) == ("/direct.jpg", "https://img/remote.jpg")

    show = show_from_discovery({"id": 1, "name": "X", **payload})
    assert show.poster == "/direct.jpg"


def test_poster_from_first_poster_image():
    payload = {
        "images": [
            {"coverType": "banner", "remoteUrl": "https://img/banner.jpg"},
            {"coverType": "poster", "url": "/MediaCover/1/poster.jpg"},
            {"coverType": "poster", "remoteUrl": "https://img/second.jpg"},
        ]
    }
    assert resolve_poster(payload) == (None, "/MediaCover/1/poster.jpg")


def test_vote_average_falls_back_to_ratings():
    assert resolve_vote_average({"vote_average": 8}) == 8.0
    assert resolve_vote_average({"ratings": {"value": 7.5}}) == 7.5
    assert resolve_vote_average({"ratings": "n/a"}) is None


def test_show_from_discovery():
    show = show_from_discovery(
        {
            "id": 1396,
            "name": "Breaking Bad",
            "overview": "Walter White turns to cooking meth.",
            "poster_path": "/ggFHVNu6YYI5L9pCfOacjizRGt.jpg",
            "first_air_date": "2008-01-20",
            "vote_average": 8.9,
        }
    )
    assert show.id == 1396
    assert show.name == "Breaking Bad"
    assert show.vote_average == 8.9
    assert show.monitored is None
    assert show.tvdb_id is None
    assert not show.in_library
    assert show.poster_image_url() == (
        "https://image.tmdb.org/t/p/w500/ggFHVNu6YYI5L9pCfOacjizRGt.jpg"
    )


def test_show_from_library():
    show = show_from_library(series_payload(series_id=4, title="The Wire", tvdb_id=79126))
    assert show.id == 4
    assert show.name == "The Wire"
    assert show.tvdb_id == 79126
    assert show.monitored is True
    assert [s.season_number for s in show.seasons] == [0, 1, 2]
    assert show.get_season(1).monitored is True
    assert show.get_season(0).monitored is False
    assert show.poster == "https://img/4.jpg"
    assert show.vote_average == 8.4


def test_lookup_result_without_library_id_uses_tvdb_id():
    show = show_from_library({"title": "Dark", "tvdbId": 334824, "year": 2017})
    assert show.id == 334824
    assert show.tvdb_id == 334824
    assert show.monitored is None


def test_decode_list_drops_bad_records(caplog):
    items = [{"id": 1, "name": "Ok"}, {"name": "No id"}, "garbage", {"id": 2, "title": "Fine"}]
    with caplog.at_level(logging.WARNING):
        shows = decode_list(items, show_from_discovery, "TMDB show")

    assert [s.id for s in shows] == [1, 2]
    assert "Dropping TMDB show #1" in caplog.text
    assert "Dropping TMDB show #2" in caplog.text


def test_discovery_results_requires_results_list():
    assert discovery_results({"page": 1, "results": []}) == []
    with pytest.raises(DecodeError):
        discovery_results({"status_message": "Invalid API key"})


def test_episode_defaults():
    episode = episode_from_payload(
        {"id": 11, "seriesId": 1, "seasonNumber": 2, "episodeNumber": 3, "episodeFileId": 0}
    )
    assert episode.title == "TBA"
    assert episode.has_file is False
    assert episode.episode_file_id is None

    with pytest.raises(DecodeError):
        episode_from_payload({"id": 11, "seasonNumber": 2})


def test_queue_records_accepts_paged_and_bare_responses():
    record = {
        "id": 5,
        "title": "Show.S01E01.1080p",
        "size": 1000,
        "sizeleft": 250,
        "status": "downloading",
        "quality": {"quality": {"name": "WEBDL-1080p", "resolution": 1080}},
    }
    assert queue_records({"page": 1, "records": [record]}) == [record]
    assert queue_records([record]) == [record]

    item = queue_item_from_payload(record)
    assert item.progress == 0.75
    assert item.quality.resolution == 1080


@pytest.mark.parametrize(
    "field, value",
    [("id", None), ("seasonNumber", None), ("episodeNumber", "3"), ("id", 1.5)],
)
def test_episode_with_invalid_number_raises(field, value):
    payload = {"id": 11, "seriesId": 1, "seasonNumber": 2, "episodeNumber": 3, field: value}
    with pytest.raises(DecodeError):
        episode_from_payload(payload)


@pytest.mark.parametrize(
    "record",
    [
        {"id": 1, "title": "A", "size": None},
        {"id": 1, "title": "A", "sizeleft": "big"},
        {"id": "1", "title": "A"},
        {"id": 1, "title": None},
    ],
)
def test_queue_record_with_invalid_field_raises(record):
    with pytest.raises(DecodeError):
        queue_item_from_payload(record)


def test_queue_record_sizes_default_to_zero():
    item = queue_item_from_payload({"id": 1, "title": "A"})
    assert item.size == 0.0
    assert item.size_left == 0.0


def test_quality_profile_and_disk_space_validate_fields():
    with pytest.raises(DecodeError):
        quality_profile_from_payload({"id": None, "name": "HD-1080p"})
    with pytest.raises(DecodeError):
        disk_space_from_payload({"path": "/tv", "freeSpace": None})

    disk = disk_space_from_payload({"path": "/tv", "freeSpace": 50, "totalSpace": 100})
    assert disk.label == "/tv"
    assert disk.free_space == 50.0
