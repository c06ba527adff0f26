import pytest
from click.testing import CliRunner

from mediamachine.cli import cli
from mediamachine.config import Config
from tests.conftest import SONARR_URL, make_response

CLEAN_ENV = {
    "SONARR_URL": None,
    "SONARR_API_KEY": None,
    "TMDB_API_KEY": None,
    "MEDIAMACHINE_LOG_LEVEL": None,
    "MEDIAMACHINE_REQUEST_TIMEOUT": None,
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.yaml"


@pytest.fixture
def connected_config(config_path):
    Config(sonarr_url=SONARR_URL, sonarr_api_key="abc").to_file(config_path)
    return config_path


def invoke(runner, config_path, *args, **kwargs):
    return runner.invoke(cli, ["-c", str(config_path), *args], env=CLEAN_ENV, obj={}, **kwargs)


def test_connect_saves_credentials(runner, config_path, http):
    http.return_value = make_response(200, {"version": "3.0.10"})

    result = invoke(runner, config_path, "connect", f"{SONARR_URL}/", "abc")

    assert result.exit_code == 0, result.output
    saved = Config.from_file(config_path)
    assert saved.sonarr_url == SONARR_URL
    assert saved.sonarr_api_key == "abc"


def test_connect_rejected_key(runner, config_path, http):
    http.return_value = make_response(401, {})

    result = invoke(runner, config_path, "connect", SONARR_URL, "wrong")

    assert result.exit_code == 1
    assert "Invalid key or server" in result.output
    assert not config_path.exists()


def test_disconnect_clears_credentials(runner, connected_config, http):
    result = invoke(runner, connected_config, "disconnect")

    assert result.exit_code == 0, result.output
    assert not Config.from_file(connected_config).has_credentials
    http.assert_not_called()


def test_library_without_credentials(runner, config_path, http):
    result = invoke(runner, config_path, "library")

    assert result.exit_code == 1
    assert "Missing configuration" in result.output
    http.assert_not_called()


def test_discover_without_tmdb_key(runner, config_path, http):
    result = invoke(runner, config_path, "discover", "popular")

    assert result.exit_code == 1
    assert "Missing configuration" in result.output


def test_notify_is_persisted(runner, config_path, http):
    result = invoke(runner, config_path, "notify", "5")

    assert result.exit_code == 0, result.output
    assert Config.from_file(config_path).notifications == {5: True}

    invoke(runner, config_path, "notify", "5", "--off")
    assert Config.from_file(config_path).notifications == {5: False}


def test_cancel_download(runner, connected_config, http):
    http.side_effect = [
        make_response(200, {}),
        make_response(200, {"records": [{"id": 8, "title": "Show.S01E01", "size": 10, "sizeleft": 5}]}),
        make_response(200, None),
    ]

    result = invoke(runner, connected_config, "cancel", "8")

    assert result.exit_code == 0, result.output
    assert "Download 8 cancelled" in result.output
    assert http.call_args.args == ("DELETE", f"{SONARR_URL}/api/v3/queue/8")


def test_search_episode_needs_an_indexer(runner, connected_config, http):
    http.side_effect = [make_response(200, {}), make_response(200, [{"enable": False}])]

    result = invoke(runner, connected_config, "search-episode", "42")

    assert result.exit_code == 1
    assert "No enabled indexer" in result.output
    assert http.call_count == 2


def test_delete_file_confirmed(runner, connected_config, http):
    http.side_effect = [
        make_response(200, {}),
        make_response(
            200,
            {"id": 42, "seriesId": 1, "seasonNumber": 1, "episodeNumber": 1, "episodeFileId": 9},
        ),
        make_response(200, None),
    ]

    result = invoke(runner, connected_config, "delete-file", "42", input="y\n")

    assert result.exit_code == 0, result.output
    assert http.call_args.args == ("DELETE", f"{SONARR_URL}/api/v3/episodefile/9")


def test_delete_file_aborted(runner, connected_config, http):
    http.return_value = make_response(200, {})

    result = invoke(runner, connected_config, "delete-file", "42", input="n\n")

    assert result.exit_code == 1
    assert http.call_count == 1
