import pytest

from mediamachine.config import Config


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    config = Config(
        sonarr_url="http://sonarr:8989",
        sonarr_api_key="abc",
        tmdb_api_key="tmdb",
        request_timeout=15.0,
        notifications={3: True, 4: False},
    )

    config.to_file(path)
    loaded = Config.from_file(path)

    assert loaded == config
    assert loaded.has_credentials


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_file(tmp_path / "missing.yaml")


def test_notification_keys_are_normalised():
    config = Config(notifications={"7": 1})
    assert config.notifications == {7: True}


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("sonarr_url: http://file:8989\nsonarr_api_key: from-file\nwatch_interval: 10\n")
    monkeypatch.setenv("SONARR_URL", "http://env:8989")
    monkeypatch.delenv("SONARR_API_KEY", raising=False)
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    monkeypatch.setenv("MEDIAMACHINE_REQUEST_TIMEOUT", "2.5")

    config = Config.from_env_and_file(path)

    assert config.sonarr_url == "http://env:8989"
    assert config.sonarr_api_key == "from-file"
    assert config.request_timeout == 2.5
    assert config.watch_interval == 10


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    for name in ("SONARR_URL", "SONARR_API_KEY", "TMDB_API_KEY", "MEDIAMACHINE_LOG_LEVEL",
                 "MEDIAMACHINE_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    config = Config.from_env_and_file(tmp_path / "absent.yaml")

    assert config.log_level == "INFO"
    assert config.request_timeout is None
    assert not config.has_credentials
