"""
Configuration management
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PATH = Path("config.yaml")

VALID_WATCH_UNITS = ["seconds", "minutes", "hours", "days"]


@dataclass
class Config:
    """Application configuration"""

    sonarr_url: str | None = None
    sonarr_api_key: str | None = None
    tmdb_api_key: str | None = None
    log_level: str = "INFO"
    # None keeps the requests default (no timeout)
    request_timeout: float | None = None
    default_quality_profile: int | None = None
    search_on_add: bool = False
    # Watch mode
    watch_interval: int = 5
    watch_unit: str = "minutes"
    upcoming_window_hours: int = 24
    # Show id -> notifications enabled
    notifications: dict[int, bool] = field(default_factory=dict)

    def __post_init__(self):
        self.notifications = {
            int(show_id): bool(enabled)
            for show_id, enabled in (self.notifications or {}).items()
        }

    @property
    def has_credentials(self) -> bool:
        return bool(self.sonarr_url and self.sonarr_api_key)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file"""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_and_file(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file and/or environment variables"""
        config_data: dict[str, Any] = {}

        # Load from file if specified
        if config_path and config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}

        # Environment variables take priority
        if os.getenv("SONARR_URL"):
            config_data["sonarr_url"] = os.getenv("SONARR_URL")
        if os.getenv("SONARR_API_KEY"):
            config_data["sonarr_api_key"] = os.getenv("SONARR_API_KEY")
        if os.getenv("TMDB_API_KEY"):
            config_data["tmdb_api_key"] = os.getenv("TMDB_API_KEY")
        if os.getenv("MEDIAMACHINE_LOG_LEVEL"):
            config_data["log_level"] = os.getenv("MEDIAMACHINE_LOG_LEVEL")

        timeout_env = os.getenv("MEDIAMACHINE_REQUEST_TIMEOUT")
        if timeout_env:
            config_data["request_timeout"] = float(timeout_env)

        return cls(**config_data)

    def to_file(self, config_path: Path):
        """Save configuration to a YAML file"""
        data = {
            "sonarr_url": self.sonarr_url,
            "sonarr_api_key": self.sonarr_api_key,
            "tmdb_api_key": self.tmdb_api_key,
            "log_level": self.log_level,
            "request_timeout": self.request_timeout,
            "default_quality_profile": self.default_quality_profile,
            "search_on_add": self.search_on_add,
            "watch_interval": self.watch_interval,
            "watch_unit": self.watch_unit,
            "upcoming_window_hours": self.upcoming_window_hours,
            "notifications": dict(self.notifications),
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
