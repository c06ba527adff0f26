"""
CLI configuration handler
"""

import sys
from pathlib import Path

from rich.console import Console

from .catalog import RemoteCatalogClient
from .config import DEFAULT_CONFIG_PATH, Config
from .results import ErrorKind, Outcome

console = Console()

FAILURE_MESSAGES = {
    ErrorKind.TRANSPORT: "Network error",
    ErrorKind.AUTHENTICATION: "Invalid key or server",
    ErrorKind.DECODE: "Unexpected response from server",
    ErrorKind.HTTP: "Request rejected by server",
    ErrorKind.NOT_CONFIGURED: "Missing configuration",
    ErrorKind.INVALID_URL: "Invalid server URL",
    ErrorKind.UNIDENTIFIED: "Show could not be identified in Sonarr",
    ErrorKind.NO_ROOT_FOLDER: "No root folder available",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.SUPERSEDED: "Replaced by a newer request",
}

# Failures worth offering a retry for
RETRYABLE = {ErrorKind.TRANSPORT, ErrorKind.DECODE, ErrorKind.HTTP}


def load_config_from_args(
    config_file: str | None,
    sonarr_url: str | None,
    sonarr_api_key: str | None,
    tmdb_api_key: str | None,
    log_level: str | None,
) -> Config:
    """
    Load configuration from CLI arguments, environment and files

    Args:
        config_file: Path to config file
        sonarr_url: Sonarr URL from CLI
        sonarr_api_key: Sonarr API key from CLI
        tmdb_api_key: TMDB API key from CLI
        log_level: Log level from CLI

    Returns:
        Config object

    Raises:
        SystemExit if the configuration file is invalid
    """
    path = Path(config_file) if config_file else DEFAULT_CONFIG_PATH
    try:
        cfg = Config.from_env_and_file(path)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    # Command line options win over file and environment
    if sonarr_url:
        cfg.sonarr_url = sonarr_url
    if sonarr_api_key:
        cfg.sonarr_api_key = sonarr_api_key
    if tmdb_api_key:
        cfg.tmdb_api_key = tmdb_api_key
    if log_level:
        cfg.log_level = log_level

    return cfg


def build_catalog(config: Config) -> RemoteCatalogClient:
    return RemoteCatalogClient(
        tmdb_api_key=config.tmdb_api_key,
        timeout=config.request_timeout,
        notifications=config.notifications,
    )


def validate_sonarr_connection(config: Config, catalog: RemoteCatalogClient):
    """
    Authenticate the catalog with the configured Sonarr credentials

    Args:
        config: Configuration object
        catalog: Catalog client to authenticate

    Raises:
        SystemExit if credentials are missing or rejected
    """
    if catalog.credentials is not None:
        return

    if not config.has_credentials:
        console.print(
            "[red]Error:[/red] Missing configuration. Run 'mediamachine connect URL API_KEY' "
            "or use --sonarr-url/--sonarr-api-key."
        )
        sys.exit(1)

    outcome = catalog.authenticate(config.sonarr_url, config.sonarr_api_key)
    if not outcome:
        console.print(f"[red]Sonarr connection failed:[/red] {outcome.error}")
        console.print("\nPlease verify:")
        console.print("  - Sonarr URL is correct (with port)")
        console.print("  - API key is valid (Settings > General in Sonarr)")
        console.print("  - Sonarr is accessible from your machine")
        sys.exit(1)


def report_failure(outcome: Outcome, action: str):
    """Print a failed outcome and exit with status 1"""
    label = FAILURE_MESSAGES.get(outcome.kind, "Error") if outcome.kind else "Error"
    console.print(f"[red]{label}:[/red] could not {action}. {outcome.error or ''}".rstrip())
    if outcome.kind in RETRYABLE:
        console.print("[dim]Run the command again to retry.[/dim]")
    sys.exit(1)


def setup_context(config: Config, config_path: Path, catalog: RemoteCatalogClient) -> dict:
    """
    Setup CLI context with config and catalog client

    Args:
        config: Configuration object
        config_path: Where the configuration is persisted
        catalog: RemoteCatalogClient instance

    Returns:
        Dictionary with context objects
    """
    return {
        "config": config,
        "config_path": config_path,
        "catalog": catalog,
    }
