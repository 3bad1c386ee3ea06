"""
Configuration Management.

Loads overrides from the environment (and config/.env) and settings from
config/settings/*.yaml.
No hardcoded values in code: all configuration comes from these sources.

Environment (.env or process environment, prefix METACTL_):
    METACTL_ENDPOINT, METACTL_TIMEOUT

Settings (YAML):
    application.yaml   - Server identity, application URL, bind address
    client.yaml        - RPC endpoint and call timeout used by the CLI
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from metactl.backend.core.config_schema import (
    ApplicationSchema,
    ClientSchema,
    LoggingSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Per-invocation overrides read from the environment and config/.env."""

    endpoint: str | None = None
    timeout: float | None = None

    model_config = SettingsConfigDict(
        env_prefix="METACTL_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._client = _load_validated(ClientSchema, "client.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def client(self) -> ClientSchema:
        """RPC client settings."""
        return self._client

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """
    Get cached environment overrides.

    config/.env is read when the project root can be found; otherwise only
    the process environment is consulted.
    """
    try:
        env_path = find_project_root() / "config" / ".env"
    except RuntimeError:
        return Settings()
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


@lru_cache
def get_client_config() -> ClientSchema:
    """
    Get cached RPC client settings from client.yaml alone.

    The CLI reads only this file, so a broken server-side file
    (application.yaml, logging.yaml) does not stop remote commands.
    """
    return _load_validated(ClientSchema, "client.yaml")


def get_server_bind() -> tuple[str, int]:
    """
    Get the host and port the meta RPC server binds to.

    Returns:
        Tuple of (host, port) from application.yaml.
    """
    server = get_app_config().application.server
    return server.host, server.port
