"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Connection defaults, charset and TLS posture all come from these sources.

Secrets (.env):
    DB_PASSWORD (optional, pre-fills the connection panel)

Settings (YAML):
    application.yaml   - App identity, plugin name and tab caption
    database.yaml      - Connection defaults, schema charset, TLS posture
    logging.yaml       - Logging configuration
    features.yaml      - Behaviour flags (delete policy, previews)
"""

import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from burpnote.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
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


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. The password is never written back."""

    db_password: str = ""

    model_config = SettingsConfigDict(
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
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        """Feature flags."""
        return self._features


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def build_database_url(
    db: DatabaseSchema,
    host: str,
    port: int,
    user: str,
    password: str,
    database: str | None = None,
) -> URL:
    """
    Construct a MySQL connection URL from user-supplied parameters.

    Args:
        db: Database settings (driver and charset come from here)
        host: Server host name
        port: Server port
        user: Login user
        password: Login password
        database: Database to select, or None for a server-scoped URL

    Returns:
        SQLAlchemy URL object (password is masked when rendered)
    """
    return URL.create(
        drivername=db.driver,
        username=user or None,
        password=password or None,
        host=host,
        port=port,
        database=database,
        query={"charset": db.charset},
    )


def build_connect_args(db: DatabaseSchema) -> dict[str, Any]:
    """
    Driver-level connect arguments for aiomysql.

    Pins the session time zone and applies the TLS posture from
    database.yaml. TLS is off unless tls.enabled is set.
    """
    connect_args: dict[str, Any] = {
        "init_command": f"SET time_zone = '{db.server_timezone}'",
    }
    if db.tls.enabled:
        context = ssl.create_default_context()
        if not db.tls.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = context
    return connect_args
