import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from decap_oauth.config.discovery import find_toml_config_file
from decap_oauth.core.logging import get_logger

from .oauth import OAuthSettings
from .server import LoggingSettings, ServerSettings


__all__ = ["Settings", "ConfigurationError"]


logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def _format_validation_error(error: ValidationError, env_prefix: str = "") -> str:
    """Summarize a validation error without echoing input values.

    Inputs may contain the client secret, so only locations and messages are kept.
    """
    problems = []
    for item in error.errors():
        location = "__".join(str(part) for part in item["loc"])
        if location:
            label = f"{env_prefix}{location.upper()}"
        else:
            label = env_prefix.rstrip("_") or "settings"
        problems.append(f"{label}: {item['msg']}")
    return "; ".join(problems)


class Settings(BaseSettings):
    """
    Configuration settings for the OAuth relay.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over TOML values. TOML configuration files
    are looked up in the following order:
    1. the path given with --config or CONFIG_FILE
    2. .decap-oauth.toml in current directory
    3. config.toml in XDG_CONFIG_HOME/decap-oauth/
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        frozen=True,
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Centralized logging configuration",
    )

    oauth: OAuthSettings = Field(
        default_factory=OAuthSettings,  # type: ignore[arg-type]
        description="OAuth provider credentials and relay policy",
    )

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    def model_dump_safe(self) -> dict[str, Any]:
        """
        Dump model data with sensitive information masked.

        Returns:
            dict: Configuration with sensitive data masked
        """
        return self.model_dump(mode="json")

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings instance from environment and configuration file.

        Args:
            config_path: TOML file to load; discovered when omitted
            **kwargs: Per-section overrides, e.g. ``server={"port": 8080}``

        Raises:
            ConfigurationError: If a file cannot be read or values are invalid,
                including missing OAuth client credentials
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path is not None:
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            config_data = cls.load_toml_config(config_path)
            logger.info(
                "config_file_loaded",
                path=str(config_path),
                category="config",
            )

        sections: dict[str, dict[str, Any]] = {}
        for key in ("server", "logging", "oauth"):
            value = config_data.get(key) or {}
            if not isinstance(value, dict):
                raise ConfigurationError(f"[{key}] must be a table in {config_path}")
            env_prefix = "OAUTH_" if key == "oauth" else f"{key.upper()}__"
            # Environment variables win over file values
            sections[key] = {
                nested_key: nested_value
                for nested_key, nested_value in value.items()
                if os.getenv(f"{env_prefix}{nested_key.upper()}") is None
            }
            sections[key].update(kwargs.get(key) or {})

        try:
            oauth = OAuthSettings(**sections["oauth"])
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e, "OAUTH_")) from e

        try:
            return cls(
                server=sections["server"],
                logging=sections["logging"],
                oauth=oauth,
            )
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e
