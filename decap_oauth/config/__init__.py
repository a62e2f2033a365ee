"""Configuration module for the Decap OAuth relay."""

from .oauth import PROVIDER_DEFAULTS, OAuthSettings
from .server import LoggingSettings, ServerSettings
from .settings import ConfigurationError, Settings


__all__ = [
    "Settings",
    "ConfigurationError",
    "OAuthSettings",
    "ServerSettings",
    "LoggingSettings",
    "PROVIDER_DEFAULTS",
]
