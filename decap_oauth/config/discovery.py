"""Configuration file discovery."""

import os
from pathlib import Path


def get_xdg_config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def find_toml_config_file() -> Path | None:
    """Find the first TOML configuration file.

    Search order:
    1. .decap-oauth.toml in the current directory
    2. config.toml in XDG_CONFIG_HOME/decap-oauth/

    Returns:
        Path of the first existing file, or None
    """
    candidates = [
        Path.cwd() / ".decap-oauth.toml",
        get_xdg_config_home() / "decap-oauth" / "config.toml",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
