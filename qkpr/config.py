"""Configuration module for qkpr.

This module provides access to the static user configuration stored in one of
these locations:
1. $QKPR_CONFIG_DIR/qkprrc if $QKPR_CONFIG_DIR is defined
2. $XDG_CONFIG_HOME/qkpr/qkprrc if $XDG_CONFIG_HOME is defined
3. $HOME/.qkprrc

The configuration is stored in TOML format. Mutable preferences (API key,
pinned branches, ...) live in a separate JSON file, see qkpr.preferences.
"""

import copy
import os
from pathlib import Path
from typing import Any

import tomli

__all__ = [
    "get_config_path",
    "load_config",
    "get_logger_verbosity",
    "get_logger_path",
    "get_git_timeout",
    "get_gemini_base_url",
    "get_gemini_timeout",
    "is_update_check_enabled",
]

# Default configuration values
DEFAULT_CONFIG = {
    "logger": {
        "verbosity": "INFO",
        "path": str(Path.home() / ".qkpr"),
    },
    "git": {
        "timeout": 30.0,
    },
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "timeout": 60.0,
    },
    "updates": {
        "check": True,
    },
}


def get_config_path() -> Path:
    """Return the path to the user's config file.

    Checks the following locations in order:
    1. $QKPR_CONFIG_DIR/qkprrc if $QKPR_CONFIG_DIR is defined
    2. $XDG_CONFIG_HOME/qkpr/qkprrc if $XDG_CONFIG_HOME is defined
    3. Fallback to $HOME/.qkprrc

    Returns:
        Path to the config file
    """
    if "QKPR_CONFIG_DIR" in os.environ:
        path = Path(os.environ["QKPR_CONFIG_DIR"]) / "qkprrc"
        if path.exists():
            return path

    if "XDG_CONFIG_HOME" in os.environ:
        path = Path(os.environ["XDG_CONFIG_HOME"]) / "qkpr" / "qkprrc"
        if path.exists():
            return path

    return Path.home() / ".qkprrc"


def load_config() -> dict[str, Any]:
    """Load configuration from the config file.

    Returns:
        Dict containing the merged configuration (defaults + user config).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomli.load(f)

            _merge_configs(config, user_config)
        except (OSError, tomli.TOMLDecodeError) as e:
            print(f"Error loading config from {config_path}: {e}")

    return config


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge override dict into base dict.

    Args:
        base: The base configuration dictionary to merge into.
        override: The override configuration dictionary to merge from.

    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            nested_value: dict[str, Any] = value
            _merge_configs(base[key], nested_value)
        else:
            base[key] = value


def get_logger_verbosity() -> str:
    """Get the configured logger verbosity level.

    Returns:
        String representing the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    """
    config = load_config()
    return config["logger"]["verbosity"]


def get_logger_path() -> str:
    """Get the configured logger path, with ~ expanded."""
    config = load_config()
    return os.path.expanduser(config["logger"]["path"])


def get_git_timeout() -> float:
    """Timeout in seconds for captured git commands."""
    config = load_config()
    return float(config["git"]["timeout"])


def get_gemini_base_url() -> str:
    config = load_config()
    return str(config["gemini"]["base_url"]).rstrip("/")


def get_gemini_timeout() -> float:
    config = load_config()
    return float(config["gemini"]["timeout"])


def is_update_check_enabled() -> bool:
    config = load_config()
    return bool(config["updates"]["check"])
