# PATH: config/__init__.py
"""
Configuration loading utilities for the multi-explorer resolver.

- explorers.yaml: public explorer URLs per network
- Settings: process settings from the environment (.env supported)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_MIN_EXPLORERS,
    DEFAULT_NETWORK,
    DEFAULT_TIMEOUT_SECONDS,
)
from core.exceptions import ConfigError


CONFIG_DIR = Path(__file__).parent

EXPLORERS_FILE = "explorers.yaml"


def load_yaml(filename: str, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory
        config_dir: Directory to look in (default: this package)

    Returns:
        Parsed YAML as dict
    """
    filepath = (config_dir or CONFIG_DIR) / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_explorers(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load explorers configuration (default: config/explorers.yaml)."""
    if path is None:
        return load_yaml(EXPLORERS_FILE)
    return load_yaml(path.name, path.parent)


@dataclass(frozen=True)
class Settings:
    """Process settings for the CLI and default aggregators."""
    network: str = DEFAULT_NETWORK
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    min_explorers: int = DEFAULT_MIN_EXPLORERS
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(
            f"{key} must be an integer",
            details={"key": key, "value": raw},
        ) from None
    if value < 1:
        raise ConfigError(f"{key} must be >= 1", details={"key": key, "value": raw})
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from the environment.

    Reads .env first when env is not given. Recognized variables:
    EXPLORER_NETWORK, EXPLORER_TIMEOUT_SECONDS, EXPLORER_MIN_COUNT,
    EXPLORER_LOG_LEVEL.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    log_level = (env.get("EXPLORER_LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(
            "EXPLORER_LOG_LEVEL is not a logging level",
            details={"value": log_level},
        )

    return Settings(
        network=env.get("EXPLORER_NETWORK") or DEFAULT_NETWORK,
        timeout_seconds=_int_setting(env, "EXPLORER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        min_explorers=_int_setting(env, "EXPLORER_MIN_COUNT", DEFAULT_MIN_EXPLORERS),
        log_level=log_level,
    )
