from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from quiet_hn.constants import (
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_NUM_STORIES,
    DEFAULT_PORT,
    HN_API_BASE,
    ITEM_FETCH_CONCURRENCY,
    ITEM_FETCH_TIMEOUT,
    STORY_CACHE_TTL,
)

DEFAULT_CONFIG_PATH = Path("quiet_hn.toml")
CONFIG_SECTION = "quiet_hn"


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    num_stories: int = DEFAULT_NUM_STORIES
    cache_ttl: float = STORY_CACHE_TTL
    item_timeout: float = ITEM_FETCH_TIMEOUT
    max_concurrency: int = ITEM_FETCH_CONCURRENCY
    api_base: str = HN_API_BASE
    log_level: str = DEFAULT_LOG_LEVEL


ALLOWED_TYPES: dict[str, type | tuple[type, ...]] = {
    "host": str,
    "port": int,
    "num_stories": int,
    "cache_ttl": (int, float),
    "item_timeout": (int, float),
    "max_concurrency": int,
    "api_base": str,
    "log_level": str,
}


def _find_config_path(argv: list[str]) -> Optional[Path]:
    for i, arg in enumerate(argv):
        if arg == "--config" and i + 1 < len(argv):
            return Path(argv[i + 1])
        if arg.startswith("--config="):
            return Path(arg.split("=", 1)[1])
    return None


def load_config(argv: list[str]) -> tuple[dict[str, Any], Optional[Path]]:
    """Read settings from ``--config PATH`` or ./quiet_hn.toml if present.

    Unknown keys and values of the wrong type are ignored.
    """
    config_path = _find_config_path(argv)
    explicit = config_path is not None
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None

    if config_path is None:
        return {}, None
    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return {}, None

    raw = tomllib.loads(config_path.read_text())
    if isinstance(raw.get(CONFIG_SECTION), dict):
        raw = raw[CONFIG_SECTION]

    config: dict[str, Any] = {}
    for key, value in raw.items():
        expected_type = ALLOWED_TYPES.get(key)
        if expected_type is None:
            continue
        if isinstance(value, bool):
            continue
        if isinstance(value, expected_type):
            config[key] = value
    return config, config_path


def build_settings(
    file_config: Optional[dict[str, Any]] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> Settings:
    """Defaults, then the config file, then explicit overrides (None skipped)."""
    known = {f.name for f in fields(Settings)}
    merged: dict[str, Any] = {}
    for source in (file_config or {}, overrides or {}):
        for key, value in source.items():
            if key in known and value is not None:
                merged[key] = value

    settings = replace(Settings(), **merged)
    if settings.num_stories < 1:
        raise ValueError(f"num_stories must be positive, got {settings.num_stories}")
    if not 0 < settings.port < 65536:
        raise ValueError(f"port out of range: {settings.port}")
    if settings.cache_ttl < 0 or settings.item_timeout < 0 or settings.max_concurrency < 0:
        raise ValueError("cache_ttl, item_timeout and max_concurrency must not be negative")
    return settings
