"""vcal_lite.config_loader

Config loader for vcal_lite.

- Reads YAML with PyYAML (JSON files load too, JSON being valid YAML).
- Exposes a typed dataclass `VCalConfig` and a `load_config()` helper that
  accepts an optional path override.
- Environment variables override file values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from vcal_lite.core.timezone_utils import DEFAULT_FALLBACK_TIMEZONE, normalize_timezone_name
from vcal_lite.exceptions import VCalConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "VCAL_LITE_CONFIG"
DEFAULT_CONFIG_FILENAME = "vcal_lite.yaml"

DEFAULT_MAX_CONTENT_BYTES = 10 * 1024 * 1024  # 10MB
MIN_MAX_CONTENT_BYTES = 1024

_TRUE_STRINGS = ("1", "true", "yes", "on")

_ENV_OVERRIDES = {
    "VCAL_LITE_MAX_CONTENT_BYTES": "max_content_bytes",
    "VCAL_LITE_STRICT_BLOCKS": "strict_blocks",
    "VCAL_LITE_FALLBACK_TIMEZONE": "fallback_timezone",
    "VCAL_LITE_LOG_LEVEL": "log_level",
}


@dataclass
class VCalConfig:
    """Typed configuration for vcal_lite.

    Fields:
        max_content_bytes: reject input larger than this many UTF-8 bytes
        strict_blocks: raise on unmatched END / unclosed BEGIN instead of
            tolerating them
        fallback_timezone: zone used when a TZID is unknown
        log_level: logging level name
    """

    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES
    strict_blocks: bool = False
    fallback_timezone: str = DEFAULT_FALLBACK_TIMEZONE
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> VCalConfig:
        """Create a VCalConfig from a plain mapping, applying defaults and validation.

        Numeric strings are coerced to int, truthy strings to bool, and an
        unknown fallback timezone is replaced by UTC. Coercions are logged as
        warnings rather than raised.
        """
        if data is None:
            data = {}

        raw_max = data.get("max_content_bytes", DEFAULT_MAX_CONTENT_BYTES)
        try:
            max_content_bytes = int(raw_max)
        except (TypeError, ValueError):
            logger.warning(
                "Config max_content_bytes=%r is not an int; using default %d",
                raw_max,
                DEFAULT_MAX_CONTENT_BYTES,
            )
            max_content_bytes = DEFAULT_MAX_CONTENT_BYTES
        if max_content_bytes < MIN_MAX_CONTENT_BYTES:
            logger.warning(
                "max_content_bytes %d below minimum; coercing to %d",
                max_content_bytes,
                MIN_MAX_CONTENT_BYTES,
            )
            max_content_bytes = MIN_MAX_CONTENT_BYTES

        strict_raw = data.get("strict_blocks", False)
        if isinstance(strict_raw, str):
            strict_blocks = strict_raw.strip().lower() in _TRUE_STRINGS
        else:
            strict_blocks = bool(strict_raw)

        fallback = str(data.get("fallback_timezone") or DEFAULT_FALLBACK_TIMEZONE)
        if normalize_timezone_name(fallback) is None:
            logger.warning(
                "Config fallback_timezone %r is unknown; using %s",
                fallback,
                DEFAULT_FALLBACK_TIMEZONE,
            )
            fallback = DEFAULT_FALLBACK_TIMEZONE

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            max_content_bytes=max_content_bytes,
            strict_blocks=strict_blocks,
            fallback_timezone=fallback,
            log_level=log_level,
        )


def _read_yaml(path: Path) -> Any:
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    # safe_load returns None for an empty file
    return {} if loaded is None else loaded


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    for env_name, key in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw != "":
            logger.debug("Config %s overridden by %s", key, env_name)
            merged[key] = raw
    return merged


def load_config(path: str | None = None) -> VCalConfig:
    """Load configuration from a YAML file and return a VCalConfig instance.

    Args:
        path: Optional path to the config file. Defaults to $VCAL_LITE_CONFIG,
              then ./vcal_lite.yaml.

    Returns:
        VCalConfig with file values, then environment overrides, applied.

    Raises:
        VCalConfigError: If the file parses but its top level is not a mapping
        yaml.YAMLError: If the file is not valid YAML
    """
    chosen = path or os.environ.get(CONFIG_PATH_ENV)
    p = Path(chosen) if chosen else Path.cwd() / DEFAULT_CONFIG_FILENAME
    logger.debug("Attempting to load config from %s", p)

    if p.exists():
        raw = _read_yaml(p)
        if not isinstance(raw, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
            raise VCalConfigError(f"Config file {p} must contain a mapping at top level")
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)
        raw = {}

    cfg = VCalConfig.from_dict(_apply_env_overrides(raw))
    logger.debug("Configuration values: %s", cfg)
    return cfg
