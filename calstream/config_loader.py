"""calstream.config_loader

Configuration loading for calstream.

- Reads YAML (PyYAML ``safe_load``) or JSON, chosen by file suffix.
- Environment variables override file values.
- Exposes a typed dataclass ``Config`` and a ``load_config()`` helper that
  accepts an optional path override.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .logging_config import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "calstream.yaml"
CONFIG_ENV_VAR = "CALSTREAM_CONFIG"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class Config:
    """Typed configuration for calstream.

    Fields:
        sources: paths of iCalendar documents, concatenated before merging
        default_timezone: zone for dates without a TZID ("" means UTC)
        strict_timezones: reject unknown TZID values instead of using UTC
        strict_timestamps: reject malformed timestamps instead of using the epoch
        log_level: logging level name
    """

    sources: list[str] = field(default_factory=list)
    default_timezone: str = ""
    strict_timezones: bool = False
    strict_timestamps: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Coerces values to the expected types and logs a warning whenever a
        value has to be replaced.
        """
        if data is None:
            data = {}

        sources_raw = data.get("sources", [])
        if sources_raw is None:
            sources_raw = []
        if not isinstance(sources_raw, (list, tuple)):
            logger.warning("Config `sources` is not a list; coercing to single-item list")
            sources = [str(sources_raw)]
        else:
            sources = [str(s) for s in sources_raw]

        default_timezone = data.get("default_timezone") or ""

        log_level = str(data.get("log_level") or "INFO").upper()
        if log_level not in VALID_LOG_LEVELS:
            logger.warning("Config log_level=%r is not valid; using INFO", log_level)
            log_level = "INFO"

        return cls(
            sources=sources,
            default_timezone=str(default_timezone),
            strict_timezones=_coerce_bool(data.get("strict_timezones", False)),
            strict_timestamps=_coerce_bool(data.get("strict_timestamps", False)),
            log_level=log_level,
        )

    def apply_env_overrides(self) -> Config:
        """Override values from CALSTREAM_* environment variables."""
        zone = os.getenv("CALSTREAM_DEFAULT_TIMEZONE")
        if zone:
            self.default_timezone = zone
        level = os.getenv("CALSTREAM_LOG_LEVEL", "").upper()
        if level in VALID_LOG_LEVELS:
            self.log_level = level
        return self

    def apply_logging(self, debug_mode: bool = False) -> None:
        """Configure logging with this config's root ``log_level``."""
        configure_logging(debug_mode=debug_mode, level=self.log_level)

    def load_sources(self) -> list[str]:
        """Read every configured source document.

        Raises:
            OSError: If a source file cannot be read
        """
        documents = []
        for source in self.sources:
            logger.debug("Reading calendar source %s", source)
            documents.append(Path(source).read_text(encoding="utf-8"))
        return documents


def _load_yaml_or_json(path: Path) -> Any:
    """Load a mapping from a YAML or JSON file, chosen by suffix."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    loaded = yaml.safe_load(text)
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to $CALSTREAM_CONFIG,
              then ./calstream.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults), with
        environment overrides applied.

    Raises:
        ValueError: If the file's top level is not a mapping
    """
    path = path or os.getenv(CONFIG_ENV_VAR)
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_NAME
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config().apply_env_overrides()

    raw = _load_yaml_or_json(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
    cfg = Config.from_dict(raw).apply_env_overrides()
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
