from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".termtype"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"


@dataclass(frozen=True)
class Settings:
    """Tunables for a typing round. Defaults give the classic 30 second test."""

    round_seconds: int = 30
    word_count: int = 200
    tick_interval: float = 0.25
    preview_words: int = 10
    dictionary_path: Optional[Path] = None


_POSITIVE_INTS = ("round_seconds", "word_count", "preview_words")


def _coerce(path: Path, raw: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"{path.name}: unknown setting(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key in _POSITIVE_INTS:
        if key not in raw:
            continue
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"{path.name}: '{key}' must be a positive integer")
        values[key] = value

    if "tick_interval" in raw:
        value = raw["tick_interval"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{path.name}: 'tick_interval' must be a positive number of seconds")
        values["tick_interval"] = float(value)

    if raw.get("dictionary_path") is not None:
        value = raw["dictionary_path"]
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{path.name}: 'dictionary_path' must be a file path")
        dict_path = Path(value.strip()).expanduser()
        if not dict_path.is_absolute():
            dict_path = path.parent / dict_path
        values["dictionary_path"] = dict_path
    return values


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults when it is absent."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return Settings()

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a YAML mapping of settings")

    settings = replace(Settings(), **_coerce(config_path, raw))
    logger.info("Loaded settings from %s", config_path)
    return settings
