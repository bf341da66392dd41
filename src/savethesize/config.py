"""Compress settings (v1) for SaveTheSize.

Small and strict, like every other contract in this package:
  - JSON only ('@file.json' or inline)
  - explicit schema id
  - unknown keys are rejected
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from savethesize.engine.container import CONTAINER_SUFFIX
from savethesize.errors import UsageError

CONFIG_ID_V1 = "savethesize.config.v1"

DEFAULT_LEVEL = -1


class ConfigError(UsageError, ValueError):
    pass


def _load_json_arg(config_arg: str) -> dict[str, Any]:
    s = config_arg.strip()
    if not s:
        raise ConfigError("config: empty argument")

    if s.startswith("@"):
        p = Path(s[1:]).expanduser()
        if not p.is_file():
            raise ConfigError(f"config: file not found: {p}")
        raw = p.read_text(encoding="utf-8")
        try:
            obj = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"config: invalid JSON in {p}: {e}") from e
        if not isinstance(obj, dict):
            raise ConfigError(f"config: JSON in {p} must be an object")
        return obj

    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        raise ConfigError(f"config: invalid inline JSON: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError("config: inline JSON must be an object")
    return obj


def check_level(level: Any) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(level, bool) or not isinstance(level, int):
        raise ConfigError("level must be an integer")
    if not (-1 <= level <= 9):
        raise ConfigError(f"level must be -1..9, got {level}")
    return level


@dataclass(frozen=True)
class CompressConfig:
    """Settings for the compress path."""

    level: int = DEFAULT_LEVEL
    suffix: str = CONTAINER_SUFFIX


def load_config(config_arg: str) -> CompressConfig:
    obj = _load_json_arg(config_arg)

    allowed = {"spec", "level", "suffix"}
    extra = sorted(set(obj.keys()) - allowed)
    if extra:
        raise ConfigError(f"config: unsupported keys: {', '.join(extra)}")

    spec_id = obj.get("spec")
    if spec_id != CONFIG_ID_V1:
        raise ConfigError(f"config: unsupported spec: {spec_id!r} (expected {CONFIG_ID_V1!r})")

    level = check_level(obj.get("level", DEFAULT_LEVEL))

    suffix = obj.get("suffix", CONTAINER_SUFFIX)
    if not isinstance(suffix, str) or not suffix.strip():
        raise ConfigError("config: 'suffix' must be a non-empty string")
    suffix = suffix.strip()
    if "/" in suffix or "\\" in suffix:
        raise ConfigError(f"config: 'suffix' must not contain path separators: {suffix!r}")

    return CompressConfig(level=level, suffix=suffix)
