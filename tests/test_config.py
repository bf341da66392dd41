from __future__ import annotations

import json
from pathlib import Path

import pytest

from savethesize.config import CONFIG_ID_V1, CompressConfig, ConfigError, load_config


def test_config_inline_minimal() -> None:
    cfg = load_config(json.dumps({"spec": CONFIG_ID_V1}))
    assert cfg == CompressConfig()
    assert cfg.level == -1
    assert cfg.suffix == ".savethesize"


def test_config_from_file(tmp_path: Path) -> None:
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"spec": CONFIG_ID_V1, "level": 9, "suffix": ".sts"}), encoding="utf-8")
    cfg = load_config(f"@{p}")
    assert cfg == CompressConfig(level=9, suffix=".sts")


@pytest.mark.parametrize(
    "arg",
    [
        "",
        "   ",
        "{not json",
        "[]",
        "{}",
        json.dumps({"spec": "other.v1"}),
        json.dumps({"spec": CONFIG_ID_V1, "unknown": 1}),
        json.dumps({"spec": CONFIG_ID_V1, "level": 10}),
        json.dumps({"spec": CONFIG_ID_V1, "level": "9"}),
        json.dumps({"spec": CONFIG_ID_V1, "level": True}),
        json.dumps({"spec": CONFIG_ID_V1, "suffix": ""}),
        json.dumps({"spec": CONFIG_ID_V1, "suffix": "/x"}),
    ],
)
def test_config_rejects_invalid(arg: str) -> None:
    with pytest.raises(ConfigError):
        load_config(arg)


def test_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(f"@{tmp_path / 'missing.json'}")


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)
