import json
from pathlib import Path

import pytest

from pulley.cli.config import (
    CONFIG_FILENAME,
    ConfigError,
    PulleyConfig,
    default_config_path,
    load_config,
)


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_default_config_path(tmp_path: Path) -> None:
    assert default_config_path(tmp_path) == tmp_path / CONFIG_FILENAME
    assert CONFIG_FILENAME == "pulley-gitlab.json"


def test_load_full_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path / CONFIG_FILENAME,
        json.dumps(
            {
                "server": "https://gitlab.example.com",
                "remote": "upstream",
                "repos": {"shop": "https://tracker.example.com/issues/"},
                "interactive": True,
                "timeout": 10,
            }
        ),
    )

    config = load_config(path)

    assert config.server == "https://gitlab.example.com"
    assert config.remote == "upstream"
    assert config.interactive is True
    assert config.timeout == 10.0
    assert config.tracker_for("shop") == "https://tracker.example.com/issues/"


def test_defaults_apply_for_missing_keys(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path / CONFIG_FILENAME, '{"server": "https://gl"}'))

    assert config.remote == "origin"
    assert config.repos == {}
    assert config.interactive is False
    assert config.timeout is None


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path / CONFIG_FILENAME, '{"server": "x", "color": true}'))

    assert config.server == "x"


def test_tracker_for_unknown_or_empty_project() -> None:
    config = PulleyConfig(repos={"shop": "", "web": "https://t/"})

    assert config.tracker_for("shop") is None
    assert config.tracker_for("api") is None
    assert config.tracker_for("web") == "https://t/"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / CONFIG_FILENAME)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("{not json", "is not valid JSON"),
        ("[1, 2]", "must contain a JSON object"),
        ('{"repos": ["shop"]}', "Invalid configuration"),
        ('{"interactive": "sometimes"}', "Invalid configuration"),
    ],
)
def test_malformed_file(tmp_path: Path, content: str, message: str) -> None:
    path = _write(tmp_path / CONFIG_FILENAME, content)

    with pytest.raises(ConfigError, match=message):
        load_config(path)
