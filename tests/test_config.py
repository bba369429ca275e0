"""Tests for config file parsing and environment overrides."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from afkbot.config import (
    AppConfig,
    ConfigError,
    MovementConfig,
    load_config,
    parse_config,
)
from afkbot.utils import load_env


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_defaults_when_no_file(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.json")

    assert cfg == AppConfig()
    assert cfg.server.host == ""
    assert cfg.reconnect.delay_for(1) == 30000


def test_file_sections_are_mapped(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {
            "server": {"host": "play.example.org", "port": 25570, "version": "1.19.4"},
            "bot": {"username": "Idler", "maxReconnectAttempts": 3, "reconnectDelay": 5000},
            "movement": {
                "pauseDuration": {"min": 100, "max": 200},
                "walkDuration": {"min": 300, "max": 400},
                "jumpInterval": {"min": 500, "max": 600},
                "directionChangeChance": 0.5,
            },
            "logging": {"level": "debug", "enableTimestamp": False},
            "status": {"enabled": True, "port": 9000},
        },
    )

    cfg = load_config(path)

    assert cfg.server.host == "play.example.org"
    assert cfg.server.port == 25570
    assert cfg.server.version == "1.19.4"
    assert cfg.server.username == "Idler"
    assert cfg.reconnect.max_attempts == 3
    assert cfg.reconnect.delay_for(2) == 35000
    assert (cfg.movement.pause_min_ms, cfg.movement.pause_max_ms) == (100, 200)
    assert (cfg.movement.walk_min_ms, cfg.movement.walk_max_ms) == (300, 400)
    assert (cfg.movement.jump_min_ms, cfg.movement.jump_max_ms) == (500, 600)
    assert cfg.movement.direction_change_chance == 0.5
    assert cfg.movement.look_min_ms == MovementConfig().look_min_ms
    assert cfg.logging.level == "debug"
    assert cfg.logging.timestamps is False
    assert cfg.status.enabled is True
    assert cfg.status.port == 9000


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path / "config.json",
        {"server": {"host": "file.example", "port": 1}, "bot": {"username": "FromFile"}},
    )
    monkeypatch.setenv("MC_HOST", "env.example")
    monkeypatch.setenv("MC_PORT", "25566")
    monkeypatch.setenv("MC_USERNAME", "FromEnv")
    monkeypatch.setenv("MC_VERSION", "1.20.4")
    monkeypatch.setenv("AFK_LOG_LEVEL", "warn")
    monkeypatch.setenv("AFK_STATUS_ENABLE", "yes")

    cfg = load_config(path)

    assert cfg.server.host == "env.example"
    assert cfg.server.port == 25566
    assert cfg.server.username == "FromEnv"
    assert cfg.server.version == "1.20.4"
    assert cfg.logging.level == "warn"
    assert cfg.status.enabled is True


def test_config_file_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path / "bot.json", {"server": {"host": "elsewhere.example"}})
    monkeypatch.setenv("AFK_CONFIG_FILE", str(path))

    assert load_config().server.host == "elsewhere.example"


def test_bad_port_in_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MC_PORT", "twenty")

    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")


def test_invalid_json_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"movement": {"walkDuration": {"min": 10}}},
        {"movement": {"walkDuration": {"min": 10, "max": 5}}},
        {"bot": {"maxReconnectAttempts": "many"}},
        {"server": "localhost"},
    ],
)
def test_malformed_config_rejected(payload: object) -> None:
    with pytest.raises(ConfigError):
        parse_config(payload)


def test_load_env_does_not_override_existing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text('# comment\nMC_HOST="from-dotenv"\nMC_USERNAME=DotEnvBot\n')
    monkeypatch.setenv("MC_HOST", "already-set")

    load_env(env_file)

    assert os.environ["MC_HOST"] == "already-set"
    assert os.environ["MC_USERNAME"] == "DotEnvBot"


def test_bad_status_port_in_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFK_STATUS_PORT", "http")

    with pytest.raises(ConfigError, match="AFK_STATUS_PORT"):
        load_config(tmp_path / "missing.json")


def test_status_port_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFK_STATUS_PORT", "9100")

    assert load_config(tmp_path / "missing.json").status.port == 9100
