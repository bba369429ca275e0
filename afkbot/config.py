"""Bot configuration.

Values come from built-in defaults, then an optional JSON file, then
environment variables. Everything is read once at startup.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from afkbot.utils import parse_bool


class ConfigError(ValueError):
    """Invalid or unreadable configuration."""


@dataclass(frozen=True)
class ServerConfig:
    host: str = ""
    port: int = 25565
    username: str = "AFKBot"
    # None lets the client auto-detect the server's protocol version.
    version: str | None = None


@dataclass(frozen=True)
class ReconnectConfig:
    max_attempts: int = 10
    base_delay_ms: int = 15000
    step_ms: int = 15000

    def delay_for(self, attempt: int) -> int:
        return self.base_delay_ms + attempt * self.step_ms


@dataclass(frozen=True)
class MovementConfig:
    pause_min_ms: int = 2000
    pause_max_ms: int = 6000
    walk_min_ms: int = 1000
    walk_max_ms: int = 3000
    direction_change_chance: float = 0.3
    jump_min_ms: int = 3000
    jump_max_ms: int = 10000
    jump_hold_ms: int = 100
    look_min_ms: int = 8000
    look_max_ms: int = 20000
    look_yaw_range: float = math.pi / 2
    look_pitch_range: float = 0.25

    inventory_min_ms: int = 15000
    inventory_max_ms: int = 30000
    inventory_jiggle_chance: float = 0.3
    inventory_jiggle_rad: float = 0.1
    inventory_jiggle_revert_ms: int = 500
    inventory_sneak_chance: float = 0.2
    inventory_sneak_min_ms: int = 500
    inventory_sneak_max_ms: int = 2000

    variation_min_ms: int = 3000
    variation_max_ms: int = 8000
    variation_sprint_chance: float = 0.3
    variation_sprint_min_ms: int = 500
    variation_sprint_max_ms: int = 2000
    variation_look_chance: float = 0.4
    variation_sneak_chance: float = 0.15
    variation_sneak_min_ms: int = 300
    variation_sneak_max_ms: int = 1000


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "info"
    timestamps: bool = True


@dataclass(frozen=True)
class StatusServerConfig:
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    reconnect: ReconnectConfig = field(default_factory=ReconnectConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    status: StatusServerConfig = field(default_factory=StatusServerConfig)


# camelCase file keys -> dataclass fields. Ranges are {"min": .., "max": ..}.
_MOVEMENT_RANGES = {
    "pauseDuration": ("pause_min_ms", "pause_max_ms"),
    "walkDuration": ("walk_min_ms", "walk_max_ms"),
    "jumpInterval": ("jump_min_ms", "jump_max_ms"),
    "lookInterval": ("look_min_ms", "look_max_ms"),
    "inventoryInterval": ("inventory_min_ms", "inventory_max_ms"),
    "inventorySneakDuration": ("inventory_sneak_min_ms", "inventory_sneak_max_ms"),
    "variationInterval": ("variation_min_ms", "variation_max_ms"),
    "sprintDuration": ("variation_sprint_min_ms", "variation_sprint_max_ms"),
    "variationSneakDuration": ("variation_sneak_min_ms", "variation_sneak_max_ms"),
}

_MOVEMENT_SCALARS = {
    "directionChangeChance": ("direction_change_chance", float),
    "jumpHold": ("jump_hold_ms", int),
    "inventoryJiggleChance": ("inventory_jiggle_chance", float),
    "inventorySneakChance": ("inventory_sneak_chance", float),
    "sprintChance": ("variation_sprint_chance", float),
    "lookChance": ("variation_look_chance", float),
    "sneakChance": ("variation_sneak_chance", float),
}


def _section(payload: dict, name: str) -> dict:
    value = payload.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section {name!r} must be an object")
    return value


def _movement_from(raw: dict) -> MovementConfig:
    values: dict[str, object] = {}
    for key, (lo, hi) in _MOVEMENT_RANGES.items():
        rng = raw.get(key)
        if rng is None:
            continue
        if not isinstance(rng, dict) or "min" not in rng or "max" not in rng:
            raise ConfigError(f"movement.{key} must have min and max")
        values[lo] = int(rng["min"])
        values[hi] = int(rng["max"])
    for key, (name, cast) in _MOVEMENT_SCALARS.items():
        if key in raw:
            values[name] = cast(raw[key])

    cfg = MovementConfig(**values)  # type: ignore[arg-type]
    for lo, hi in _MOVEMENT_RANGES.values():
        if getattr(cfg, lo) > getattr(cfg, hi):
            raise ConfigError(f"movement range {lo}/{hi} has min > max")
    return cfg


def parse_config(payload: object) -> AppConfig:
    """Build an AppConfig from the decoded JSON config file."""
    if not isinstance(payload, dict):
        raise ConfigError("config must be a JSON object")

    server = _section(payload, "server")
    bot = _section(payload, "bot")
    logging_raw = _section(payload, "logging")
    status_raw = _section(payload, "status")

    defaults = ServerConfig()
    try:
        server_cfg = ServerConfig(
            host=str(server.get("host") or defaults.host),
            port=int(server.get("port") or defaults.port),
            username=str(bot.get("username") or defaults.username),
            version=str(server["version"]) if server.get("version") else None,
        )
        reconnect_cfg = ReconnectConfig(
            max_attempts=int(bot.get("maxReconnectAttempts", ReconnectConfig.max_attempts)),
            base_delay_ms=int(bot.get("reconnectDelay", ReconnectConfig.base_delay_ms)),
        )
        movement_cfg = _movement_from(_section(payload, "movement"))
        status_cfg = StatusServerConfig(
            enabled=parse_bool(status_raw.get("enabled"), default=False),
            host=str(status_raw.get("host") or StatusServerConfig.host),
            port=int(status_raw.get("port") or StatusServerConfig.port),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value: {e}") from e

    return AppConfig(
        server=server_cfg,
        reconnect=reconnect_cfg,
        movement=movement_cfg,
        logging=LoggingConfig(
            level=str(logging_raw.get("level") or "info"),
            timestamps=logging_raw.get("enableTimestamp") is not False,
        ),
        status=status_cfg,
    )


def _env_port(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} is not a number: {raw!r}") from e


def _apply_env(cfg: AppConfig) -> AppConfig:
    server = cfg.server
    server = ServerConfig(
        host=(os.getenv("MC_HOST") or "").strip() or server.host,
        port=_env_port("MC_PORT", server.port),
        username=(os.getenv("MC_USERNAME") or "").strip() or server.username,
        version=(os.getenv("MC_VERSION") or "").strip() or server.version,
    )

    logging_cfg = cfg.logging
    level = (os.getenv("AFK_LOG_LEVEL") or "").strip()
    if level:
        logging_cfg = LoggingConfig(level=level, timestamps=logging_cfg.timestamps)

    status = cfg.status
    status = StatusServerConfig(
        enabled=parse_bool(os.getenv("AFK_STATUS_ENABLE"), default=status.enabled),
        host=(os.getenv("AFK_STATUS_HOST") or "").strip() or status.host,
        port=_env_port("AFK_STATUS_PORT", status.port),
    )

    return AppConfig(
        server=server,
        reconnect=cfg.reconnect,
        movement=cfg.movement,
        logging=logging_cfg,
        status=status,
    )


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration: defaults, then JSON file, then environment."""
    if path is None:
        raw_file = (os.getenv("AFK_CONFIG_FILE") or "").strip()
        path = Path(raw_file) if raw_file else Path.cwd() / "config.json"

    cfg = AppConfig()
    if path.exists():
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot read config file {path}: {e}") from e
        cfg = parse_config(payload)

    return _apply_env(cfg)
