"""
Shared helpers: environment loading, flag parsing, logging setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_NO_TIME = "[%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def parse_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_level(name: str | None) -> int:
    return _LEVELS.get((name or "").strip().lower(), logging.INFO)


# =============================================================================
# Environment Loading
# =============================================================================


def load_env(env_path: Path | None = None) -> None:
    """Load .env file into os.environ. Handles quoted values and spaces.

    Variables already present in the environment win over the file.
    """
    if env_path is None:
        env_path = Path.cwd() / ".env"

    if not env_path.exists():
        return

    for line in env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, val = line.split("=", 1)
            val = val.strip().strip('"').strip("'")
            os.environ.setdefault(key.strip(), val)


# =============================================================================
# Logging
# =============================================================================


def configure_logging(level: str = "info", *, timestamps: bool = True) -> None:
    logging.basicConfig(
        level=parse_level(level),
        format=LOG_FORMAT if timestamps else LOG_FORMAT_NO_TIME,
        datefmt="%H:%M:%S",
    )
    # Status polling would otherwise flood the log.
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
