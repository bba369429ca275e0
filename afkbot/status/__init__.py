from __future__ import annotations

from .server import build_status_app, start_status_server
from .snapshot import StatusSnapshot

__all__ = [
    "StatusSnapshot",
    "build_status_app",
    "start_status_server",
]
