from __future__ import annotations

from dataclasses import asdict, dataclass

from afkbot.session.ports import Position


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time view of one bot. Session fields are None when offline."""

    running: bool
    connected: bool
    state: str
    reconnect_attempts: int
    max_reconnect_attempts: int
    fatal: bool
    username: str | None
    health: float | None
    position: Position | None
    is_moving: bool
    current_direction: str | None

    def to_dict(self) -> dict:
        return asdict(self)
