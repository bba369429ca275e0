"""Ports for the game session.

These interfaces keep the supervisor and behavior scheduler independent of the
client library that actually speaks the game protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol


DIRECTIONS: tuple[str, ...] = ("forward", "back", "left", "right")
CONTROLS: tuple[str, ...] = DIRECTIONS + ("jump", "sprint", "sneak")

# Events a session emits, with handler arguments:
#   login(), spawn(), chat(username, text), message(text), end(reason),
#   error(exc), kicked(reason), health(), death()
SESSION_EVENTS: tuple[str, ...] = (
    "login",
    "spawn",
    "chat",
    "message",
    "end",
    "error",
    "kicked",
    "health",
    "death",
)

SessionEventHandler = Callable[..., None]


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    z: float


class Session(Protocol):
    """Live handle to one game connection.

    Handlers registered with add_event_handler are invoked on the asyncio
    event loop thread.
    """

    @property
    def username(self) -> str | None: ...

    @property
    def ready(self) -> bool: ...

    @property
    def on_ground(self) -> bool: ...

    @property
    def yaw(self) -> float: ...

    @property
    def pitch(self) -> float: ...

    @property
    def health(self) -> float | None: ...

    @property
    def position(self) -> Position | None: ...

    def set_control_state(self, control: str, state: bool) -> None: ...

    def look(self, yaw: float, pitch: float, force: bool = False) -> None: ...

    def respawn(self) -> None: ...

    def quit(self, reason: str) -> None: ...

    def add_event_handler(self, event: str, handler: SessionEventHandler) -> None: ...


class SessionProvider(Protocol):
    def connect(
        self,
        host: str,
        port: int,
        username: str,
        version: str | None,
    ) -> Session: ...
