"""Game session port and providers."""

from afkbot.session.errors import ConnectionFailure, SessionError, classify_error
from afkbot.session.ports import (
    DIRECTIONS,
    Position,
    Session,
    SessionEventHandler,
    SessionProvider,
)

__all__ = [
    "ConnectionFailure",
    "DIRECTIONS",
    "Position",
    "Session",
    "SessionError",
    "SessionEventHandler",
    "SessionProvider",
    "classify_error",
]
