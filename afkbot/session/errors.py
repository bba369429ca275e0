"""Connection failure classification.

Client libraries report failures as loosely-typed errors (Node error codes,
free-form messages). Classifying them once keeps log output consistent.
"""

from __future__ import annotations

import socket
from enum import Enum


class ConnectionFailure(str, Enum):
    REFUSED = "connection_refused"
    HOST_NOT_FOUND = "host_not_found"
    INVALID_USERNAME = "invalid_username"
    VERSION_MISMATCH = "version_mismatch"
    OTHER = "other"


class SessionError(RuntimeError):
    """Error reported by the game client, carrying its error code if any."""

    def __init__(self, message: str, *, code: str | None = None):
        self.code = code
        super().__init__(message)


_HINTS = {
    ConnectionFailure.REFUSED: "Connection refused or host not found",
    ConnectionFailure.HOST_NOT_FOUND: "Connection refused or host not found",
    ConnectionFailure.INVALID_USERNAME: "Username may be invalid - try a different name",
    ConnectionFailure.VERSION_MISMATCH: (
        "Version mismatch - server may be using different Minecraft version"
    ),
}


def _error_code(err: BaseException) -> str:
    code = getattr(err, "code", None)
    if isinstance(code, str):
        return code
    if isinstance(err, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(err, ConnectionRefusedError):
        return "ECONNREFUSED"
    return ""


def classify_error(err: BaseException) -> ConnectionFailure:
    code = _error_code(err)
    if code == "ECONNREFUSED":
        return ConnectionFailure.REFUSED
    if code in ("ENOTFOUND", "EAI_AGAIN"):
        return ConnectionFailure.HOST_NOT_FOUND

    message = str(err).lower()
    if "invalid username" in message:
        return ConnectionFailure.INVALID_USERNAME
    if "outdated" in message or "unsupported protocol version" in message:
        return ConnectionFailure.VERSION_MISMATCH
    return ConnectionFailure.OTHER


def describe_failure(kind: ConnectionFailure) -> str | None:
    return _HINTS.get(kind)
