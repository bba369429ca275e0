from __future__ import annotations

import socket

from afkbot.session import ConnectionFailure, SessionError, classify_error


def test_node_error_codes() -> None:
    assert classify_error(SessionError("x", code="ECONNREFUSED")) is ConnectionFailure.REFUSED
    assert classify_error(SessionError("x", code="ENOTFOUND")) is ConnectionFailure.HOST_NOT_FOUND


def test_python_socket_errors() -> None:
    assert classify_error(ConnectionRefusedError()) is ConnectionFailure.REFUSED
    assert classify_error(socket.gaierror(-2, "Name or service not known")) is (
        ConnectionFailure.HOST_NOT_FOUND
    )


def test_message_based_classification() -> None:
    assert classify_error(SessionError("Invalid username: a b")) is (
        ConnectionFailure.INVALID_USERNAME
    )
    assert classify_error(SessionError("Outdated server! I'm still on 1.20.1")) is (
        ConnectionFailure.VERSION_MISMATCH
    )
    assert classify_error(SessionError("outdated client")) is (
        ConnectionFailure.VERSION_MISMATCH
    )
    assert classify_error(SessionError("read ECONNRESET")) is ConnectionFailure.OTHER
