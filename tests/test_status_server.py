from __future__ import annotations

import asyncio

from aiohttp.test_utils import TestClient, TestServer

from afkbot.session.ports import Position
from afkbot.status import StatusSnapshot, build_status_app


def _snapshot(**overrides) -> StatusSnapshot:
    values = dict(
        running=True,
        connected=True,
        state="active",
        reconnect_attempts=0,
        max_reconnect_attempts=10,
        fatal=False,
        username="AFKBot",
        health=20.0,
        position=Position(1.0, 64.0, -2.5),
        is_moving=True,
        current_direction="left",
    )
    values.update(overrides)
    return StatusSnapshot(**values)


def _get(snapshot: StatusSnapshot, path: str):
    async def scenario():
        app = build_status_app(lambda: snapshot)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get(path)
            return resp.status, await resp.json()

    return asyncio.run(scenario())


def test_status_returns_snapshot_json() -> None:
    status, body = _get(_snapshot(), "/status")

    assert status == 200
    assert body["username"] == "AFKBot"
    assert body["position"] == {"x": 1.0, "y": 64.0, "z": -2.5}
    assert body["current_direction"] == "left"


def test_status_offline_fields_are_null() -> None:
    status, body = _get(
        _snapshot(connected=False, username=None, health=None, position=None), "/status"
    )

    assert status == 200
    assert body["username"] is None
    assert body["position"] is None


def test_healthz_reflects_running_flag() -> None:
    assert _get(_snapshot(), "/healthz")[0] == 200

    status, body = _get(_snapshot(running=False, state="stopped"), "/healthz")
    assert status == 503
    assert body == {"running": False, "state": "stopped"}
