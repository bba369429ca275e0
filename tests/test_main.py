from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path

import pytest

from afkbot import main as entry
from afkbot.config import AppConfig, ReconnectConfig, ServerConfig

from fakes import FakeProvider


SERVER = ServerConfig(host="mc.example.net", username="AFKBot")


def test_run_exits_with_failure_when_reconnects_exhausted() -> None:
    config = AppConfig(server=SERVER, reconnect=ReconnectConfig(max_attempts=0))
    provider = FakeProvider(failures=[ConnectionRefusedError("refused")])

    code = asyncio.run(entry.run(config, provider=provider))

    assert code == 1
    assert len(provider.calls) == 1


def test_sigterm_stops_bot_and_exits_cleanly() -> None:
    config = AppConfig(server=SERVER)
    provider = FakeProvider()

    async def scenario():
        task = asyncio.create_task(entry.run(config, provider=provider))
        while not provider.sessions:
            await asyncio.sleep(0)
        provider.latest.emit("login")
        os.kill(os.getpid(), signal.SIGTERM)
        return await asyncio.wait_for(task, timeout=5)

    code = asyncio.run(scenario())

    assert code == 0
    assert provider.latest.quit_reasons == ["AFK Bot shutting down"]
    assert len(provider.calls) == 1


def test_main_requires_host(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert entry.main() == 1
