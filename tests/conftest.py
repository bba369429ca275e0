from __future__ import annotations

import pytest


_ENV_VARS = (
    "MC_HOST",
    "MC_PORT",
    "MC_USERNAME",
    "MC_VERSION",
    "AFK_CONFIG_FILE",
    "AFK_LOG_LEVEL",
    "AFK_STATUS_ENABLE",
    "AFK_STATUS_HOST",
    "AFK_STATUS_PORT",
)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell configuration out of the tests."""
    for name in _ENV_VARS:
        # setenv first so anything written during the test is rolled back.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
