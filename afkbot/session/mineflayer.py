"""Session provider backed by the Node ``mineflayer`` client.

The ``javascript`` bridge starts a Node process on import, so it is imported
lazily when the provider is constructed. Bridge callbacks run on the bridge's
own thread; they are handed to the asyncio loop with call_soon_threadsafe.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from afkbot.session.errors import SessionError
from afkbot.session.ports import SESSION_EVENTS, Position, SessionEventHandler


log = logging.getLogger("session.mineflayer")


def _to_error(js_err: Any) -> SessionError:
    message = ""
    code = None
    try:
        message = str(js_err.message or "")
        raw_code = js_err.code
        code = str(raw_code) if raw_code else None
    except Exception:
        message = message or str(js_err)
    return SessionError(message or "unknown client error", code=code)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return str(value.toString())
    except Exception:
        return str(value)


class MineflayerSession:
    """One mineflayer bot wrapped behind the Session port."""

    def __init__(self, js_bot: Any, on: Any, loop: asyncio.AbstractEventLoop):
        self._bot = js_bot
        self._on = on
        self._loop = loop

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def _entity(self) -> Any:
        return self._bot.entity

    @property
    def username(self) -> str | None:
        name = self._bot.username
        return str(name) if name else None

    @property
    def ready(self) -> bool:
        return self._entity is not None

    @property
    def on_ground(self) -> bool:
        entity = self._entity
        return bool(entity and entity.onGround)

    @property
    def yaw(self) -> float:
        entity = self._entity
        return float(entity.yaw) if entity else 0.0

    @property
    def pitch(self) -> float:
        entity = self._entity
        return float(entity.pitch) if entity else 0.0

    @property
    def health(self) -> float | None:
        health = self._bot.health
        return float(health) if health is not None else None

    @property
    def position(self) -> Position | None:
        entity = self._entity
        if not entity or not entity.position:
            return None
        pos = entity.position
        return Position(float(pos.x), float(pos.y), float(pos.z))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def set_control_state(self, control: str, state: bool) -> None:
        self._bot.setControlState(control, state)

    def look(self, yaw: float, pitch: float, force: bool = False) -> None:
        self._bot.look(yaw, pitch, force)

    def respawn(self) -> None:
        self._bot.respawn()

    def quit(self, reason: str) -> None:
        self._bot.quit(reason)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def add_event_handler(self, event: str, handler: SessionEventHandler) -> None:
        # Port event names are mineflayer's own.
        if event not in SESSION_EVENTS:
            raise ValueError(f"Unknown session event: {event}")

        loop = self._loop

        def dispatch(*args: Any) -> None:
            loop.call_soon_threadsafe(lambda: handler(*args))

        if event == "error":

            @self._on(self._bot, event)
            def _on_error(this, err=None, *rest):
                dispatch(_to_error(err))

        elif event == "chat":

            @self._on(self._bot, event)
            def _on_chat(this, username=None, message=None, *rest):
                dispatch(_to_text(username), _to_text(message))

        elif event in ("message", "end", "kicked"):

            @self._on(self._bot, event)
            def _on_text(this, value=None, *rest):
                dispatch(_to_text(value))

        else:

            @self._on(self._bot, event)
            def _on_plain(this, *rest):
                dispatch()


class MineflayerProvider:
    """Creates mineflayer bots in offline-auth mode."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        from javascript import On, require

        self._on = On
        self._mineflayer = require("mineflayer")
        self._loop = loop

    def connect(
        self,
        host: str,
        port: int,
        username: str,
        version: str | None,
    ) -> MineflayerSession:
        loop = self._loop or asyncio.get_running_loop()
        log.debug("createBot host=%s port=%s username=%s version=%s", host, port, username, version)
        js_bot = self._mineflayer.createBot(
            {
                "host": host,
                "port": int(port),
                "username": username,
                "version": version or False,
                # Most hosted community servers run in offline mode.
                "auth": "offline",
                "skipValidation": True,
                "hideErrors": False,
                "checkTimeoutInterval": 60000,
                "keepAlive": True,
            }
        )
        return MineflayerSession(js_bot, self._on, loop)
