"""Connection supervisor - owns the game session and its reconnect loop."""

from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum
from typing import Any, Callable, TypeVar

from afkbot.bots.behavior import BehaviorScheduler
from afkbot.bots.timers import Sleep
from afkbot.config import MovementConfig, ReconnectConfig, ServerConfig
from afkbot.session.errors import ConnectionFailure, classify_error, describe_failure
from afkbot.session.ports import Session, SessionProvider
from afkbot.status.snapshot import StatusSnapshot


T = TypeVar("T")

LOW_HEALTH = 5
_NOTABLE_SERVER_TEXT = ("kicked", "banned", "timeout")


class BotState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    DISCONNECTED = "disconnected"
    STOPPED = "stopped"


class AfkBot:
    """Keeps one account connected and hands spawned sessions to a scheduler.

    All methods run on the asyncio event loop thread.
    """

    def __init__(
        self,
        server: ServerConfig,
        provider: SessionProvider,
        *,
        reconnect: ReconnectConfig | None = None,
        movement: MovementConfig | None = None,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
        scheduler_factory: Callable[[], BehaviorScheduler] | None = None,
    ):
        self.server = server
        self.provider = provider
        self.reconnect = reconnect or ReconnectConfig()
        self.movement = movement or MovementConfig()
        self.log = logging.getLogger(f"bot.{server.username}")
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._scheduler_factory = scheduler_factory or self._default_scheduler

        self.state = BotState.IDLE
        self.running = False
        self.fatal = False
        self.reconnect_attempts = 0

        self._session: Session | None = None
        self._scheduler: BehaviorScheduler | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._stopped = asyncio.Event()

    def _default_scheduler(self) -> BehaviorScheduler:
        return BehaviorScheduler(self.movement, rng=self._rng)

    # -------------------------------------------------------------------------
    # Public control
    # -------------------------------------------------------------------------

    def start(self) -> None:
        if self.running:
            self.log.warning("Bot is already running, skipping connection attempt")
            return
        if self.state == BotState.STOPPED:
            self.log.warning("Bot was stopped; create a new bot to reconnect")
            return
        self.running = True
        self._connect()

    def stop(self) -> None:
        """Stop permanently. Safe to call more than once."""
        if self.state == BotState.STOPPED:
            return

        self.log.info("Stopping bot...")
        # Cleared first so termination events raised by quit() are ignored.
        self.running = False
        self._cancel_reconnect()
        self._teardown_scheduler()

        session = self._session
        self._session = None
        if session is not None:
            try:
                session.quit("AFK Bot shutting down")
            except Exception as e:
                self.log.warning("Error during bot shutdown: %s", e)

        self.state = BotState.STOPPED
        self._stopped.set()
        self.log.info("Bot stopped successfully")

    async def wait_stopped(self) -> None:
        await self._stopped.wait()

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def status(self) -> StatusSnapshot:
        session = self._session
        movement = self._scheduler.status() if self._scheduler else None
        return StatusSnapshot(
            running=self.running,
            connected=session is not None and self.state == BotState.ACTIVE,
            state=self.state.value,
            reconnect_attempts=self.reconnect_attempts,
            max_reconnect_attempts=self.reconnect.max_attempts,
            fatal=self.fatal,
            username=self._read(session, lambda s: s.username),
            health=self._read(session, lambda s: s.health),
            position=self._read(session, lambda s: s.position),
            is_moving=movement.is_moving if movement else False,
            current_direction=movement.current_direction if movement else None,
        )

    def _read(self, session: Session | None, getter: Callable[[Session], T]) -> T | None:
        if session is None:
            return None
        try:
            return getter(session)
        except Exception:
            self.log.debug("Session read failed", exc_info=True)
            return None

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    def _connect(self) -> None:
        self.state = BotState.CONNECTING
        self.log.info(
            "Attempting to connect to %s:%s...", self.server.host, self.server.port
        )
        try:
            session = self.provider.connect(
                self.server.host,
                self.server.port,
                self.server.username,
                self.server.version,
            )
        except Exception as e:
            self.log.error("Failed to create bot: %s", e)
            self._log_failure(e)
            self.state = BotState.DISCONNECTED
            self._schedule_reconnect()
            return

        self._session = session
        self._bind(session)

    def _bind(self, session: Session) -> None:
        """Route session events to handlers, dropping events from stale sessions."""

        def route(handler: Callable[..., None]) -> Callable[..., None]:
            def wrapped(*args: Any) -> None:
                if session is not self._session:
                    return
                handler(session, *args)

            return wrapped

        session.add_event_handler("login", route(self.on_login))
        session.add_event_handler("spawn", route(self.on_spawn))
        session.add_event_handler("chat", route(self.on_chat))
        session.add_event_handler("message", route(self.on_server_message))
        session.add_event_handler("end", route(self.on_end))
        session.add_event_handler("error", route(self.on_error))
        session.add_event_handler("kicked", route(self.on_kicked))
        session.add_event_handler("health", route(self.on_health))
        session.add_event_handler("death", route(self.on_death))

    # -------------------------------------------------------------------------
    # Session events
    # -------------------------------------------------------------------------

    def on_login(self, session: Session) -> None:
        self.log.info(
            "Successfully logged in as %s", self._read(session, lambda s: s.username)
        )
        self.reconnect_attempts = 0
        self.state = BotState.ACTIVE

    def on_spawn(self, session: Session) -> None:
        self.log.info("Bot spawned in world, starting AFK behavior...")
        if not self._read(session, lambda s: s.ready):
            self.log.error("Cannot start AFK behavior: bot not properly initialized")
            return
        self._teardown_scheduler()
        self._scheduler = self._scheduler_factory()
        self._scheduler.start(session)
        self.log.info("AFK behavior started - bot will now walk and jump randomly")

    def on_chat(self, session: Session, username: str, message: str) -> None:
        if username != self._read(session, lambda s: s.username):
            self.log.info("[Chat] %s: %s", username, message)

    def on_server_message(self, session: Session, text: str) -> None:
        if any(word in text for word in _NOTABLE_SERVER_TEXT):
            self.log.warning("Server message: %s", text)

    def on_end(self, session: Session, reason: str | None = None) -> None:
        self.log.warning("Bot disconnected: %s", reason or "Unknown reason")
        if reason == "socketClosed":
            self.log.info(
                "Connection closed during handshake - server may have anti-bot protection"
            )
        self._handle_termination()

    def on_kicked(self, session: Session, reason: str | None = None) -> None:
        self.log.warning("Bot was kicked: %s", reason)
        self._handle_termination()

    def on_error(self, session: Session, error: BaseException) -> None:
        self.log.error("Bot error: %s", error)
        self._log_failure(error)
        self.log.debug("Full error details", exc_info=error)
        self._handle_termination()

    def on_health(self, session: Session) -> None:
        health = self._read(session, lambda s: s.health)
        if health is not None and health <= LOW_HEALTH:
            self.log.warning("Low health: %s/20", health)

    def on_death(self, session: Session) -> None:
        self.log.warning("Bot died, respawning...")
        try:
            session.respawn()
        except Exception as e:
            self.log.error("Error respawning: %s", e)

    def _log_failure(self, error: BaseException) -> ConnectionFailure:
        kind = classify_error(error)
        hint = describe_failure(kind)
        if hint:
            self.log.error(hint)
        return kind

    # -------------------------------------------------------------------------
    # Termination and reconnect
    # -------------------------------------------------------------------------

    def _handle_termination(self) -> None:
        self._teardown_scheduler()

        session = self._session
        self._session = None
        if session is not None:
            try:
                session.quit("Reconnecting")
            except Exception:
                self.log.debug("quit() on dead session failed", exc_info=True)

        if not self.running:
            return
        self.state = BotState.DISCONNECTED
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if not self.running:
            return
        if self.reconnect_pending:
            self.log.debug("Reconnect already in progress; skipping duplicate")
            return

        limit = self.reconnect.max_attempts
        if self.reconnect_attempts >= limit:
            self.log.error(
                "Max reconnection attempts (%d) reached. Stopping bot.", limit
            )
            self.fatal = True
            self.stop()
            return

        self.reconnect_attempts += 1
        delay_ms = self.reconnect.delay_for(self.reconnect_attempts)
        self.log.info(
            "Reconnection attempt %d/%d in %g seconds...",
            self.reconnect_attempts,
            limit,
            delay_ms / 1000,
        )
        self._reconnect_task = asyncio.create_task(self._reconnect_after(delay_ms))

    async def _reconnect_after(self, delay_ms: int) -> None:
        await self._sleep(delay_ms / 1000)
        if not self.running:
            return
        self._reconnect_task = None
        self._connect()

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task and not task.done():
            task.cancel()

    def _teardown_scheduler(self) -> None:
        scheduler = self._scheduler
        self._scheduler = None
        if scheduler is not None:
            scheduler.stop()
