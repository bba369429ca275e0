#!/usr/bin/env python3
"""
AFK Bot - keeps a Minecraft account present on a server.

Connects with the configured identity, reconnects with progressive backoff
when the session drops, and walks/looks/jumps at random intervals so the
server does not kick the account for idling.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from contextlib import suppress

from afkbot.bots import AfkBot
from afkbot.config import AppConfig, ConfigError, load_config
from afkbot.session import SessionProvider
from afkbot.status import start_status_server
from afkbot.utils import configure_logging, load_env


log = logging.getLogger("afkbot")


async def run(config: AppConfig, provider: SessionProvider | None = None) -> int:
    """Run one bot until it stops. Returns the process exit status."""
    loop = asyncio.get_running_loop()
    if provider is None:
        from afkbot.session.mineflayer import MineflayerProvider

        provider = MineflayerProvider(loop)

    bot = AfkBot(
        config.server,
        provider,
        reconnect=config.reconnect,
        movement=config.movement,
    )

    faults: list[dict] = []

    def on_signal(name: str) -> None:
        log.info("Received %s, shutting down bot gracefully...", name)
        bot.stop()

    def on_loop_error(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        log.error(
            "Uncaught exception: %s",
            context.get("message"),
            exc_info=context.get("exception"),
        )
        faults.append(context)
        bot.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; Ctrl+C still raises there.
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, on_signal, sig.name)
    loop.set_exception_handler(on_loop_error)

    status_runner = None
    if config.status.enabled:
        try:
            status_runner, host, port = await start_status_server(
                bot.status, host=config.status.host, port=config.status.port
            )
            log.info("Status server listening on http://%s:%s", host, port)
        except Exception:
            log.exception("Failed to start status server")

    bot.start()
    try:
        await bot.wait_stopped()
    finally:
        bot.stop()
        if status_runner is not None:
            await status_runner.cleanup()

    if faults or bot.fatal:
        return 1
    return 0


def main() -> int:
    load_env()
    try:
        config = load_config()
    except ConfigError as e:
        configure_logging()
        log.error("Invalid configuration: %s", e)
        return 1

    configure_logging(config.logging.level, timestamps=config.logging.timestamps)

    if not config.server.host or not config.server.username:
        log.error("Missing required configuration: host and username are required")
        return 1

    log.info("Starting Minecraft AFK Bot...")
    log.info("Server: %s:%s", config.server.host, config.server.port)
    log.info("Username: %s", config.server.username)

    try:
        return asyncio.run(run(config))
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 0
    except Exception:
        log.exception("Uncaught exception")
        return 1


if __name__ == "__main__":
    sys.exit(main())
