from __future__ import annotations

from typing import Callable

from aiohttp import web

from afkbot.status.snapshot import StatusSnapshot


def build_status_app(get_status: Callable[[], StatusSnapshot]) -> web.Application:
    """Read-only status API.

    Exposes: /status (JSON snapshot) and /healthz (200 while running, else 503)
    """
    app = web.Application()

    async def handle_status(request: web.Request) -> web.StreamResponse:
        return web.json_response(get_status().to_dict())

    async def handle_health(request: web.Request) -> web.StreamResponse:
        snapshot = get_status()
        status = 200 if snapshot.running else 503
        return web.json_response(
            {"running": snapshot.running, "state": snapshot.state}, status=status
        )

    app.router.add_get("/status", handle_status)
    app.router.add_get("/healthz", handle_health)
    return app


async def start_status_server(
    get_status: Callable[[], StatusSnapshot],
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
) -> tuple[web.AppRunner, str, int]:
    """Start a tiny HTTP server reporting bot status."""
    app = build_status_app(get_status)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=host, port=port)
    await site.start()
    return runner, host, port
