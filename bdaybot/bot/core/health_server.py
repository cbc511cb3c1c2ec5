"""HTTP health check server"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web

from .config import BOT_NAME

if TYPE_CHECKING:
    from bdaybot.shared.database import DatabaseManager

logger = logging.getLogger(__name__)


class HealthCheckServer:
    """Liveness and status endpoints for container platforms"""

    def __init__(
        self,
        bot: Any = None,
        database: DatabaseManager | None = None,
        host: str = "0.0.0.0",
        port: int = 8080,
    ) -> None:
        self.bot = bot
        self.database = database
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    def _bot_ready(self) -> bool:
        return self.bot is not None and self.bot.is_ready()

    async def handle_health(self, request: web.Request) -> web.Response:
        """Always 200; reports whether the gateway session is ready"""
        ready = self._bot_ready()
        return web.json_response({"status": "healthy" if ready else "starting", "ready": ready})

    async def handle_status(self, request: web.Request) -> web.Response:
        ready = self._bot_ready()
        database_ok = await self.database.check_health() if self.database else None
        last_scan = getattr(self.bot, "last_scan", None)
        return web.json_response(
            {
                "service": BOT_NAME,
                "ready": ready,
                "database": database_ok,
                "uptime_seconds": int(time.time() - self._start_time),
                "last_scan": last_scan.as_dict() if last_scan else None,
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        return web.Response(text="pong")

    async def start(self) -> None:
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info(f"Health server started on {self.host}:{self.port}")

    async def stop(self) -> None:
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Health server stopped")
