"""Liveness endpoint for hosting platforms that probe an HTTP port."""

from typing import Optional
from aiohttp import web
from loguru import logger


HEALTH_TEXT = "Bot is running"


async def health_handler(request: web.Request) -> web.Response:
    logger.debug("Health check: Bot is up")
    return web.Response(text=HEALTH_TEXT)


def create_health_app() -> web.Application:
    app = web.Application()
    app.add_routes([web.get("/", health_handler)])
    return app


class HealthServer:
    """Serves ``GET /`` with a static liveness string."""

    def __init__(self, host: str = "0.0.0.0", port: int = 8080):
        self.host = host
        self.port = port
        self._runner: Optional[web.AppRunner] = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    async def start(self) -> None:
        if self._runner is not None:
            return

        runner = web.AppRunner(create_health_app())
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        logger.info(f"Health server running on {self.host}:{self.port}")

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        logger.info("Health server stopped")
