from __future__ import annotations

import asyncio
import sys

from aiohttp import web
from loguru import logger

from giftdraw.core.config import Settings, load_settings
from giftdraw.core.logging import setup_logging
from giftdraw.web import create_app


def build_app(settings: Settings) -> web.Application:
    app = create_app(settings)

    async def on_startup(app: web.Application) -> None:
        logger.info("service starting...")
        logger.info("Listen       - {host}:{port}", host=settings.host, port=settings.port)
        logger.info("SMTP server  - {host}:{port}", host=settings.smtp_host, port=settings.smtp_port)
        logger.info("Sender       - {sender}", sender=settings.mail_from)
        logger.info("Max people   - {limit}", limit=settings.max_participants)
        logger.info("service started")

    async def on_shutdown(app: web.Application) -> None:
        logger.info("service stopped")

    app.on_startup.append(on_startup)
    app.on_shutdown.append(on_shutdown)
    return app


def install_event_loop_policy(platform: str = sys.platform) -> bool:
    # uvloop is only installed off Windows, matching the pyproject marker.
    if platform == "win32" or getattr(asyncio, "debug", False):
        return False
    import uvloop

    asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    return True


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)
    web.run_app(build_app(settings), host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    install_event_loop_policy()
    main()
