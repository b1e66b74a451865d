from typing import Optional

from aiohttp import web

from giftdraw.core.config import Settings
from giftdraw.services.notifications import EmailDispatcher
from giftdraw.services.rate_limit import SlidingWindowLimiter
from giftdraw.web.handlers import DISPATCHER_KEY, NOTIFY_LIMITER_KEY, SETTINGS_KEY, routes
from giftdraw.web.utils import cors_middleware


def create_app(settings: Settings, dispatcher: Optional[EmailDispatcher] = None) -> web.Application:
    app = web.Application(middlewares=[cors_middleware(settings.cors_origin)])
    app[SETTINGS_KEY] = settings
    app[DISPATCHER_KEY] = dispatcher or EmailDispatcher(settings)
    app[NOTIFY_LIMITER_KEY] = SlidingWindowLimiter(
        max_calls=settings.notify_rate_limit,
        period_seconds=settings.notify_rate_period,
    )
    app.add_routes(routes)
    return app


__all__ = ["create_app"]
