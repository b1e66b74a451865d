from __future__ import annotations

import asyncio
import math
from typing import Any

from aiohttp import web
from loguru import logger

from giftdraw.core.config import Settings
from giftdraw.domain import Infeasible
from giftdraw.services import PreconditionViolation, SearchBudgetExceeded, generate_assignment
from giftdraw.services.errors import DispatchError
from giftdraw.services.notifications import EmailDispatcher
from giftdraw.services.rate_limit import SlidingWindowLimiter
from giftdraw.web.payloads import PayloadError, parse_draw_request, parse_notify_request
from giftdraw.web.utils import client_key, json_error, log_handler_exception

SETTINGS_KEY = web.AppKey("settings", Settings)
DISPATCHER_KEY = web.AppKey("dispatcher", EmailDispatcher)
NOTIFY_LIMITER_KEY = web.AppKey("notify_limiter", SlidingWindowLimiter)

routes = web.RouteTableDef()


async def _read_json(request: web.Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError both land here.
        raise PayloadError("Request body must be valid UTF-8 JSON.") from exc


@routes.get("/health")
async def health_handler(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


@routes.post("/draw")
async def draw_handler(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    try:
        participants, exclusions, seed = parse_draw_request(await _read_json(request))
    except PayloadError as exc:
        return json_error(400, str(exc))

    if len(participants) > settings.max_participants:
        return json_error(413, f"At most {settings.max_participants} participants are supported.")

    try:
        outcome = await asyncio.to_thread(
            generate_assignment,
            participants,
            exclusions,
            seed=seed,
            max_steps=settings.search_max_steps,
        )
    except PreconditionViolation as exc:
        return json_error(400, str(exc))
    except SearchBudgetExceeded as exc:
        logger.bind(participants=len(participants), exclusions=len(exclusions)).warning(
            "Draw aborted: {error}", error=str(exc)
        )
        return json_error(503, "The draw took too long. Try removing some exclusions.")
    except Exception as exc:
        log_handler_exception("draw", request, exc)
        return json_error(500, "Error while drawing assignments.")

    if isinstance(outcome, Infeasible):
        return json_error(409, outcome.reason)
    return web.json_response(
        {"success": True, "assignments": [assignment.to_dict() for assignment in outcome]}
    )


@routes.post("/notify")
async def notify_handler(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    limit = request.app[NOTIFY_LIMITER_KEY].hit(client_key(request, "notify", settings.trust_proxy))
    if not limit.allowed:
        response = json_error(429, "You're doing that too often. Please slow down.")
        response.headers["Retry-After"] = str(math.ceil(limit.retry_after))
        return response

    try:
        payloads, event_name, deadline = parse_notify_request(await _read_json(request))
    except PayloadError as exc:
        return json_error(400, str(exc))

    dispatcher = request.app[DISPATCHER_KEY]
    try:
        results = await asyncio.to_thread(dispatcher.send_all, payloads, event_name, deadline)
    except DispatchError as exc:
        logger.bind(count=len(payloads)).error("Notification dispatch failed: {error}", error=str(exc))
        return json_error(502, str(exc))
    except Exception as exc:
        log_handler_exception("notify", request, exc)
        return json_error(500, "Error sending notifications.")

    sent = sum(1 for result in results if result.success)
    return web.json_response(
        {
            "success": sent == len(results),
            "message": f"{sent} of {len(results)} emails sent.",
            "results": [result.to_dict() for result in results],
        }
    )
