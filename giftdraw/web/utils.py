from __future__ import annotations

from typing import Awaitable, Callable

from aiohttp import web
from loguru import logger

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def client_key(request: web.Request, action: str, trust_proxy: bool = False) -> str:
    client = ""
    if trust_proxy:
        # Only a proxy we sit behind may name the client.
        client = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return f"{client or request.remote or 'unknown'}:{action}"


def json_error(status: int, error: str) -> web.Response:
    return web.json_response({"success": False, "error": error}, status=status)


def log_handler_exception(action: str, request: web.Request, error: Exception) -> None:
    logger.bind(action=action, path=request.path, remote=request.remote).exception(
        "Handler error: {error}", error=str(error)
    )


def cors_middleware(allowed_origin: str):
    def apply(response: web.StreamResponse) -> web.StreamResponse:
        response.headers["Access-Control-Allow-Origin"] = allowed_origin
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        return response

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.method == "OPTIONS":
            return apply(web.Response(status=204))
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            apply(exc)
            raise
        return apply(response)

    return middleware
