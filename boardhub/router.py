"""Route table and cross-origin handling of the HTTP server."""

from __future__ import annotations

import logging
from http import HTTPStatus

from aiohttp import web

from .api_docs import swagger_json
from .middleware import error_middleware

ALLOW_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")
ALLOW_HEADERS = ("Content-Type", "Authorization")


async def health(request: web.Request) -> web.Response:
    """Report that the service is alive."""
    return web.Response(status=HTTPStatus.OK, text="OK")


def _add_vary(response: web.StreamResponse, *names: str) -> None:
    for name in names:
        response.headers.add("Vary", name)


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Allow any non-empty origin, with credentials, for the listed methods."""
    origin = request.headers.get("Origin", "")

    if request.method != "OPTIONS":
        response = await handler(request)
        if response.prepared:
            return response
        _add_vary(response, "Origin")
        if origin:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        return response

    response = web.Response(status=HTTPStatus.NO_CONTENT)
    _add_vary(
        response,
        "Origin",
        "Access-Control-Request-Method",
        "Access-Control-Request-Headers",
    )
    if origin:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = ",".join(ALLOW_METHODS)
        response.headers["Access-Control-Allow-Headers"] = ",".join(ALLOW_HEADERS)
    return response


class Router:
    """Wires the handlers and middleware into an application."""

    def __init__(self, log: logging.Logger, room_handler, connection_handler) -> None:
        self.log = log
        self.room_handler = room_handler
        self.connection_handler = connection_handler

    def init_routes(self, app: web.Application) -> None:
        """Install middleware and register every route on the application."""
        self.log.info("initializing middleware")
        app.middlewares.extend([cors_middleware, error_middleware])

        self.log.info("initializing routes")
        app.router.add_get("/swagger-ui/doc.json", swagger_json)
        app.router.add_get("/health", health)
        app.router.add_get("/api/v1/ws", self.connection_handler.handle_websocket)
        app.router.add_post("/api/v1/rooms", self.room_handler.create_room)