"""Application assembly and the server entry point."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os

from aiohttp import web
from redis.asyncio import Redis

from .connection_handler import ConnectionHandler
from .connection_service import ConnectionService
from .discovery import DiscoveryError, init_service_discovery
from .env import load_env_variables
from .logs import get_logger
from .room_handler import RoomHandler
from .room_service import RoomService
from .router import Router

SHUTDOWN_TIMEOUT = 5.0
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379

_log = logging.getLogger(__name__)


def create_app(redis, log: logging.Logger) -> web.Application:
    """Build the web application around a Redis client."""
    room_service = RoomService(redis, log)
    connection_service = ConnectionService(redis, log)

    app = web.Application()
    Router(
        log,
        RoomHandler(room_service, log),
        ConnectionHandler(connection_service, log),
    ).init_routes(app)

    notifiers: list[asyncio.Task] = []

    async def start_notifier(_: web.Application) -> None:
        notifiers.append(asyncio.create_task(connection_service.notify_subscribers()))
        log.info("Server started")

    async def announce_shutdown(_: web.Application) -> None:
        log.info("Server is shutting down...")

    async def release(_: web.Application) -> None:
        for task in notifiers:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        notifiers.clear()
        close = getattr(redis, "aclose", None) or redis.close
        try:
            await close()
        except Exception as exc:
            log.error("Error closing Redis connection: %s", exc)

    app.on_startup.append(start_notifier)
    app.on_shutdown.append(announce_shutdown)
    app.on_cleanup.append(release)
    return app


def _redis_address(addr: str) -> tuple[str, int]:
    if not addr:
        return DEFAULT_REDIS_HOST, DEFAULT_REDIS_PORT
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, DEFAULT_REDIS_PORT
    return host or DEFAULT_REDIS_HOST, int(port) if port else DEFAULT_REDIS_PORT


def main(argv: list[str] | None = None) -> int:
    """Start the server; returns the process exit status."""
    parser = argparse.ArgumentParser(prog="boardhub", description="Board Project API server")
    parser.add_argument("--env-file", default=None, help="dotenv file to load (default: .env)")
    args = parser.parse_args(argv)

    load_env_variables(args.env_file)
    try:
        registration = init_service_discovery()
    except DiscoveryError as exc:
        _log.critical("%s", exc)
        return 1

    log = get_logger()
    host, port = _redis_address(os.environ.get("REDIS_ADDR", ""))
    redis = Redis(host=host, port=port)
    app = create_app(redis, log)

    try:
        web.run_app(app, port=registration.port, shutdown_timeout=SHUTDOWN_TIMEOUT, print=None)
    except OSError as exc:
        log.critical("Listen: %s", exc)
        return 1

    log.info("Server exited properly")
    return 0