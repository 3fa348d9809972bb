"""Room membership of WebSocket connections and fan-out of room updates."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

from .dto import ClientMessage

_POLL_TIMEOUT = 1.0
_IDLE_DELAY = 0.05


class Connection(Protocol):
    async def send_json(self, data: Any) -> None: ...

    async def close(self) -> Any: ...


class NotAdminError(Exception):
    """Raised when a user who does not own a room tries to change it."""


def _text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _room_key(room_id: str) -> str:
    return f"room:{room_id}"


class ConnectionService:
    """Tracks which connections watch which room and relays published content."""

    def __init__(self, redis, log: logging.Logger) -> None:
        self._redis = redis
        self._log = log
        self._lock = asyncio.Lock()
        self._pubsub = redis.pubsub()
        self.rooms: dict[str, set[Connection]] = {}

    async def notify_subscribers(self) -> None:
        """Relay messages published on room channels until cancelled."""
        while True:
            message = await self._pubsub.get_message(
                ignore_subscribe_messages=True, timeout=_POLL_TIMEOUT
            )
            if message is None:
                await asyncio.sleep(_IDLE_DELAY)
                continue
            if message.get("type") not in ("message", "pmessage"):
                continue
            await self.broadcast(_text(message["channel"]), _text(message["data"]))

    async def broadcast(self, channel: str, payload: bytes | str) -> None:
        """Send the decoded payload to every connection in the channel's room."""
        try:
            content = json.loads(_text(payload))
        except ValueError as exc:
            self._log.error("JSON unmarshal error: %s", exc)
            return
        if not isinstance(content, list) or not all(isinstance(item, str) for item in content):
            self._log.error("JSON unmarshal error: payload is not a list of strings")
            return
        async with self._lock:
            clients = self.rooms.get(channel, set())
            for client in list(clients):
                try:
                    await client.send_json(content)
                except Exception as exc:
                    self._log.error("Write error: %s", exc)
                    try:
                        await client.close()
                    except Exception as close_exc:
                        self._log.error("Close error: %s", close_exc)
                        continue
                    clients.discard(client)

    async def update_room(self, msg: ClientMessage, user_id: str) -> None:
        """Store and publish new room content; only the room's admin may do this."""
        key = _room_key(msg.room_id)
        admin_id = await self._redis.hget(key, "admin_id")
        if admin_id is None:
            raise LookupError(f"room {msg.room_id} not found")
        if _text(admin_id) != user_id:
            raise NotAdminError("you're not admin of this room")
        content = json.dumps(msg.content, separators=(",", ":"), ensure_ascii=False)
        await self._redis.hset(key, "content", content)
        await self._redis.publish(key, content)

    async def join_room(self, room_id: str, conn: Connection) -> None:
        """Add a connection to a room, send it the current content and subscribe."""
        key = _room_key(room_id)
        async with self._lock:
            self.rooms.setdefault(key, set()).add(conn)
        content = await self._redis.hget(key, "content")
        if content is None:
            raise LookupError(f"room {room_id} not found")
        await conn.send_json(_text(content))
        await self._pubsub.subscribe(key)

    async def close_connections(self) -> None:
        """Close every tracked connection and forget all rooms."""
        async with self._lock:
            for room in self.rooms.values():
                for conn in room:
                    await conn.close()
            self.rooms = {}
        await self._pubsub.punsubscribe("room:*")