"""Creation of drawing rooms backed by Redis."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import timedelta

from redis.exceptions import RedisError

ROOM_TTL = timedelta(hours=24)
EMPTY_CONTENT = json.dumps([])


class RoomCreationError(Exception):
    """Raised when a room cannot be stored."""


def _text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def user_room_key(user_id: str) -> str:
    return f"user:{user_id}:room"


def room_key(room_id: str) -> str:
    return f"room:{room_id}"


class RoomService:
    """Creates rooms and remembers which room each user administers."""

    def __init__(self, redis, log: logging.Logger) -> None:
        self._redis = redis
        self._log = log

    async def create_room(self, user_id: str) -> str:
        """Return the user's room, creating a new one if the user has none."""
        try:
            existing = await self._redis.get(user_room_key(user_id))
        except RedisError as exc:
            self._log.debug("lookup of existing room failed: %s", exc)
            existing = None
        if existing is not None:
            return _text(existing)

        room_id = str(uuid.uuid4())
        key = room_key(room_id)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(user_room_key(user_id), room_id, ex=ROOM_TTL)
                pipe.hset(key, mapping={"admin_id": user_id, "content": EMPTY_CONTENT})
                pipe.expire(key, ROOM_TTL)
                await pipe.execute()
        except RedisError as exc:
            raise RoomCreationError(f"error while creating room: {exc}") from exc
        return room_id