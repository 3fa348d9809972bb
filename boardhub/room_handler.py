"""HTTP handler for creating rooms."""

from __future__ import annotations

import logging
import uuid
from http import HTTPStatus

from aiohttp import web

USER_COOKIE = "userID"


class RoomHandler:
    """Serves room creation requests, issuing a user cookie when needed."""

    def __init__(self, service, log: logging.Logger) -> None:
        self._service = service
        self._log = log

    async def create_room(self, request: web.Request) -> web.Response:
        """Create (or fetch) the caller's room and answer with its id."""
        self._log.debug("received create room request")
        user_id = request.cookies.get(USER_COOKIE, "")
        new_cookie = not user_id
        if new_cookie:
            user_id = str(uuid.uuid4())

        room_id = await self._service.create_room(user_id)

        response = web.Response(status=HTTPStatus.CREATED, text=room_id)
        if new_cookie:
            response.set_cookie(USER_COOKIE, user_id, path="/", httponly=True)
        return response