"""WebSocket endpoint through which clients join and update rooms."""

from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import WSMsgType, web

from .dto import ClientMessage, MessageType

USER_COOKIE = "userID"


class ConnectionHandler:
    """Reads client messages from a WebSocket and forwards them to the service."""

    def __init__(self, service, log: logging.Logger) -> None:
        self._service = service
        self._log = log

    async def dispatch(self, data: str | bytes, user_id: str, conn) -> None:
        """Handle one raw client message; failures are reported back to the client."""
        try:
            msg = ClientMessage.from_dict(json.loads(data))
        except ValueError as exc:
            self._log.error("Read error: %s", exc)
            return

        try:
            if msg.message_type == MessageType.UPDATE:
                await self._service.update_room(msg, user_id)
            elif msg.message_type == MessageType.JOIN:
                await self._service.join_room(msg.room_id, conn)
            else:
                raise ValueError(f"unsupported message type: {msg.message_type}")
        except Exception as exc:
            reply: dict[str, Any] = {"message": str(exc)}
            try:
                await conn.send_json(reply)
            except Exception as write_exc:
                self._log.error("Write: %s", write_exc)

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Upgrade the request and serve client messages until the socket closes."""
        user_id = request.cookies.get(USER_COOKIE, "")
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        try:
            async for message in ws:
                if message.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                    await self.dispatch(message.data, user_id, ws)
                elif message.type == WSMsgType.ERROR:
                    self._log.error("Read error: %s", ws.exception())
                    break
        finally:
            try:
                await self._service.close_connections()
            except Exception as exc:
                self._log.error("%s", exc)
            try:
                await ws.close()
            except Exception as exc:
                self._log.error("%s", exc)
        return ws