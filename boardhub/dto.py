"""Data objects exchanged over HTTP and WebSocket."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass
class ErrorResponse:
    """Body returned for failed HTTP requests."""

    timestamp: datetime
    status: int = 0
    error: str = ""
    message: str = ""
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": self.timestamp.isoformat()}
        if self.status:
            data["status"] = self.status
        if self.error:
            data["error"] = self.error
        if self.message:
            data["message"] = self.message
        if self.path:
            data["path"] = self.path
        return data


@dataclass
class RoomView:
    """A room as shown to clients."""

    id: str = ""
    admin_id: str = ""
    content: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id:
            data["ID"] = self.id
        if self.admin_id:
            data["adminID"] = self.admin_id
        if self.content:
            data["content"] = list(self.content)
        return data


class MessageType(str, Enum):
    """Kinds of messages a WebSocket client may send."""

    UPDATE = "update"
    JOIN = "join"


def _string_field(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass
class ClientMessage:
    """A message received from a WebSocket client.

    message_type is a MessageType when recognised, otherwise the raw string.
    """

    message_type: MessageType | str = ""
    room_id: str = ""
    content: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ClientMessage":
        if not isinstance(data, dict):
            raise ValueError("message must be a JSON object")
        raw_type = _string_field(data, "type")
        try:
            message_type: MessageType | str = MessageType(raw_type)
        except ValueError:
            message_type = raw_type
        content = data.get("content")
        if content is None:
            content = []
        if not isinstance(content, list) or not all(isinstance(item, str) for item in content):
            raise ValueError("field 'content' must be a list of strings")
        return cls(
            message_type=message_type,
            room_id=_string_field(data, "roomID"),
            content=list(content),
        )