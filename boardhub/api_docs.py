"""Swagger description of the HTTP API and the handler that serves it."""

from __future__ import annotations

from typing import Any

from aiohttp import web

DEFAULT_HOST = "localhost:8080"
DEFAULT_BASE_PATH = "/api/v1"
TITLE = "Board Project API"
VERSION = "1.0"

_ERROR_DEFINITION = "dto.ErrorResponseDto"
_JSON = "application/json"

_ERROR_FIELDS: tuple[tuple[str, str], ...] = (
    ("timestamp", "string"),
    ("status", "integer"),
    ("error", "string"),
    ("message", "string"),
    ("path", "string"),
)


def _typed(kind: str) -> dict[str, str]:
    return {"type": kind}


def _ref(definition: str) -> dict[str, str]:
    return {"$ref": f"#/definitions/{definition}"}


def _user_cookie_param() -> dict[str, Any]:
    return {
        **_typed("string"),
        "default": "userID=",
        "description": "userID",
        "name": "Cookie",
        "in": "header",
        "required": True,
    }


def _create_room_operation() -> dict[str, Any]:
    summary = "Create room"
    return {
        "description": summary,
        "consumes": [_JSON],
        "produces": [_JSON],
        "tags": ["rooms"],
        "summary": summary,
        "parameters": [_user_cookie_param()],
        "responses": {
            "201": {"description": "Created", "schema": _typed("string")},
            "404": {"description": "Not Found", "schema": _ref(_ERROR_DEFINITION)},
        },
    }


def _error_definition() -> dict[str, Any]:
    properties = {name: _typed(kind) for name, kind in sorted(_ERROR_FIELDS)}
    return {**_typed("object"), "properties": properties}


def swagger_spec(host: str = DEFAULT_HOST, base_path: str = DEFAULT_BASE_PATH) -> dict[str, Any]:
    """Return the Swagger 2.0 document describing the API."""
    info = {"description": "", "title": TITLE, "contact": {}, "version": VERSION}
    return {
        "schemes": [],
        "swagger": "2.0",
        "info": info,
        "host": host,
        "basePath": base_path,
        "paths": {"/rooms": {"post": _create_room_operation()}},
        "definitions": {_ERROR_DEFINITION: _error_definition()},
    }


async def swagger_json(request: web.Request) -> web.Response:
    """Serve the Swagger document as JSON."""
    return web.json_response(swagger_spec())