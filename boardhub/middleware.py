"""HTTP middleware that turns raised errors into JSON error bodies."""

from __future__ import annotations

from datetime import datetime
from http import HTTPStatus

from aiohttp import web

from .dto import ErrorResponse
from .errors import HTTPError


def _status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def error_response(status: int, message: str, path: str) -> web.Response:
    """Build a JSON response describing an error for the given request path."""
    body = ErrorResponse(
        timestamp=datetime.now().astimezone(),
        status=status,
        error=_status_text(status),
        message=message,
        path=path,
    )
    return web.json_response(body.to_dict(), status=status)


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Answer failed requests with an error body instead of a bare status."""
    try:
        return await handler(request)
    except HTTPError as exc:
        return error_response(exc.code, str(exc), request.path)
    except web.HTTPException as exc:
        if exc.status < 400:
            raise
        err = HTTPError(exc.status, exc.reason)
        return error_response(err.code, str(err), request.path)
    except Exception as exc:
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc), request.path)