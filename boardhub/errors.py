"""HTTP errors raised by handlers and services."""

from __future__ import annotations

from http import HTTPStatus


class HTTPError(Exception):
    """An error carrying an HTTP status code and a message."""

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = code
        self.message = HTTPStatus(code).phrase if message is None else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"code={self.code}, message={self.message}"


def bad_request() -> HTTPError:
    return HTTPError(HTTPStatus.BAD_REQUEST, "Bad Request")


def unauthorized() -> HTTPError:
    return HTTPError(HTTPStatus.UNAUTHORIZED, "Unauthorized")


def forbidden() -> HTTPError:
    return HTTPError(HTTPStatus.FORBIDDEN, "Forbidden")


def not_found() -> HTTPError:
    return HTTPError(HTTPStatus.NOT_FOUND, "Not Found")