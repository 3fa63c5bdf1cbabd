"""Handlers restricted to a single HTTP method."""

from __future__ import annotations

from http import HTTPStatus

from kate.middleware import Handler


def method_only(method: str, handler: Handler) -> Handler:
    """Return a handler that answers 405 unless the request uses ``method``."""

    def restricted(ctx, w, r):
        if r.method.upper() != method:
            status = HTTPStatus.METHOD_NOT_ALLOWED
            w.write_header(int(status))
            w.write(status.phrase.encode())
            return
        handler(ctx, w, r)

    return restricted


def head(handler: Handler) -> Handler:
    """Allow only HEAD."""
    return method_only("HEAD", handler)


def options(handler: Handler) -> Handler:
    """Allow only OPTIONS."""
    return method_only("OPTIONS", handler)


def get(handler: Handler) -> Handler:
    """Allow only GET."""
    return method_only("GET", handler)


def post(handler: Handler) -> Handler:
    """Allow only POST."""
    return method_only("POST", handler)


def put(handler: Handler) -> Handler:
    """Allow only PUT."""
    return method_only("PUT", handler)


def delete(handler: Handler) -> Handler:
    """Allow only DELETE."""
    return method_only("DELETE", handler)


def patch(handler: Handler) -> Handler:
    """Allow only PATCH."""
    return method_only("PATCH", handler)