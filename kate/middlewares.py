"""Ready-made middlewares: panic recovery, request logging and response caching.

Writers are expected to offer ``headers`` (a mapping of header name to a list
of values), ``status_code``, ``raw_body``, ``write_header(status)`` and
``write(data)``. Requests offer ``method``, ``request_uri``, ``raw_body``,
``remote_addr`` and ``form`` (a mapping of names to value lists or strings).
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from http import HTTPStatus
from typing import Any, Mapping

from cachetools import TTLCache

from kate.log.context import get_logger
from kate.middleware import Handler, Middleware, MiddlewareFunc


def _text(data: bytes | None) -> str:
    return bytes(data or b"").decode("utf-8", "replace")


def recovery(handler: Handler) -> Handler:
    """Wrap ``handler`` so that an exception becomes a 500 response."""

    def recovered(ctx, w, r):
        try:
            handler(ctx, w, r)
        except Exception as exc:
            status = HTTPStatus.INTERNAL_SERVER_ERROR
            w.write_header(int(status))
            w.write(status.phrase.encode())
            get_logger(ctx).error("got panic", exc_info=exc, extra={"error": repr(exc)})

    return recovered


RECOVERY = MiddlewareFunc(recovery)


def logging_middleware(logger: logging.Logger | logging.LoggerAdapter) -> Middleware:
    """Return a middleware that logs each request and its outcome."""

    def wrap(handler: Handler) -> Handler:
        def logged(ctx, w, r):
            start = time.monotonic()
            logger.info(
                "request in",
                extra={
                    "remote": r.remote_addr,
                    "method": r.method,
                    "url": r.request_uri,
                    "body": _text(r.raw_body),
                },
            )
            handler(ctx, w, r)
            logger.info(
                "request finished",
                extra={
                    "status_code": w.status_code,
                    "body": _text(w.raw_body),
                    "duration_ms": int((time.monotonic() - start) * 1000),
                },
            )

        return logged

    return MiddlewareFunc(wrap)


@dataclass(frozen=True)
class _ResponseInfo:
    headers: dict[str, list[str]]
    body: bytes


def _form_value(form: Mapping[str, Any] | None, name: str) -> str:
    if not form:
        return ""
    value = form.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return value or ""


def _seconds(ttl: float | timedelta) -> float:
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


class CachedProxy(Middleware):
    """Caches successful responses keyed by method, URI and request body."""

    def __init__(self, size: int, ttl: float | timedelta):
        seconds = _seconds(ttl)
        self._cache: TTLCache = TTLCache(
            maxsize=size if size > 0 else math.inf,
            ttl=seconds if seconds > 0 else math.inf,
        )
        self._lock = threading.Lock()

    def proxy(self, handler: Handler) -> Handler:
        def cached_handler(ctx, w, r):
            if _form_value(r.form, "nocache"):
                handler(ctx, w, r)
                return

            key = self.cache_key(r)
            with self._lock:
                response = self._cache.get(key)

            if response is not None:
                get_logger(ctx).info("use cached response")
                w.write_header(int(HTTPStatus.OK))
                for name, values in response.headers.items():
                    w.headers.setdefault(name, []).extend(values)
                w.write(response.body)
                return

            handler(ctx, w, r)

            if w.status_code == HTTPStatus.OK:
                info = _ResponseInfo(
                    headers={name: list(values) for name, values in w.headers.items()},
                    body=bytes(w.raw_body),
                )
                with self._lock:
                    self._cache[key] = info

        return cached_handler

    def cache_key(self, request) -> bytes:
        """Return the cache key ``method|uri|body`` of ``request``."""
        return b"|".join(
            (request.method.encode(), request.request_uri.encode(), bytes(request.raw_body or b""))
        )


def cached(size: int, ttl: float | timedelta) -> CachedProxy:
    """Return a response-caching middleware holding at most ``size`` entries."""
    return CachedProxy(size, ttl)