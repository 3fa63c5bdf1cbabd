"""Request-scoped context values and the logger carried in them."""

from __future__ import annotations

import logging
from typing import Any, Union

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]

_ROOT = object()


class Context:
    """An immutable chain of key/value pairs, each layer derived from a parent."""

    __slots__ = ("_parent", "_key", "_value")

    def __init__(self, parent: Context | None = None, key: Any = _ROOT, value: Any = None):
        self._parent = parent
        self._key = key
        self._value = value

    def with_value(self, key: Any, value: Any) -> Context:
        """Return a child context in which ``key`` maps to ``value``."""
        return Context(self, key, value)

    def value(self, key: Any) -> Any:
        """Return the innermost value stored under ``key``, or None."""
        node: Context | None = self
        while node is not None:
            if node._key is not _ROOT and node._key == key:
                return node._value
            node = node._parent
        return None


class _LoggerKey:
    """Marker type for the logger entry of a context."""


_LOGGER_KEY = _LoggerKey()


def _make_null_logger() -> logging.Logger:
    logger = logging.Logger("kate.null")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.disabled = True
    return logger


_NULL_LOGGER = _make_null_logger()


class _FieldLogger(logging.LoggerAdapter):
    """Logger adapter that attaches a fixed set of fields to every record."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def background() -> Context:
    """Return an empty root context."""
    return Context()


def get_logger(ctx: Context) -> LoggerLike:
    """Return the logger stored in ``ctx``, or a logger that discards everything."""
    logger = ctx.value(_LOGGER_KEY)
    if isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        return logger
    return _NULL_LOGGER


def to_context(ctx: Context, logger: LoggerLike) -> Context:
    """Return a child of ``ctx`` carrying ``logger``."""
    return ctx.with_value(_LOGGER_KEY, logger)


def with_fields(ctx: Context, **kwargs: Any) -> Context:
    """Return a child of ``ctx`` whose logger also records the given fields."""
    logger = get_logger(ctx)
    if isinstance(logger, _FieldLogger):
        base = logger.logger
        fields = {**logger.extra, **kwargs}
    else:
        base = logger
        fields = dict(kwargs)
    return to_context(ctx, _FieldLogger(base, fields))