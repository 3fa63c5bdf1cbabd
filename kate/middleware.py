"""Middleware abstraction and middleware chains.

A handler is a callable ``handler(ctx, writer, request)``; a middleware turns
one handler into another.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

Handler = Callable[[Any, Any, Any], None]


class Middleware(ABC):
    """Wraps a handler in extra behaviour."""

    @abstractmethod
    def proxy(self, handler: Handler) -> Handler:
        """Return a handler that wraps ``handler``."""


@dataclass(frozen=True)
class MiddlewareFunc(Middleware):
    """A middleware built from a plain ``handler -> handler`` function."""

    func: Callable[[Handler], Handler]

    def proxy(self, handler: Handler) -> Handler:
        return self.func(handler)


class Chain:
    """An ordered, immutable list of middlewares; the first one runs outermost."""

    def __init__(self, *args: Middleware):
        self._middlewares: tuple[Middleware, ...] = tuple(args)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    def then(self, handler: Handler) -> Handler:
        """Return ``handler`` wrapped by every middleware of the chain."""
        if handler is None:
            raise ValueError("handler is None")
        final = handler
        for middleware in reversed(self._middlewares):
            final = middleware.proxy(final)
        return final

    def then_func(self, func: Callable[[Any, Any, Any], None]) -> Handler:
        """Return the plain function ``func`` wrapped by the chain."""
        return self.then(func)

    def append(self, *args: Middleware) -> Chain:
        """Return a new chain with ``args`` added after the current middlewares."""
        return Chain(*self._middlewares, *args)