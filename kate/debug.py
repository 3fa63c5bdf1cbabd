"""Per-request debug flag stored in a context."""

from __future__ import annotations

from kate.log.context import Context


class _DebugKey:
    """Marker type for the debug flag of a context."""


_DEBUG_KEY = _DebugKey()


def get(ctx: Context) -> bool:
    """Return the debug flag of ``ctx``; False when none was set."""
    enabled = ctx.value(_DEBUG_KEY)
    if isinstance(enabled, bool):
        return enabled
    return False


def wrap(ctx: Context, enabled: bool) -> Context:
    """Return a child of ``ctx`` with the debug flag set to ``enabled``."""
    return ctx.with_value(_DEBUG_KEY, enabled)