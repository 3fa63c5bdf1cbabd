"""Update parameters and column arithmetic such as ``age = age - 1``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List

Params = Dict[str, Any]
ParamsList = List[Any]

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ColOp(IntEnum):
    """Arithmetic applied to a column's current value."""

    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3


@dataclass(frozen=True)
class ColValue:
    """An update that applies ``op`` with ``value`` to the column's own value."""

    value: int
    op: ColOp


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", "replace")
    return str(value)


def col_value(op: ColOp, value: Any) -> ColValue:
    """Build a column operation; ``value`` must read as a 64-bit integer."""
    if not isinstance(op, ColOp):
        raise ValueError("orm.ColValue wrong operator")
    text = _to_str(value)
    try:
        number = int(text, 10)
    except ValueError as exc:
        raise ValueError(
            f"orm.ColValue doesn't support non string/numeric type, {exc}"
        ) from exc
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"orm.ColValue doesn't support non string/numeric type, {text!r} out of range")
    return ColValue(value=number, op=op)