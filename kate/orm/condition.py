"""WHERE conditions built from ``field__operator`` expressions.

Placeholders and arguments come from a SQL condition builder passed to
:meth:`Condition.get_where_sql`; it offers ``eq``, ``ne``, ``lt``, ``le``,
``gt``, ``ge``, ``in_``, ``between``, ``like``, ``like_binary``, ``is_null``
and ``is_not_null``, each returning a SQL fragment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from kate.orm.model_info import EXPR_SEP, ModelInfo, quote


class _SQLCond(Protocol):
    def eq(self, field: str, value: Any) -> str: ...
    def ne(self, field: str, value: Any) -> str: ...
    def lt(self, field: str, value: Any) -> str: ...
    def le(self, field: str, value: Any) -> str: ...
    def gt(self, field: str, value: Any) -> str: ...
    def ge(self, field: str, value: Any) -> str: ...
    def in_(self, field: str, *values: Any) -> str: ...
    def between(self, field: str, lower: Any, upper: Any) -> str: ...
    def like(self, field: str, value: Any) -> str: ...
    def like_binary(self, field: str, value: Any) -> str: ...
    def is_null(self, field: str) -> str: ...
    def is_not_null(self, field: str) -> str: ...


_COMPARISONS = {
    "lt": "lt",
    "lte": "le",
    "gt": "gt",
    "gte": "ge",
    "exact": "eq",
    "eq": "eq",
    "ne": "ne",
}

# operator -> (pattern template, case sensitive)
_LIKES = {
    "iexact": ("{}", False),
    "contains": ("%{}%", True),
    "icontains": ("%{}%", False),
    "startswith": ("{}%", True),
    "istartswith": ("{}%", False),
    "endswith": ("%{}", True),
    "iendswith": ("%{}", False),
}


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", "replace")
    return str(value)


def _flat_args(arg: Any) -> list[Any]:
    if isinstance(arg, (str, bytes, bytearray)) or not isinstance(
        arg, (list, tuple, set, frozenset)
    ):
        return [arg]
    return [item for item in arg if item is not None]


@dataclass(frozen=True)
class _CondValue:
    exprs: tuple[str, ...] = ()
    args: tuple[Any, ...] = ()
    cond: Condition | None = None
    is_or: bool = False
    is_not: bool = False


@dataclass(frozen=True)
class Condition:
    """An immutable WHERE condition; every combinator returns a new one."""

    params: tuple[_CondValue, ...] = ()

    def _with(self, value: _CondValue) -> Condition:
        return Condition(self.params + (value,))

    def _expr(self, name: str, expr: str, args: tuple, is_or: bool, is_not: bool) -> Condition:
        if not expr or not args:
            raise ValueError(f"<Condition.{name}> args cannot empty")
        return self._with(
            _CondValue(exprs=tuple(expr.split(EXPR_SEP)), args=args, is_or=is_or, is_not=is_not)
        )

    def _sub(self, name: str, cond: Condition | None, is_or: bool, is_not: bool) -> Condition:
        if cond is self:
            raise ValueError(f"<Condition.{name}> cannot use self as sub cond")
        if cond is None:
            return Condition(self.params)
        return self._with(_CondValue(cond=cond, is_or=is_or, is_not=is_not))

    def and_(self, expr: str, *args: Any) -> Condition:
        """Add ``AND expr``."""
        return self._expr("And", expr, args, False, False)

    def and_not(self, expr: str, *args: Any) -> Condition:
        """Add ``AND NOT expr``."""
        return self._expr("AndNot", expr, args, False, True)

    def and_cond(self, cond: Condition | None) -> Condition:
        """Add ``AND (cond)``."""
        return self._sub("AndCond", cond, False, False)

    def and_not_cond(self, cond: Condition | None) -> Condition:
        """Add ``AND NOT (cond)``."""
        return self._sub("AndNotCond", cond, False, True)

    def or_(self, expr: str, *args: Any) -> Condition:
        """Add ``OR expr``."""
        return self._expr("Or", expr, args, True, False)

    def or_not(self, expr: str, *args: Any) -> Condition:
        """Add ``OR NOT expr``."""
        return self._expr("OrNot", expr, args, True, True)

    def or_cond(self, cond: Condition | None) -> Condition:
        """Add ``OR (cond)``."""
        return self._sub("OrCond", cond, True, False)

    def or_not_cond(self, cond: Condition | None) -> Condition:
        """Add ``OR NOT (cond)``."""
        return self._sub("OrNotCond", cond, True, True)

    def is_empty(self) -> bool:
        """Say whether the condition holds no expression."""
        return not self.params

    def get_where_sql(self, mi: ModelInfo, cond: _SQLCond) -> str:
        """Render the condition against model ``mi``, collecting arguments in ``cond``."""
        parts: list[str] = []
        for i, p in enumerate(self.params):
            if i > 0:
                parts.append(" OR " if p.is_or else " AND ")
            if p.is_not:
                parts.append("NOT ")
            if p.cond is not None:
                sql = p.cond.get_where_sql(mi, cond)
                if sql:
                    parts.append(f"({sql})")
                continue
            parsed = mi.parse_exprs(list(p.exprs))
            if parsed is None:
                raise ValueError(f"unknown field/column name `{EXPR_SEP.join(p.exprs)}`")
            fi, operator = parsed
            parts.append(_operator_sql(quote(fi.column), operator, list(p.args), cond))
        return "".join(parts)


def _operator_sql(column: str, operator: str, args: list[Any], cond: _SQLCond) -> str:
    if not args:
        raise ValueError(f"operator `{operator}` need at least one args")

    if operator == "in":
        if len(args) == 1:
            args = _flat_args(args[0])
        return cond.in_(column, *args)

    if operator == "between":
        if len(args) != 2:
            raise ValueError(f"operator `{operator}` need 2 args not {len(args)}")
        return cond.between(column, args[0], args[1])

    if operator not in _COMPARISONS and operator not in _LIKES and operator != "isnull":
        raise ValueError(f"operator `{operator}` unknown")

    if len(args) > 1:
        raise ValueError(f"operator `{operator}` need 1 args not {len(args)}")
    arg = args[0]

    if operator in _COMPARISONS:
        return getattr(cond, _COMPARISONS[operator])(column, arg)

    if operator in _LIKES:
        template, binary = _LIKES[operator]
        param = template.format(_to_str(arg).replace("%", "\\%"))
        return cond.like_binary(column, param) if binary else cond.like(column, param)

    if not isinstance(arg, bool):
        raise TypeError(f"operator `{operator}` need a bool value not `{type(arg).__name__}`")
    return cond.is_null(column) if arg else cond.is_not_null(column)