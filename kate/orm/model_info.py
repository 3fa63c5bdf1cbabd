"""What the ORM knows about a registered model: its table and its fields."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable

from kate.orm.errors import MissingPKError, NoTableSuffixError
from kate.orm.fields import FieldInfo, Fields, new_field_info
from kate.orm.json_value import JSONValue
from kate.orm.models_utils import (
    DEFAULT_TAG_NAME,
    get_full_name,
    get_table_name,
    get_table_suffix,
    is_sharded,
)

EXPR_SEP = "__"


def quote(name: str) -> str:
    """Quote an identifier with backticks."""
    return f"`{name}`"


def quote_all(names: Iterable[str]) -> list[str]:
    """Quote every identifier of ``names``."""
    return [quote(name) for name in names]


class ModelInfo:
    """Table and field mapping of a dataclass model."""

    def __init__(self, model: Any):
        model_type = model if isinstance(model, type) else type(model)
        if not dataclasses.is_dataclass(model_type):
            raise TypeError(f"model must be a dataclass: {model_type!r}")
        self.model = model
        self.model_type = model_type
        self.name = model_type.__name__
        self.full_name = get_full_name(model_type)
        self.pkg = model_type.__module__
        self.db = ""
        self.table = get_table_name(model)
        self.sharded = is_sharded(model)
        self.fields = Fields()
        self._add_fields()

    def _add_fields(self) -> None:
        for f in dataclasses.fields(self.model_type):
            if f.name.startswith("_"):
                continue
            fi = new_field_info(self.full_name, f.name, f.metadata.get(DEFAULT_TAG_NAME, ""))
            if fi is None:
                continue
            fi.model_info = self
            where = f"field: {self.full_name}.{f.name}"
            if fi.json and f.metadata.get("dynamic"):
                if not callable(getattr(self.model_type, "new_dynamic_field", None)):
                    raise TypeError(
                        f"model must implement DynamicFielder interface: {self.full_name}"
                    )
                fi.dynamic = True
            if not self.fields.add(fi):
                raise ValueError(f"{where}, duplicate column name: {fi.column}")
            if fi.pk:
                if self.fields.pk is not None:
                    raise ValueError(f"{where}, one model must have one pk field only")
                self.fields.pk = fi
            if fi.auto:
                if self.fields.auto is not None:
                    raise ValueError(f"{where}, one model must have one auto field only")
                self.fields.auto = fi

    def set_auto_field(self, obj: Any, value: int) -> None:
        """Store an auto-generated id in the model's auto field, if it has one."""
        if self.fields.auto is not None:
            setattr(obj, self.fields.auto.name, int(value))

    def get_existing_pk(self, obj: Any) -> tuple[str, Any]:
        """Return the primary key column and value; raise MissingPKError if unset."""
        fi = self.fields.pk
        if fi is None:
            raise MissingPKError()
        value = getattr(obj, fi.name)
        if value is None:
            raise MissingPKError()
        return fi.column, value

    def get_table(self, obj: Any) -> str:
        """Return the table of ``obj``, with its shard suffix when sharded."""
        if not self.sharded:
            return self.table
        suffix = get_table_suffix(obj)
        if not suffix:
            raise NoTableSuffixError(self.table)
        return f"{self.table}_{suffix}"

    def get_table_by_suffix(self, suffix: str) -> str:
        """Return the table for the shard ``suffix``; '' means the base table."""
        if not suffix:
            return self.table
        if not self.sharded:
            raise ValueError(f"model not sharded: {self.full_name}")
        return f"{self.table}_{suffix}"

    def _lookup(self, any_name: str) -> FieldInfo:
        fi = self.fields.get_by_any(any_name)
        if fi is None:
            raise ValueError(
                f"wrong db field/column name `{any_name}` for model `{self.full_name}`"
            )
        return fi

    def get_field_info(self, any_name: str) -> FieldInfo:
        """Return the field known by name, lower-cased name or column."""
        return self._lookup(any_name)

    def get_columns(self, any_names: Iterable[str]) -> list[str]:
        """Return the columns of the named fields."""
        return [self._lookup(name).column for name in any_names]

    def get_values(self, obj: Any, any_names: Iterable[str]) -> list[Any]:
        """Return the values of the named fields of ``obj``; json fields come wrapped."""
        values = []
        for name in any_names:
            fi = self._lookup(name)
            value = getattr(obj, fi.name)
            if fi.json:
                value = JSONValue(value, fi.json_omit_empty)
            values.append(value)
        return values

    def parse_exprs(self, exprs: list[str]) -> tuple[FieldInfo, str] | None:
        """Resolve ``[field, operator]``; the operator defaults to ``exact``."""
        if not exprs:
            return None
        fi = self.fields.get_by_any(exprs[0])
        if fi is None:
            return None
        operator = exprs[1] if len(exprs) > 1 else "exact"
        return fi, operator

    def _resolve(self, expr: str) -> FieldInfo:
        exprs = expr.split(EXPR_SEP)
        parsed = self.parse_exprs(exprs)
        if parsed is None:
            raise ValueError(f"unknown field/column name `{EXPR_SEP.join(exprs)}`")
        return parsed[0]

    def get_order_by_cols(self, orders: Iterable[str]) -> list[str]:
        """Build ORDER BY terms; a leading ``-`` sorts descending, ``+`` ascending."""
        cols = []
        for order in orders:
            direction = "ASC"
            if order.startswith("-"):
                direction = "DESC"
                order = order[1:]
            elif order.startswith("+"):
                order = order[1:]
            cols.append(f"{quote(self._resolve(order).column)} {direction}")
        return cols

    def get_group_cols(self, groups: Iterable[str]) -> list[str]:
        """Build the quoted GROUP BY columns."""
        return [quote(self._resolve(group).column) for group in groups]