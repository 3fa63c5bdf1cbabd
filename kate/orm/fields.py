"""Per-field ORM information and the field collection of a model.

A model is a dataclass; each field's ``orm`` metadata holds its tag, e.g.
``field(default=None, metadata={"orm": "pk;column(id)"})``. A json field
whose metadata also sets ``"dynamic": True`` has its content type chosen at
read time by the model's ``new_dynamic_field(field_name)`` method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kate.orm.models_utils import get_column_name, parse_struct_tag


@dataclass(eq=False)
class FieldInfo:
    """How one model field maps to a table column."""

    name: str
    full_name: str
    column: str
    pk: bool = False
    auto: bool = False
    json: bool = False
    json_omit_empty: bool = False
    dynamic: bool = False
    model_info: Any = field(default=None, repr=False)


def new_field_info(model_name: str, name: str, tag: str) -> FieldInfo | None:
    """Build the field info from an ``orm`` tag; None when the tag says ``-`` (skip)."""
    attrs, tags = parse_struct_tag(model_name, tag)
    if "-" in attrs:
        return None
    return FieldInfo(
        name=name,
        full_name=f"{model_name}.{name}",
        column=get_column_name(name, tags.get("column", "")),
        pk=attrs.get("pk", False),
        auto=attrs.get("auto", False),
        json=attrs.get("json", False),
        json_omit_empty=tags.get("json") == "omitempty",
    )


class Fields:
    """The fields of a model, looked up by name, lower-cased name or column."""

    def __init__(self):
        self.pk: FieldInfo | None = None
        self.auto: FieldInfo | None = None
        self.columns: dict[str, FieldInfo] = {}
        self.fields: dict[str, FieldInfo] = {}
        self.fields_low: dict[str, FieldInfo] = {}
        self.fields_db: list[FieldInfo] = []
        self.orders: list[str] = []
        self.dbcols: list[str] = []

    def add(self, fi: FieldInfo) -> bool:
        """Add ``fi``; False when its name or column is already taken."""
        if fi.name in self.fields or fi.column in self.columns:
            return False
        self.columns[fi.column] = fi
        self.fields[fi.name] = fi
        self.fields_low[fi.name.lower()] = fi
        self.orders.append(fi.column)
        self.dbcols.append(fi.column)
        self.fields_db.append(fi)
        return True

    def get_by_name(self, name: str) -> FieldInfo | None:
        return self.fields.get(name)

    def get_by_column(self, column: str) -> FieldInfo | None:
        return self.columns.get(column)

    def get_by_any(self, name: str) -> FieldInfo | None:
        """Look ``name`` up as a field name, then case-insensitively, then as a column."""
        for table, key in (
            (self.fields, name),
            (self.fields_low, name.lower()),
            (self.columns, name),
        ):
            fi = table.get(key)
            if fi is not None:
                return fi
        return None

    def __len__(self) -> int:
        return len(self.fields_db)

    def __iter__(self):
        return iter(self.fields_db)