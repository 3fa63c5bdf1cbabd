"""Helpers for model names, table names and ``orm`` field tags."""

from __future__ import annotations

import inspect
import logging
from typing import Any

TAG_TYPE_NO_ARGS = 1
TAG_TYPE_WITH_ARGS = 2
TAG_TYPE_OPTIONAL_ARGS = 3

DEFAULT_TAG_NAME = "orm"
DEFAULT_TAG_DELIM = ";"

SUPPORT_TAG = {
    "-": TAG_TYPE_NO_ARGS,
    "pk": TAG_TYPE_NO_ARGS,
    "auto": TAG_TYPE_NO_ARGS,
    "json": TAG_TYPE_OPTIONAL_ARGS,
    "column": TAG_TYPE_WITH_ARGS,
}

_log = logging.getLogger("kate.orm")


def snake_string(name: str) -> str:
    """Turn ``CamelCase`` into ``camel_case``."""
    out = []
    seen = False
    for i, ch in enumerate(name):
        if i > 0 and "A" <= ch <= "Z" and seen:
            out.append("_")
        if ch != "_":
            seen = True
        out.append(ch)
    return "".join(out).lower()


def _type_of(model: Any) -> type:
    return model if isinstance(model, type) else type(model)


def get_full_name(model_type: Any) -> str:
    """Return ``module.QualifiedName`` of a model class or instance."""
    typ = _type_of(model_type)
    return f"{typ.__module__}.{typ.__qualname__}"


def _call_hook(model: Any, name: str) -> str | None:
    hook = getattr(model, name, None)
    if not callable(hook):
        return None
    if isinstance(model, type) and inspect.isfunction(hook):
        try:
            hook = getattr(model(), name)
        except TypeError:
            return None
    result = hook()
    return result if isinstance(result, str) else None


def get_table_name(model: Any) -> str:
    """Return the table of a model: its ``table_name()`` or its snake-cased class name."""
    table = _call_hook(model, "table_name")
    if table is not None:
        return table
    return snake_string(_type_of(model).__name__)


def is_sharded(model: Any) -> bool:
    """Say whether the model defines ``table_suffix()``."""
    return callable(getattr(model, "table_suffix", None))


def get_table_suffix(model: Any) -> str:
    """Return the model's ``table_suffix()``, or '' when it has none."""
    return _call_hook(model, "table_suffix") or ""


def get_column_name(field_name: str, column: str) -> str:
    """Return ``column`` when given, else the snake-cased field name."""
    return column if column else snake_string(field_name)


def parse_struct_tag(model_name: str, data: str) -> tuple[dict[str, bool], dict[str, str]]:
    """Parse an ``orm`` tag such as ``pk;column(id)`` into attributes and tags.

    Parsing stops at the first invalid part, which is logged; what was read
    before it is kept.
    """
    attrs: dict[str, bool] = {}
    tags: dict[str, str] = {}
    for part in data.split(DEFAULT_TAG_DELIM):
        if part == "":
            continue
        part = part.strip()
        tag = ""
        args = ""
        i = part.find("(")
        if i < 0:
            tag = part
        elif i > 0 and part.find(")") == len(part) - 1:
            tag = part[:i]
            args = part[i + 1 : -1]

        tag_type = SUPPORT_TAG.get(tag)
        if tag_type is None:
            _log.error("unsupport orm tag", extra={"model": model_name, "tag": part})
            return attrs, tags

        if tag_type == TAG_TYPE_NO_ARGS:
            if args:
                _log.error("tag not support argument", extra={"model": model_name, "tag": tag})
                return attrs, tags
            attrs[tag] = True
        elif tag_type == TAG_TYPE_WITH_ARGS:
            if not args:
                _log.error("tag missing argument", extra={"model": model_name, "tag": tag})
                return attrs, tags
            tags[tag] = args
        else:
            attrs[tag] = True
            if args:
                tags[tag] = args
    return attrs, tags