"""Column values stored as JSON text."""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from typing import Any


def _to_jsonable(obj: Any) -> Any:
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return json.loads(to_json())
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"value of type {type(obj).__name__} is not JSON serializable")


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    if isinstance(value, (bool, int, float, complex, str, bytes, list, tuple, dict, set, frozenset)):
        return not value
    return False


def _merge(template: Any, data: Any) -> Any:
    if dataclasses.is_dataclass(template) and not isinstance(template, type) and isinstance(data, dict):
        updates = {
            f.name: _merge(getattr(template, f.name), data[f.name])
            for f in dataclasses.fields(template)
            if f.init and f.name in data
        }
        return dataclasses.replace(template, **updates)
    from_json = getattr(template, "from_json", None)
    if callable(from_json) and isinstance(data, str):
        return from_json(json.dumps(data))
    return data


class JSONValue:
    """Wraps a value that is written to and read from a column as JSON."""

    def __init__(self, target: Any, omit_empty: bool = False):
        self.target = target
        self.omit_empty = omit_empty

    def value(self) -> str:
        """Return the JSON text to store; '' for an empty value when ``omit_empty``."""
        if self.omit_empty and _is_zero(self.target):
            return ""
        return json.dumps(
            self.target, default=_to_jsonable, ensure_ascii=False, separators=(",", ":")
        )

    def scan(self, raw: Any) -> Any:
        """Decode ``raw`` (str or bytes) into the target and return the new target.

        Empty input leaves the target unchanged. A dataclass target is filled
        field by field, keeping fields the JSON does not mention.
        """
        if isinstance(raw, (bytes, bytearray, memoryview)):
            raw = bytes(raw).decode("utf-8")
        elif not isinstance(raw, str):
            raise TypeError("invalid type for json raw data")
        if raw:
            self.target = _merge(self.target, json.loads(raw))
        return self.target

    def __repr__(self) -> str:
        return f"JSONValue({self.target!r}, omit_empty={self.omit_empty!r})"