"""Single-line log formatter: level, time, pid, thread, message, JSON fields, caller.

A formatted record looks like::

    INFO   2024-01-02T15:04:05.123+0800 [4242][00007]\tmessage\t{"key":"value"}\t[pkg/mod.py:12]
"""

from __future__ import annotations

import base64
import dataclasses
import logging
import math
import numbers
import os
import time
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Mapping

_HEX = "0123456789abcdef"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_LEVEL_NAMES = {
    logging.WARNING: "WARN",
    logging.CRITICAL: "FATAL",
}

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def _escape_char(ch: str) -> str:
    code = ord(ch)
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    if code < 0x20:
        return "\\u00" + _HEX[code >> 4] + _HEX[code & 0xF]
    if 0xD800 <= code <= 0xDFFF:
        # Lone surrogates, including bytes that were not valid UTF-8.
        return "\\ufffd"
    return ch


def quote_string(value: str | bytes) -> str:
    """Return ``value`` as a quoted, JSON-escaped string.

    Non-ASCII text is kept as is; every byte that is not valid UTF-8 becomes
    ``\\ufffd``.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8", "surrogateescape")
    return '"' + "".join(_escape_char(ch) for ch in value) + '"'


def _format_float(value: float) -> str:
    if math.isnan(value):
        return '"NaN"'
    if math.isinf(value):
        return '"+Inf"' if value > 0 else '"-Inf"'
    return _plain_float(value)


def _plain_float(value: float) -> str:
    """Shortest round-tripping decimal form, without an exponent."""
    return format(Decimal(repr(float(value))).normalize(), "f")


def _zone(offset_seconds: int) -> str:
    if offset_seconds == 0:
        return "Z"
    sign = "+" if offset_seconds > 0 else "-"
    minutes = abs(offset_seconds) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def _format_datetime(value: datetime) -> str:
    aware = value.astimezone() if value.tzinfo is None else value
    offset = aware.utcoffset() or timedelta(0)
    millis = aware.microsecond // 1000
    return (
        aware.strftime("%Y-%m-%dT%H:%M:%S")
        + f".{millis:03d}"
        + _zone(int(offset.total_seconds()))
    )


def _sort_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def encode_value(value: Any) -> str:
    """Encode a field value as JSON text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, complex):
        return f'"{_plain_float(value.real)}+{_plain_float(value.imag)}i"'
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return quote_string(base64.b64encode(bytes(value)).decode("ascii"))
    if isinstance(value, timedelta):
        return str(value // timedelta(microseconds=1) * 1000)
    if isinstance(value, datetime):
        return quote_string(_format_datetime(value))
    if isinstance(value, date):
        return quote_string(value.isoformat())
    if isinstance(value, BaseException):
        return quote_string(str(value))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return encode_value(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda item: _sort_key(item[0]))
        body = ",".join(
            f"{quote_string(_sort_key(k))}:{encode_value(v)}" for k, v in items
        )
        return "{" + body + "}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ",".join(encode_value(item) for item in value) + "]"
    if isinstance(value, numbers.Real):
        return _format_float(float(value))
    return quote_string(str(value))


def _caller(record: logging.LogRecord) -> str:
    path = record.pathname or ""
    parent = os.path.basename(os.path.dirname(path))
    name = os.path.basename(path)
    trimmed = f"{parent}/{name}" if parent else name
    return f"{trimmed}:{record.lineno}"


class SimpleFormatter(logging.Formatter):
    """Formats records as tab-separated lines with the extra fields as a JSON object.

    The time is rendered in local time; set ``converter`` to ``time.gmtime``
    for UTC.
    """

    def _record_time(self, record: logging.LogRecord) -> str:
        t = self.converter(record.created)
        offset = getattr(t, "tm_gmtoff", None) or 0
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", t)
            + f".{int(record.msecs):03d}"
            + _zone(int(offset))
        )

    def _fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            fields["stack"] = record.exc_text
        elif record.stack_info:
            fields["stack"] = self.formatStack(record.stack_info)
        return fields

    def format(self, record: logging.LogRecord) -> str:
        level = _LEVEL_NAMES.get(record.levelno, record.levelname)
        body = ",".join(
            f"{quote_string(key)}:{encode_value(value)}"
            for key, value in self._fields(record).items()
        )
        return (
            f"{level:<6} "
            f"{self._record_time(record)} "
            f"[{record.process}][{record.thread or 0:05d}]\t"
            f"{record.getMessage()}\t"
            f"{{{body}}}\t"
            f"[{_caller(record)}]"
        )