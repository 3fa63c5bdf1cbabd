"""Second-precision date-time and calendar-date values with a fixed text form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

_DATETIME_LAYOUT = "%Y-%m-%d %H:%M:%S"
_DATETIME_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")
_DATE_LAYOUT = "%Y-%m-%d"
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _unquote(data: str | bytes, type_name: str) -> str | None:
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    if data == "null":
        return None
    if len(data) < 2 or data[0] != '"' or data[-1] != '"':
        raise ValueError(f"{type_name}.from_json: input is not a JSON string")
    return data[1:-1]


@dataclass(frozen=True, order=True)
class DateTime:
    """A date-time truncated to whole seconds, written as ``YYYY-MM-DD HH:MM:SS``."""

    value: datetime

    @classmethod
    def now(cls) -> DateTime:
        """Return the current local time, truncated to the second."""
        return cls.from_datetime(datetime.now())

    @classmethod
    def from_datetime(cls, value: datetime) -> DateTime:
        """Wrap ``value`` with its sub-second part dropped."""
        return cls(value.replace(microsecond=0))

    @classmethod
    def parse(cls, value: str) -> DateTime:
        """Parse ``YYYY-MM-DD HH:MM:SS``; raise ValueError on anything else."""
        if not _DATETIME_RE.fullmatch(value):
            raise ValueError(f"invalid date-time {value!r}, want YYYY-MM-DD HH:MM:SS")
        return cls(datetime.strptime(value, _DATETIME_LAYOUT))

    @classmethod
    def scan(cls, src: object) -> DateTime:
        """Build a value from a database column, which must be a datetime."""
        if isinstance(src, datetime):
            return cls.from_datetime(src)
        raise TypeError("invalid value, must be datetime")

    def __str__(self) -> str:
        return self.value.strftime(_DATETIME_LAYOUT)

    def __conform__(self, protocol: object) -> str:
        return str(self)

    def to_json(self) -> str:
        """Return the value as a JSON string literal."""
        return f'"{self}"'

    @classmethod
    def from_json(cls, data: str | bytes) -> DateTime | None:
        """Parse a JSON string literal; ``null`` gives None."""
        text = _unquote(data, "DateTime")
        if text is None:
            return None
        return cls.parse(text)

    def sub(self, other: DateTime) -> timedelta:
        """Return the time elapsed from ``other`` to this value."""
        return self.value - other.value


def _add_date(value: date, years: int, months: int, days: int) -> date:
    total = value.year * 12 + (value.month - 1) + years * 12 + months
    year, month = divmod(total, 12)
    return date(year, month + 1, 1) + timedelta(days=value.day - 1 + days)


@dataclass(frozen=True, order=True)
class Date:
    """A calendar date, written as ``YYYY-MM-DD``.

    Month and year steps overflow into the following month the way day
    arithmetic does: January 31 plus one month is early March.
    """

    value: date

    @classmethod
    def today(cls) -> Date:
        """Return today's local date."""
        return cls(date.today())

    @classmethod
    def from_datetime(cls, value: date) -> Date:
        """Return the date part of a datetime (or a copy of a date)."""
        return cls(date(value.year, value.month, value.day))

    @classmethod
    def parse(cls, value: str) -> Date:
        """Parse ``YYYY-MM-DD``; raise ValueError on anything else."""
        if not _DATE_RE.fullmatch(value):
            raise ValueError(f"invalid date {value!r}, want YYYY-MM-DD")
        return cls(datetime.strptime(value, _DATE_LAYOUT).date())

    @classmethod
    def scan(cls, src: object) -> Date:
        """Build a value from a database column, which must be a date or datetime."""
        if isinstance(src, date):
            return cls.from_datetime(src)
        raise TypeError("invalid value, must be datetime")

    def next_day(self, days: int) -> Date:
        return Date(_add_date(self.value, 0, 0, days))

    def prev_day(self, days: int) -> Date:
        return self.next_day(-days)

    def next_month(self, months: int) -> Date:
        return Date(_add_date(self.value, 0, months, 0))

    def prev_month(self, months: int) -> Date:
        return self.next_month(-months)

    def next_year(self, years: int) -> Date:
        return Date(_add_date(self.value, years, 0, 0))

    def prev_year(self, years: int) -> Date:
        return self.next_year(-years)

    def __str__(self) -> str:
        return self.value.strftime(_DATE_LAYOUT)

    def __conform__(self, protocol: object) -> str:
        return str(self)

    def to_json(self) -> str:
        """Return the value as a JSON string literal."""
        return f'"{self}"'

    @classmethod
    def from_json(cls, data: str | bytes) -> Date | None:
        """Parse a JSON string literal; ``null`` gives None."""
        text = _unquote(data, "Date")
        if text is None:
            return None
        return cls.parse(text)

    def sub(self, other: Date) -> timedelta:
        """Return the time elapsed from ``other`` to this date."""
        return self.value - other.value