"""Errors raised by the ORM layer."""

from __future__ import annotations


class OrmError(Exception):
    """Base class of every ORM error."""

    default_message = "orm error"

    def __init__(self, message: str | None = None):
        super().__init__(message if message is not None else self.default_message)


class MissingPKError(OrmError):
    """The model has no primary key value."""

    default_message = "missed pk value"


class TxHasBeganError(OrmError):
    """A transaction was started while one is already running."""

    default_message = "<Ormer.Begin> transaction already begin"


class TxDoneError(OrmError):
    """Commit or rollback without a running transaction."""

    default_message = "<Ormer.Commit/Rollback> transaction not begin"


class MultiRowsError(OrmError):
    """A query expected to return one row returned several."""

    default_message = "<QuerySeter> return multi rows"


class NoRowsError(OrmError):
    """A query returned no row."""

    default_message = "<QuerySeter> no row found"


class StmtClosedError(OrmError):
    """A prepared statement was used after it was closed."""

    default_message = "<QuerySeter> stmt already closed"


class TableSuffixMismatchError(OrmError):
    """The models of a batch insert go to different table shards."""

    default_message = "<Ormer> table suffix not same in batch insert"


class NoTableSuffixError(OrmError):
    """A sharded model gave no table suffix."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"table {table} is sharded but no suffix provided")