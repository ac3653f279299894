"""Errors raised by Plyground.

All errors reach the caller synchronously from the call
that caused them, nothing is retried behind the scenes.

* :class:`InvalidColumn` when a query references a column
  that does not exist. The client detects it while building
  the query, the store reports it if it slipped through.
* :class:`RemoteExecutionError` when the store fails to plan
  or run a query, like a missing table or a type mismatch.
* :class:`ConnectionError` when the session is not available.
"""

import builtins

__all__ = (
    "PlygroundError",
    "InvalidColumn",
    "RemoteExecutionError",
    "ConnectionError",
    "TableExistsError",
    "DataLoadError",
)


class PlygroundError(Exception):
    """Base class for all Plyground errors."""


class InvalidColumn(PlygroundError, KeyError):
    """A referenced column does not exist in the upstream schema."""

    def __init__(self, column: str, available: list[str] | None = None) -> None:
        self.column = column
        self.available = list(available) if available is not None else None
        super().__init__(column)

    def __str__(self) -> str:
        message = f"Column {self.column!r} does not exist"
        if self.available is not None:
            message += f", available columns: {self.available}"
        return message


class RemoteExecutionError(PlygroundError):
    """The store failed to plan or execute a query.

    :param message: The message reported by the store.
    :param code: The error code reported by the store, if any.
    """

    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"
    INVALID_PLAN = "INVALID_PLAN"
    EXECUTION_ERROR = "EXECUTION_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConnectionError(PlygroundError, builtins.ConnectionError):
    """The session with the store is not available."""


class TableExistsError(PlygroundError):
    """A table with the same name is already registered."""


class DataLoadError(PlygroundError):
    """A local file could not be read into the store."""
