"""Reducers computed by ``summarise``.

Each reducer collapses the rows of a group into
a single value. They are meant to be used as keyword
arguments of :meth:`plyground.LazyFrame.summarise`, the
keyword becoming the name of the output column::

    flights.group_by("carrier").summarise(
        flights=n(), delay=mean("dep_delay")
    )

The functions in this module deliberately mirror the
names used by dplyr, so ``sum``, ``min`` and ``max``
shadow the builtins when imported with a star import.
"""

from dataclasses import dataclass

from .expressions import Column

__all__ = ("Reducer", "n", "count", "sum", "mean", "min", "max")

REDUCER_FUNCTIONS = ("n", "count", "sum", "mean", "min", "max")


@dataclass(frozen=True)
class Reducer:
    """A function collapsing a column (or the rows for ``n``) to one value."""

    func: str
    column: str | None = None

    def __post_init__(self) -> None:
        if self.func not in REDUCER_FUNCTIONS:
            raise ValueError(f"Unsupported reducer: {self.func}")
        if (self.func == "n") != (self.column is None):
            raise ValueError(f"Reducer {self.func} requires exactly one column")

    def to_dict(self) -> dict:
        return {"func": self.func, "column": self.column}

    def __str__(self) -> str:
        return f"{self.func}({self.column or ''})"


def _column_name(column: str | Column) -> str:
    if isinstance(column, Column):
        return column.name
    if isinstance(column, str):
        return column
    raise TypeError(f"Reducers accept a column name or col(), got {column!r}")


def n() -> Reducer:
    """Number of rows in the group."""
    return Reducer("n")


def count(column: str | Column) -> Reducer:
    """Number of non null values of the column."""
    return Reducer("count", _column_name(column))


def sum(column: str | Column) -> Reducer:
    return Reducer("sum", _column_name(column))


def mean(column: str | Column) -> Reducer:
    """Average of the non null values, null when there are none."""
    return Reducer("mean", _column_name(column))


def min(column: str | Column) -> Reducer:
    return Reducer("min", _column_name(column))


def max(column: str | Column) -> Reducer:
    return Reducer("max", _column_name(column))
