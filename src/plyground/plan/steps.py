"""The steps a lazy query plan is made of.

A plan is a chain of steps, each step owns the step
it is applied to (its ``child``) and the chain always ends
with a :class:`Source` step reading a table of the store.

Steps are frozen: adding a step to a plan creates a new
plan that shares, without modifying it, the previous one.

Every step knows the names of the columns it produces,
which allows the client to reject references to columns
that don't exist before anything is sent to the store.

>>> from plyground.plan import col
>>> plan = Limit(Filter(Source("flights", ("carrier", "dep_delay")), col("dep_delay") > 1000), 5)
>>> print(plan.explain())
Limit(5)
  Filter((dep_delay > 1000))
    Source(flights)
>>> plan.columns
('carrier', 'dep_delay')
"""

from dataclasses import dataclass
from typing import Any

from .expressions import Column, Expr
from .reducers import Reducer

__all__ = (
    "PlanStep",
    "SortKey",
    "Source",
    "Select",
    "Mutate",
    "Rename",
    "Filter",
    "Arrange",
    "Aggregate",
    "Limit",
    "asc",
    "desc",
)


@dataclass(frozen=True)
class SortKey:
    """A column to sort by and the direction of the sorting."""

    column: str
    descending: bool = False

    def to_dict(self) -> dict:
        return {"column": self.column, "descending": self.descending}

    def __str__(self) -> str:
        return f"desc({self.column})" if self.descending else self.column


def asc(column: str | Column) -> SortKey:
    """Sort by the column in ascending order."""
    return SortKey(column.name if isinstance(column, Column) else column)


def desc(column: str | Column) -> SortKey:
    """Sort by the column in descending order."""
    return SortKey(column.name if isinstance(column, Column) else column, True)


class PlanStep:
    """Base class of the steps of a plan."""

    kind: str = ""
    child: "PlanStep | None"

    @property
    def columns(self) -> tuple[str, ...]:
        """Names of the columns produced by the step, in order."""
        return self.child.columns

    @property
    def source(self) -> "Source":
        """The source step at the bottom of the chain."""
        step = self
        while step.child is not None:
            step = step.child
        return step

    def params(self) -> dict[str, Any]:
        """The step specific part of the serialized plan."""
        return {}

    def describe(self) -> str:
        """One line human readable description of the step."""
        raise NotImplementedError

    def to_dict(self) -> dict:
        """Serialize the whole plan into the request format of the store."""
        request = {"type": self.kind, **self.params()}
        if self.child is not None:
            request["child"] = self.child.to_dict()
        return request

    def explain(self) -> str:
        """Describe the whole plan, one step per line, the last step first."""
        lines = []
        step, depth = self, 0
        while step is not None:
            lines.append("  " * depth + step.describe())
            step, depth = step.child, depth + 1
        return "\n".join(lines)


@dataclass(frozen=True, eq=False)
class Source(PlanStep):
    """Read all rows of a table registered in the store."""

    table: str
    schema: tuple[str, ...]

    kind = "source"
    child = None

    @property
    def columns(self) -> tuple[str, ...]:
        return self.schema

    def params(self) -> dict[str, Any]:
        return {"table": self.table}

    def describe(self) -> str:
        return f"Source({self.table})"


@dataclass(frozen=True, eq=False)
class Select(PlanStep):
    """Keep only the named columns, in the given order."""

    child: PlanStep
    names: tuple[str, ...]

    kind = "select"

    @property
    def columns(self) -> tuple[str, ...]:
        return self.names

    def params(self) -> dict[str, Any]:
        return {"columns": list(self.names)}

    def describe(self) -> str:
        return f"Select({', '.join(self.names)})"


@dataclass(frozen=True, eq=False)
class Mutate(PlanStep):
    """Add (or replace) columns computed from expressions.

    Expressions are evaluated in order, so each one can
    reference the columns computed before it.
    """

    child: PlanStep
    exprs: tuple[tuple[str, Expr], ...]

    kind = "mutate"

    @property
    def columns(self) -> tuple[str, ...]:
        columns = list(self.child.columns)
        for name, _ in self.exprs:
            if name not in columns:
                columns.append(name)
        return tuple(columns)

    def params(self) -> dict[str, Any]:
        return {"columns": {name: expr.to_dict() for name, expr in self.exprs}}

    def describe(self) -> str:
        return f"Mutate({', '.join(f'{name} = {expr}' for name, expr in self.exprs)})"


@dataclass(frozen=True, eq=False)
class Rename(PlanStep):
    """Give columns a new name, ``mapping`` holds (old, new) pairs."""

    child: PlanStep
    mapping: tuple[tuple[str, str], ...]

    kind = "rename"

    @property
    def columns(self) -> tuple[str, ...]:
        renames = dict(self.mapping)
        return tuple(renames.get(name, name) for name in self.child.columns)

    def params(self) -> dict[str, Any]:
        return {"columns": dict(self.mapping)}

    def describe(self) -> str:
        return f"Rename({', '.join(f'{new} = {old}' for old, new in self.mapping)})"


@dataclass(frozen=True, eq=False)
class Filter(PlanStep):
    """Keep only the rows for which the predicate is true."""

    child: PlanStep
    predicate: Expr

    kind = "filter"

    def params(self) -> dict[str, Any]:
        return {"predicate": self.predicate.to_dict()}

    def describe(self) -> str:
        return f"Filter({self.predicate})"


@dataclass(frozen=True, eq=False)
class Arrange(PlanStep):
    """Order the rows by the sort keys."""

    child: PlanStep
    keys: tuple[SortKey, ...]

    kind = "arrange"

    def params(self) -> dict[str, Any]:
        return {"keys": [key.to_dict() for key in self.keys]}

    def describe(self) -> str:
        return f"Arrange({', '.join(map(str, self.keys))})"


@dataclass(frozen=True, eq=False)
class Aggregate(PlanStep):
    """Group rows by ``keys`` and reduce each group to one row.

    With no keys the whole table is one group.
    """

    child: PlanStep
    keys: tuple[str, ...]
    reducers: tuple[tuple[str, Reducer], ...]

    kind = "aggregate"

    @property
    def columns(self) -> tuple[str, ...]:
        return self.keys + tuple(name for name, _ in self.reducers)

    def params(self) -> dict[str, Any]:
        return {
            "keys": list(self.keys),
            "reducers": {name: reducer.to_dict() for name, reducer in self.reducers},
        }

    def describe(self) -> str:
        reducers = ", ".join(f"{name} = {reducer}" for name, reducer in self.reducers)
        return f"Aggregate(keys=[{', '.join(self.keys)}], {reducers})"


@dataclass(frozen=True, eq=False)
class Limit(PlanStep):
    """Keep only the first ``n`` rows."""

    child: PlanStep
    n: int

    kind = "limit"

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n < 0:
            raise ValueError(f"Limit must be a non negative integer, got {self.n!r}")

    def params(self) -> dict[str, Any]:
        return {"n": self.n}

    def describe(self) -> str:
        return f"Limit({self.n})"
