"""Client side description of lazy queries.

When working with a remote store, the client never holds
the data it is analysing. Each verb applied to a
:class:`plyground.LazyFrame` only records what should be done
by appending a step to a *query plan*:

* :mod:`plyground.plan.expressions` describes computations
  on columns, like ``col("dep_delay") > 1000``.
* :mod:`plyground.plan.reducers` describes how ``summarise``
  collapses groups of rows, like ``mean("dep_delay")``.
* :mod:`plyground.plan.steps` describes the relational
  operations themselves: ``Select``, ``Filter``, ``Arrange``,
  ``Mutate``, ``Aggregate`` and so on.

A plan is immutable and can be turned into a plain dictionary
with :meth:`plyground.plan.steps.PlanStep.to_dict`. That dictionary
is the request the store receives when the plan is collected:

>>> from plyground.plan import Source, Filter, col
>>> plan = Filter(Source("flights", ("carrier", "dep_delay")), col("dep_delay") > 1000)
>>> plan.to_dict()
{'type': 'filter', 'predicate': {'type': 'call', 'op': '>', 'args': [{'type': 'column', 'name': 'dep_delay'}, {'type': 'literal', 'value': 1000}]}, 'child': {'type': 'source', 'table': 'flights'}}
"""

from .expressions import Call, Column, Expr, Literal, col, lit, wrap
from .reducers import Reducer, count, max, mean, min, n, sum
from .steps import (
    Aggregate,
    Arrange,
    Filter,
    Limit,
    Mutate,
    PlanStep,
    Rename,
    Select,
    SortKey,
    Source,
    asc,
    desc,
)

__all__ = (
    "Expr",
    "Column",
    "Literal",
    "Call",
    "col",
    "lit",
    "wrap",
    "Reducer",
    "n",
    "count",
    "sum",
    "mean",
    "min",
    "max",
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
