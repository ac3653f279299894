"""Manages creation of a physical plan from a submitted request.

Clients submit their queries to the store as plain dictionaries
(see :meth:`plyground.plan.steps.PlanStep.to_dict`). The
:class:`StorePlanner` walks that dictionary and builds the
equivalent tree of :mod:`plyground.compute` nodes.

Example:

    >>> import pyarrow as pa
    >>> from plyground.store.planner import StorePlanner
    >>> request = {
    ...     "type": "filter",
    ...     "predicate": {"type": "call", "op": ">", "args": [
    ...         {"type": "column", "name": "dep_delay"},
    ...         {"type": "literal", "value": 1000},
    ...     ]},
    ...     "child": {"type": "source", "table": "flights"},
    ... }
    >>> flights = pa.table({"dep_delay": [1200, 5]})
    >>> print(StorePlanner(request, catalog={"flights": flights}).plan())
    FilterNode(filter=pyarrow.compute.greater(ColumnRef(dep_delay),Literal(<pyarrow.Int64Scalar: 1000>)), child=PyArrowTableDataSource(columns=['dep_delay'], rows=2))
"""

from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from ..compute import (
    AggregateNode,
    CountAggregation,
    CountRowsAggregation,
    FilterNode,
    FunctionCallExpression,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    PaginateNode,
    ProjectNode,
    PyArrowTableDataSource,
    SortNode,
    SumAggregation,
    col,
    lit,
)
from ..compute.aggregate import Aggregation
from ..compute.base import Expression, QueryPlanNode


class UnknownTableError(LookupError):
    """The request reads a table that is not registered."""


class InvalidRequestError(ValueError):
    """The request is not a valid plan."""


def true_divide(left: Any, right: Any) -> Any:
    """Divide always producing floating point values.

    ``pyarrow.compute.divide`` truncates when both sides are integers,
    which is not what ``distance / air_time`` is expected to do.
    """
    return pc.divide(_as_float(left), _as_float(right))


def _as_float(value: Any) -> Any:
    if isinstance(value, (pa.Array, pa.ChunkedArray, pa.Scalar)):
        return value.cast(pa.float64())
    return float(value)


class StorePlanner:
    """Create a compute engine plan from a submitted request."""

    FUNCTIONS_MAP = {
        "+": pc.add,
        "-": pc.subtract,
        "*": pc.multiply,
        "/": true_divide,
        ">": pc.greater,
        "<": pc.less,
        ">=": pc.greater_equal,
        "<=": pc.less_equal,
        "==": pc.equal,
        "!=": pc.not_equal,
        "&": pc.and_kleene,
        "|": pc.or_kleene,
        "~": pc.invert,
        "neg": pc.negate,
        "is_null": pc.is_null,
    }

    STEP_TYPES = (
        "source",
        "select",
        "mutate",
        "rename",
        "filter",
        "arrange",
        "aggregate",
        "limit",
    )

    REDUCERS_MAP = {
        "count": CountAggregation,
        "sum": SumAggregation,
        "mean": MeanAggregation,
        "min": MinAggregation,
        "max": MaxAggregation,
    }

    def __init__(
        self, request: dict, catalog: dict[str, pa.Table] | None = None
    ) -> None:
        """
        :param request: The serialized plan submitted by a client.
        :param catalog: The tables available to the plan, by name.
        """
        self.request = request
        self.catalog = catalog or {}

    def plan(self) -> QueryPlanNode:
        """Generate the compute plan for the request."""
        return self._plan_step(self.request)

    def _plan_step(self, step: Any) -> QueryPlanNode:
        if not isinstance(step, dict) or "type" not in step:
            raise InvalidRequestError(f"Invalid plan step: {step!r}")

        if step["type"] not in self.STEP_TYPES:
            raise InvalidRequestError(f"Unsupported step type: {step['type']}")
        try:
            return getattr(self, f"_plan_{step['type']}")(step)
        except InvalidRequestError:
            raise
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise InvalidRequestError(f"Malformed {step['type']} step: {e}") from e

    def _child(self, step: dict) -> QueryPlanNode:
        if "child" not in step:
            raise InvalidRequestError(f"Step {step['type']} requires a child")
        return self._plan_step(step["child"])

    def _plan_source(self, step: dict) -> QueryPlanNode:
        """Read a table of the catalog."""
        tablename = step["table"]
        if tablename not in self.catalog:
            raise UnknownTableError(f"Table not found: {tablename}")
        return PyArrowTableDataSource(self.catalog[tablename])

    def _plan_select(self, step: dict) -> QueryPlanNode:
        return ProjectNode(
            select=list(step["columns"]), project=None, child=self._child(step)
        )

    def _plan_mutate(self, step: dict) -> QueryPlanNode:
        """Compute derived columns, keeping all existing ones."""
        project = {
            name: self._parse_expression(expr) for name, expr in step["columns"].items()
        }
        return ProjectNode(select=None, project=project, child=self._child(step))

    def _plan_rename(self, step: dict) -> QueryPlanNode:
        return ProjectNode(
            select=None, project=None, child=self._child(step), rename=dict(step["columns"])
        )

    def _plan_filter(self, step: dict) -> QueryPlanNode:
        """Filter rows, the predicate must return a boolean mask."""
        return FilterNode(self._parse_expression(step["predicate"]), child=self._child(step))

    def _plan_arrange(self, step: dict) -> QueryPlanNode:
        keys = [key["column"] for key in step["keys"]]
        descending = [bool(key.get("descending", False)) for key in step["keys"]]
        return SortNode(keys=keys, descending=descending, child=self._child(step))

    def _plan_aggregate(self, step: dict) -> QueryPlanNode:
        """Group and reduce.

        An empty list of keys aggregates the whole table.
        """
        aggregations = {
            name: self._parse_reducer(reducer)
            for name, reducer in step["reducers"].items()
        }
        return AggregateNode(
            keys=list(step["keys"]), aggregations=aggregations, child=self._child(step)
        )

    def _plan_limit(self, step: dict) -> QueryPlanNode:
        n = step["n"]
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise InvalidRequestError(f"Invalid limit: {n!r}")
        return PaginateNode(offset=0, length=n, child=self._child(step))

    def _parse_reducer(self, node: dict) -> Aggregation:
        if node["func"] == "n":
            return CountRowsAggregation()
        if node["func"] not in self.REDUCERS_MAP:
            raise InvalidRequestError(f"Unsupported reducer: {node['func']}")
        return self.REDUCERS_MAP[node["func"]](node["column"])

    def _parse_expression(self, node: dict) -> Expression:
        """Parse an expression node of the request.

        ``call`` nodes recursively parse their arguments and
        become a :class:`plyground.compute.FunctionCallExpression`,
        ``column`` and ``literal`` nodes are the leaves.
        """
        if node["type"] == "call":
            if node["op"] not in self.FUNCTIONS_MAP:
                raise InvalidRequestError(f"Unsupported operator: {node['op']}")
            args = [self._parse_expression(arg) for arg in node["args"]]
            return FunctionCallExpression(self.FUNCTIONS_MAP[node["op"]], *args)
        elif node["type"] == "column":
            return col(node["name"])
        elif node["type"] == "literal":
            return lit(node["value"])
        else:
            raise InvalidRequestError(f"Unsupported expression type: {node['type']}")
