"""The Plyground Compute Engine

The compute engine is what the :mod:`plyground.store` uses
to actually run the query plans submitted by clients.
Clients never build compute nodes themselves, they describe
what they want through :mod:`plyground.plan` and the store
translates that description into a tree of nodes.

The compute engine is tightly bound to Apache Arrow,
every node consumes :class:`pyarrow.RecordBatch` objects
and emits new RecordBatches as the result of its execution::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

Nodes are in charge of their own execution, which keeps
the behaviour of each step next to its definition.

A plan starts from one ``DataSource`` node, the leaf
of the tree, and every other node wraps the previous one:

>>> import pyarrow as pa
>>> import pyarrow.compute as pc
>>> from plyground.compute import col, lit, PyArrowTableDataSource
>>> from plyground.compute import FilterNode, FunctionCallExpression
>>> flights = pa.table({
...    "carrier": pa.array(["AA", "DL", "UA"]),
...    "dep_delay": pa.array([1200, 5, 1005])
... })
>>> query = FilterNode(
...     FunctionCallExpression(pc.greater, col("dep_delay"), lit(1000)),
...     child=PyArrowTableDataSource(flights)
... )
>>> for data in query.batches():
...     print(data)
pyarrow.RecordBatch
carrier: string
dep_delay: int64
----
carrier: ["AA","UA"]
dep_delay: [1200,1005]
"""

from .aggregate import (
    AggregateNode,
    CountAggregation,
    CountRowsAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    SumAggregation,
)
from .base import ColumnRef, Literal, col, lit
from .datasources import CSVDataSource, ParquetDataSource, PyArrowTableDataSource
from .expressions import FunctionCallExpression
from .filtering import FilterNode
from .pagination import PaginateNode
from .selection import ProjectNode
from .sorting import SortNode

__all__ = (
    "CSVDataSource",
    "ParquetDataSource",
    "PyArrowTableDataSource",
    "FilterNode",
    "FunctionCallExpression",
    "col",
    "lit",
    "ColumnRef",
    "Literal",
    "PaginateNode",
    "SortNode",
    "ProjectNode",
    "AggregateNode",
    "CountAggregation",
    "CountRowsAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MinAggregation",
    "SumAggregation",
)
