"""Query plan nodes that compute aggregations.

The ``group_by`` and ``summarise`` verbs together ask
for statistics like the count, the mean or the max of
a column, computed for each group of rows sharing
the same values of the grouping keys.

For example, given the following flights::

    carrier, dep_delay
    AA, 10
    AA, 20
    DL, 5

Grouping by carrier and computing the mean delay gives::

    carrier, mean_delay
    AA, 15.0
    DL, 5.0

When no grouping key is provided the whole table is
a single group and the result has exactly one row.

Aggregations are computed per batch first (partial results)
and then reduced to the final value, so only one batch
at a time has to be kept in memory.
"""

import abc
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode

__all__ = (
    "AggregateNode",
    "CountAggregation",
    "CountRowsAggregation",
    "SumAggregation",
    "MinAggregation",
    "MaxAggregation",
    "MeanAggregation",
)


class AggregateNode(QueryPlanNode):
    """Group data and compute aggregations.

    >>> import pyarrow as pa
    >>> from plyground.compute import SumAggregation, PyArrowTableDataSource
    >>> data = pa.record_batch({
    ...    'carrier': pa.array(['AA', 'AA', 'DL', 'DL', 'AA']),
    ...    'distance': pa.array([10, 15, 8, 12, 20])
    ... })
    >>> aggregate = AggregateNode(["carrier"], {"total": SumAggregation("distance")}, PyArrowTableDataSource(data))
    >>> next(aggregate.batches())
    pyarrow.RecordBatch
    carrier: string
    total: int64
    ----
    carrier: ["AA","DL"]
    total: [45,20]
    """

    def __init__(
        self,
        keys: list[str],
        aggregations: dict[str, "Aggregation"],
        child: QueryPlanNode,
    ) -> None:
        """
        :param keys: The columns to group by, ``[]`` aggregates the whole table.
        :param aggregations: The aggregations to compute in the form of {"new_col_name": Aggregation}.
        :param child: The child node that will provide the data to aggregate.
        """
        self.keys = keys
        self.aggregations = aggregations
        self.child = child

    def __str__(self) -> str:
        return f"AggregateNode(keys={self.keys}, aggregations={self.aggregations}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Aggregate the data emitted by the child node.

        Picks the strategy based on the number of grouping keys.
        Always emits a single batch.
        """
        if not self.keys:
            yield self.global_aggregation()
        elif len(self.keys) == 1:
            yield self.single_key_aggregation()
        else:
            yield self.multi_key_aggregation()

    def _check_columns(self, batch: pa.RecordBatch) -> None:
        names = batch.schema.names
        for column in self.keys + [
            a.column for a in self.aggregations.values() if a.column is not None
        ]:
            if column not in names:
                raise KeyError(column)

    def _compute_chunk(
        self, chunks_data: dict[Any, dict[str, list]], key: Any, batch: pa.RecordBatch
    ) -> None:
        chunks_data.setdefault(key, {})
        for name, aggregation in self.aggregations.items():
            chunks_data[key].setdefault(name, []).append(
                aggregation.compute_chunk(batch)
            )

    def global_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregations over all the rows.

        The result always has exactly one row,
        even when the child emits no rows at all.
        """
        chunks_data: dict[tuple, dict[str, list]] = {(): {}}
        schema = None
        for batch in self.child.batches():
            self._check_columns(batch)
            schema = batch.schema
            self._compute_chunk(chunks_data, (), batch)
        return self.reduce_aggregations(chunks_data, schema)

    def single_key_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregation for a single key.

        Dictionary encoding the key column gives both
        its unique values and the rows where each of them is.
        Nulls are encoded too, so they form their own group.
        """
        chunks_data: dict[tuple, dict[str, list]] = {}
        schema = None
        for batch in self.child.batches():
            self._check_columns(batch)
            schema = batch.schema
            key_column = pc.dictionary_encode(
                batch.column(self.keys[0]), null_encoding="encode"
            )
            key_values = key_column.dictionary
            key_indices = key_column.indices

            for idx, keyval in enumerate(key_values.to_pylist()):
                mask = pc.equal(key_indices, idx)
                self._compute_chunk(chunks_data, (keyval,), batch.filter(mask))

        return self.reduce_aggregations(chunks_data, schema)

    def multi_key_aggregation(self) -> pa.RecordBatch:
        """Compute the aggregation for multiple keys.

        Dictionary encoding is not supported for struct arrays,
        so the grouping is done in Python: the batch is sorted
        by the keys, which makes all rows of a group sequential,
        and a chunk is closed every time the key changes.
        """
        sorting_key = [(k, "ascending") for k in self.keys]
        chunks_data: dict[tuple, dict[str, list]] = {}
        schema = None
        for batch in self.child.batches():
            self._check_columns(batch)
            schema = batch.schema
            sorted_batch = batch.sort_by(sorting_key)
            key_columns = [sorted_batch.column(k).to_pylist() for k in self.keys]
            current_key = None
            chunk_start = 0
            for row_index in range(sorted_batch.num_rows):
                row_key = tuple(column[row_index] for column in key_columns)
                if current_key is None:
                    current_key = row_key
                if row_key != current_key:
                    chunk = sorted_batch.slice(chunk_start, row_index - chunk_start)
                    self._compute_chunk(chunks_data, current_key, chunk)
                    current_key = row_key
                    chunk_start = row_index

            if current_key is not None:
                chunk = sorted_batch.slice(
                    chunk_start, sorted_batch.num_rows - chunk_start
                )
                self._compute_chunk(chunks_data, current_key, chunk)

        return self.reduce_aggregations(chunks_data, schema)

    def reduce_aggregations(
        self, chunks_data: dict[tuple, dict[str, list]], schema: pa.Schema | None = None
    ) -> pa.RecordBatch:
        """Reduce the partial aggregation results to the final aggregation results.

        For example if we had 3 batches and the chunks_data is::

            {("AA",): {"total": [10, 20, 30]}}

        The result will be::

            {"carrier": ["AA"], "total": [60]}
        """
        result_batch_data: dict[str, list] = {
            **{k: [] for k in self.keys},
            **{k: [] for k in self.aggregations.keys()},
        }
        for keyvalue, aggregated_values in chunks_data.items():
            for i, key in enumerate(self.keys):
                result_batch_data[key].append(keyvalue[i])
            for aggrname, aggregation in self.aggregations.items():
                result_batch_data[aggrname].append(
                    aggregation.reduce(aggregated_values.get(aggrname, []))
                )

        # Keys keep the type they had in the input, even when there were no rows.
        key_types = {k: schema.field(k).type for k in self.keys} if schema else {}
        return pa.record_batch(
            {
                name: pa.array(values, type=key_types.get(name))
                for name, values in result_batch_data.items()
            }
        )


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Every aggregation computes an intermediate result
    on a single chunk of data and then provides a reduce method
    to combine the intermediate results into a final result.
    """

    def __init__(self, column: str | None) -> None:
        self.column = column

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.column})"

    __repr__ = __str__

    @abc.abstractmethod
    def compute_chunk(self, batch: pa.RecordBatch) -> Any: ...

    @abc.abstractmethod
    def reduce(self, chunks: list[Any]) -> Any: ...


class SimpleAggregation(Aggregation):
    """Base implementation for aggregations like min, max, sum.

    Simple aggregations apply the same function to compute the
    intermediate results and to combine them into the final one,
    ``sum([1, 2, 3])`` is the same as ``sum([sum([1, 2]), 3])``.
    """

    def __init__(self, column: str) -> None:
        super().__init__(column)

    @abc.abstractmethod
    def _aggregate(self, data: Any) -> Any: ...

    def compute_chunk(self, batch: pa.RecordBatch) -> Any:
        return self._aggregate(batch.column(self.column)).as_py()

    def reduce(self, chunks: list[Any]) -> Any:
        values = [c for c in chunks if c is not None]
        if not values:
            return None
        return self._aggregate(pa.array(values)).as_py()


class SumAggregation(SimpleAggregation):
    """Compute the sum of an aggregated column."""

    def _aggregate(self, data: Any) -> Any:
        return pc.sum(data)


class MinAggregation(SimpleAggregation):
    """Compute the min of an aggregated column."""

    def _aggregate(self, data: Any) -> Any:
        return pc.min(data)


class MaxAggregation(SimpleAggregation):
    """Compute the max of an aggregated column."""

    def _aggregate(self, data: Any) -> Any:
        return pc.max(data)


class CountAggregation(Aggregation):
    """Count the non null values of an aggregated column.

    Counts for each intermediate batch are summed
    to compute the final result.
    """

    def __init__(self, column: str) -> None:
        super().__init__(column)

    def compute_chunk(self, batch: pa.RecordBatch) -> int:
        return pc.count(batch.column(self.column)).as_py()

    def reduce(self, chunks: list[int]) -> int:
        return sum(chunks)


class CountRowsAggregation(Aggregation):
    """Count the rows of each group, nulls included."""

    def __init__(self) -> None:
        super().__init__(None)

    def __str__(self) -> str:
        return "CountRowsAggregation()"

    __repr__ = __str__

    def compute_chunk(self, batch: pa.RecordBatch) -> int:
        return batch.num_rows

    def reduce(self, chunks: list[int]) -> int:
        return sum(chunks)


class MeanAggregation(Aggregation):
    """Compute the mean of an aggregated column.

    Count and sum of the column are computed
    for each intermediate batch, the mean is then the
    sum of all sums divided by the sum of all counts.
    Null values are ignored, the mean of no values is null.
    """

    def __init__(self, column: str) -> None:
        super().__init__(column)

    def compute_chunk(self, batch: pa.RecordBatch) -> tuple[int, Any]:
        col = batch.column(self.column)
        return (pc.count(col).as_py(), pc.sum(col).as_py())

    def reduce(self, chunks: list[tuple[int, Any]]) -> float | None:
        count = sum(chunk[0] for chunk in chunks)
        if count == 0:
            return None
        total = sum(chunk[1] for chunk in chunks if chunk[1] is not None)
        return float(total) / count
