"""Query plan nodes that perform sorting of data.

The ``arrange`` verb asks for the rows to be returned
ordered by one or more columns, each of them either
ascending or descending.

Sorting needs to see every row before emitting
the first one, so it is one of the few nodes that
accumulates all the data of its child in memory.
"""

import pyarrow as pa

from .base import QueryPlanNode


class SortNode(QueryPlanNode):
    """Sort data in-memory based on one or more columns.

    The data is sorted based on the keys in the order they
    are provided, later keys break ties of earlier ones.
    Null values are placed at the end.

    >>> import pyarrow as pa
    >>> from plyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"dep_delay": [5, 1200, 30]})
    >>> sort = SortNode(["dep_delay"], [True], PyArrowTableDataSource(data))
    >>> next(sort.batches())
    pyarrow.RecordBatch
    dep_delay: int64
    ----
    dep_delay: [1200,30,5]
    """

    def __init__(
        self, keys: list[str], descending: list[bool], child: QueryPlanNode
    ) -> None:
        """
        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each column should be sorted in a descending order.
        :param child: The node emitting the data to be sorted.
        """
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")

        self.sorting = list(
            zip(keys, ("descending" if desc else "ascending" for desc in descending))
        )
        self.child = child

    def __str__(self) -> str:
        return f"SortNode(sorting={self.sorting}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Sort the data emitted by the child node.

        Batches provided by the child are accumulated
        until they are all loaded in memory, then they
        are merged and sorted as a single table.
        """
        batches = list(self.child.batches())
        if not batches:
            return

        for key, _ in self.sorting:
            if key not in batches[0].schema.names:
                raise KeyError(key)

        if len(batches) == 1:
            yield batches[0].sort_by(self.sorting)
            return

        # Converting batches to tables is zero-copy, and so is
        # concatenating tables as they are based on ChunkedArrays.
        table = pa.concat_tables(
            [pa.table(batch) for batch in batches], promote_options="none"
        )
        table = table.sort_by(self.sorting)
        yield from table.to_batches()
