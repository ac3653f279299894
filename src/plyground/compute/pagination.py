"""Support limiting or skipping rows in a query plan.

The ``head`` verb and the previews of lazy results
only need the first few rows of a query. The
:class:`PaginateNode` stops consuming its child
as soon as enough rows were emitted.
"""

from .base import QueryPlanNode


class PaginateNode(QueryPlanNode):
    """Emit only one page of the received data.

    Given a starting index and a length, only emit
    ``length`` rows after the starting index is reached.

    >>> import pyarrow as pa
    >>> from plyground.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"carrier": ["AA", "DL", "UA", "B6"]})
    >>> next(PaginateNode(1, 2, PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    carrier: string
    ----
    carrier: ["DL","UA"]
    """

    def __init__(self, offset: int, length: int, child: QueryPlanNode) -> None:
        """
        :param offset: From which row to take data, first row is 0.
        :param length: How many rows to take after offset was reached.
        :param child: the node from which to consume the rows.
        """
        if offset < 0 or length < 0:
            raise ValueError("Offset and length must not be negative")
        self.offset = offset
        self.length = length
        self.end = offset + length
        self.child = child

    def __str__(self) -> str:
        return f"PaginateNode({self.offset}:{self.end}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Skip rows until offset is reached, then emit up to length rows.

        Subsequent rows are never consumed, the child generator
        is closed as soon as the page is complete so that
        any resource it holds gets released.
        """
        consumed_rows = 0
        emitted = False
        last_batch = None

        batches_generator = self.child.batches()
        for batch in batches_generator:
            batch_size = batch.num_rows
            last_batch = batch

            # Discard whole batches that end before offset.
            if consumed_rows + batch_size <= self.offset:
                consumed_rows += batch_size
                continue

            start_in_batch = max(0, self.offset - consumed_rows)
            remaining_rows = self.end - max(consumed_rows, self.offset)
            rows_in_this_batch = min(batch_size - start_in_batch, remaining_rows)
            if rows_in_this_batch > 0:
                emitted = True
                yield batch.slice(start_in_batch, rows_in_this_batch)
            consumed_rows += batch_size
            if consumed_rows >= self.end:
                batches_generator.close()
                break

        if not emitted and last_batch is not None:
            # Nothing in the page, still emit the schema.
            yield last_batch.slice(0, 0)
