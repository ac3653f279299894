"""Query plan nodes that implement filtering of rows.

The ``filter`` verb keeps only the rows for which
a predicate holds, like ``dep_delay > 1000``.
This module implements the node the store uses for it.
"""

import pyarrow as pa

from .base import QueryPlanNode
from .expressions import Expression, as_column


class FilterNode(QueryPlanNode):
    """Filter data based on a predicate expression.

    The predicate, applied to a batch, must return
    ``true`` or ``false`` for each row. Rows where the
    predicate is ``false`` or null are discarded.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from plyground.compute import col, lit, FunctionCallExpression, PyArrowTableDataSource
    >>> data = pa.record_batch({"dep_delay": [1200, 5, 1005]})
    >>> predicate = FunctionCallExpression(pc.greater, col("dep_delay"), lit(1000))
    >>> next(FilterNode(predicate, PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    dep_delay: int64
    ----
    dep_delay: [1200,1005]
    """

    def __init__(self, expression: Expression, child: QueryPlanNode) -> None:
        """
        :param expression: The predicate expression to filter with.
        :param child: The node emitting the data to be filtered.
        """
        self.expression = expression
        self.child = child

    def __str__(self) -> str:
        return f"FilterNode(filter={self.expression}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the predicate to each batch of the child node.

        The predicate produces a mask (an array of only true/false values)
        and only the rows selected by the mask are emitted.
        """
        for batch in self.child.batches():
            mask = as_column(batch, self.expression.apply(batch))
            if not pa.types.is_boolean(mask.type):
                raise TypeError(
                    f"Filter predicate must be boolean, got {mask.type}: {self.expression}"
                )
            yield batch.filter(mask)
