"""Query plan nodes that implement projection of columns.

The ``select`` verb keeps only some columns, the ``mutate``
verb computes new ones out of expressions and ``rename``
gives columns a new name. All of them are served by
the :class:`ProjectNode`.
"""

from .base import QueryPlanNode
from .expressions import Expression, as_column


class ProjectNode(QueryPlanNode):
    """Project data by selecting columns and computing expressions.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from plyground.compute import col, lit, FunctionCallExpression, PyArrowTableDataSource
    >>> data = pa.record_batch({"distance": [120, 300], "air_time": [60, 100]})
    >>> speed = FunctionCallExpression(pc.divide, col("distance"), col("air_time"))
    >>> next(ProjectNode(["distance"], {"speed": speed}, PyArrowTableDataSource(data)).batches())
    pyarrow.RecordBatch
    distance: int64
    speed: int64
    ----
    distance: [120,300]
    speed: [2,3]
    """

    def __init__(
        self,
        select: list[str] | None,
        project: dict[str, Expression] | None,
        child: QueryPlanNode,
        rename: dict[str, str] | None = None,
    ) -> None:
        """
        :param select: The list of column names to keep.
                       ``None`` keeps all columns,
                       ``[]`` keeps only the projected columns.
        :param project: The dict {name: Expression} of columns to compute.
                        Replaces the column when the name already exists.
        :param child: The node emitting the data to be projected.
        :param rename: The dict {old_name: new_name} applied last.
        """
        self.select = select
        self.project = project or {}
        self.rename = rename or {}
        self.child = child

    def __str__(self) -> str:
        text = f"ProjectNode(select={self.select}, project={self.project}"
        if self.rename:
            text += f", rename={self.rename}"
        return text + f", child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the projection to the child node.

        Expressions are applied in order, so a projected
        column can reference one projected before it.
        Selection happens afterwards.
        """
        for batch in self.child.batches():
            for name, expr in self.project.items():
                values = as_column(batch, expr.apply(batch))
                if name in batch.schema.names:
                    batch = batch.set_column(
                        batch.schema.get_field_index(name), name, values
                    )
                else:
                    batch = batch.append_column(name, values)

            if self.select is not None:
                restrict = self.select + [
                    name for name in self.project if name not in self.select
                ]
                for name in restrict:
                    if name not in batch.schema.names:
                        raise KeyError(name)
                batch = batch.select(restrict)

            if self.rename:
                for name in self.rename:
                    if name not in batch.schema.names:
                        raise KeyError(name)
                batch = batch.rename_columns(
                    [self.rename.get(name, name) for name in batch.schema.names]
                )

            yield batch
