"""Base classes and interfaces for the store Compute Engine

This module defines the building blocks the store uses
to represent a physical plan and run it: nodes that emit
batches of rows and expressions that compute new columns.
"""

import abc
from typing import Any, Iterator

import pyarrow as pa


class QueryPlanNode(abc.ABC):
    """A node of a physical execution plan.

    The physical plan is a tree of nodes where every node
    is a step of the execution and the steps it depends on
    are its children.

    Reading a table and keeping only some rows is a plan
    made of two nodes::

        PyArrowTableDataSource -> FilterNode(predicate)

    The filter is the root of the plan and
    the datasource is its child.

    Each Node consumes :class:`pyarrow.RecordBatch` objects
    from its children and emits new :class:`pyarrow.RecordBatch`
    objects for its parent. Nothing runs until someone
    starts iterating over :meth:`batches` of the root node,
    which is what the :class:`plyground.store.TableStore` does
    when a plan is submitted for execution.

    A node that counts the rows flowing through it
    could be implemented as::

        class CountingNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child
                self.seen = 0

            def batches(self):
                for b in self.child.batches():
                    self.seen += b.num_rows
                    yield b

            def __str__(self):
                return f"CountingNode({self.child})"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the parent node.

        Usually this happens by consuming data from the
        child nodes, transforming it, and yielding
        it back to the next consumer.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


class Expression(abc.ABC):
    """Expression to apply to a RecordBatch.

    Expressions compute a new column out of the
    columns of a :class:`pyarrow.RecordBatch`,
    like ``dep_delay > 1000`` or ``distance / air_time``.

    The engine is Column Major, so applying an expression
    always results in a :class:`pyarrow.Array`
    (or a scalar for literals) holding the new column.
    """

    @abc.abstractmethod
    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Apply the expression to a RecordBatch."""
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    def __repr__(self) -> str:
        return str(self)


class ColumnRef(Expression):
    """References a column in a record batch.

    Applying it to a batch returns the data of that column.
    A missing column raises :class:`KeyError`, which the store
    reports back to clients as an invalid column.
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Get the data for the column."""
        if self.name not in batch.schema.names:
            raise KeyError(self.name)
        return batch.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value used in an expression.

    Literals are converted to :class:`pyarrow.Scalar`
    so that compute functions can broadcast them
    against the columns they are combined with.
    """

    def __init__(self, value: Any) -> None:
        """
        :param value: The python value of the literal.
        """
        self.value = value if isinstance(value, pa.Scalar) else pa.scalar(value)

    def apply(self, batch: pa.RecordBatch) -> pa.Scalar:
        return self.value

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal
