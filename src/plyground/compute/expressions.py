"""Expressions executed by compute engine nodes.

Filters need a ``predicate``, an expression that
returns ``true`` or ``false`` for each row, while
projections need an expression that computes the
values of a derived column, like ``distance / air_time * 60``.

Both are represented as trees of :class:`FunctionCallExpression`
whose leaves are column references and literals.
"""

from typing import Any, Callable

import pyarrow as pa

from .. import utils
from .base import Expression


def apply_expression_if_needed(batch: pa.RecordBatch, o: Any) -> Any:
    """Invoke apply on expressions when needed.

    Arguments that are already data (arrays, scalars or
    plain python values) are returned unchanged, so
    function arguments can be resolved without caring
    about what they are.
    """
    if isinstance(o, Expression):
        o = o.apply(batch)
    return o


def as_column(batch: pa.RecordBatch, value: Any) -> pa.Array:
    """Broadcast the result of an expression to a full column.

    Expressions made only of literals, like ``lit(1) + lit(2)``,
    return a scalar. Nodes that need one value per row
    expand it to the length of the batch.
    """
    if isinstance(value, pa.ChunkedArray):
        return value.combine_chunks()
    if isinstance(value, pa.Array):
        return value
    if not isinstance(value, pa.Scalar):
        value = pa.scalar(value)
    return pa.repeat(value, batch.num_rows)


class FunctionCallExpression(Expression):
    """Call a compute function on its arguments.

    Given a compute function and its arguments
    (other expressions, literals or data), resolve
    the arguments against the batch and invoke the function.

    Computing the speed of flights would look like::

        FunctionCallExpression(
            pyarrow.compute.divide, ColumnRef("distance"), ColumnRef("air_time")
        )
    """

    def __init__(self, func: Callable, *args: Expression) -> None:
        """
        :param func: The function accepting the arguments.
        :param *args: The arguments for the function.
        """
        self.func = func
        self.args = args

    def __str__(self) -> str:
        func_qualname = utils.inspect.get_qualname(self.func)
        return f"{func_qualname}({','.join(map(str, self.args))})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        args = tuple(apply_expression_if_needed(batch, arg) for arg in self.args)
        return self.func(*args)
