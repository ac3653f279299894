"""Dataframe API of plyground.

A dataframe is a table of rows and columns that can be
explored and transformed through a set of *verbs*.
Plyground follows the vocabulary of the ``dplyr`` library:

* ``select`` keeps some columns,
* ``filter`` keeps the rows matching a predicate,
* ``arrange`` orders the rows,
* ``mutate`` computes new columns,
* ``group_by`` and ``summarise`` compute statistics for groups of rows.

When the data lives in a remote store, pulling it locally to apply
those verbs would be slow or impossible. Instead the dataframe is *lazy*:
the :class:`LazyFrame` only records the verbs into a query plan,
and the plan is sent to the store when the result is requested
through ``collect()``. The rows then come back as a :class:`Realized`
result, which is owned by the local process.

The two classes are deliberately unrelated: a ``LazyFrame`` is a
description of a result, a ``Realized`` is the result itself.
"""

from .dataframe import LazyFrame
from .realized import Realized

__all__ = ("LazyFrame", "Realized")
