"""Plyground

Lazy, verb based dataframes over a tabular store,
built for learning and teaching purposes.

Plyground shows how a client library can offer
the ``dplyr`` verbs (``select``, ``filter``, ``arrange``,
``mutate``, ``group_by``, ``summarise``) on data that lives
in a store it doesn't control: the verbs only build a
query plan, and the plan runs in the store when
its result is collected.

>>> from plyground import connect, col, desc, mean, n
>>> sc = connect("local")
>>> flights = sc.copy_to("flights", {
...     "carrier": ["AA", "DL", "AA", "UA"],
...     "dep_delay": [1200, 5, 30, 1005],
... })
>>> delayed = flights.filter(col("dep_delay") > 1000).arrange(desc("dep_delay"))
>>> delayed.collect().to_pydict()
{'carrier': ['AA', 'UA'], 'dep_delay': [1200, 1005]}
>>> flights.group_by("carrier").summarise(flights=n(), delay=mean("dep_delay")).arrange("carrier").collect().to_pylist()
[{'carrier': 'AA', 'flights': 2, 'delay': 615.0}, {'carrier': 'DL', 'flights': 1, 'delay': 5.0}, {'carrier': 'UA', 'flights': 1, 'delay': 1005.0}]
>>> sc.close()

The platform is constituted by multiple components,
each isolated within its own package and each self documented:

* :mod:`plyground.dataframe`, the lazy dataframe API.
* :mod:`plyground.plan`, the query plans built by the verbs.
* :mod:`plyground.session`, the connection to the store.
* :mod:`plyground.store`, the store owning the tables and running queries.
* :mod:`plyground.compute`, the engine used by the store to run queries.
"""

from . import compute
from .dataframe import LazyFrame, Realized
from .exceptions import (
    ConnectionError,
    DataLoadError,
    InvalidColumn,
    PlygroundError,
    RemoteExecutionError,
    TableExistsError,
)
from .plan import asc, col, count, desc, lit, max, mean, min, n, sum
from .session import Session, connect
from .store import TableStore

__all__ = (
    "compute",
    "connect",
    "Session",
    "TableStore",
    "LazyFrame",
    "Realized",
    "col",
    "lit",
    "asc",
    "desc",
    "n",
    "count",
    "sum",
    "mean",
    "min",
    "max",
    "PlygroundError",
    "InvalidColumn",
    "RemoteExecutionError",
    "ConnectionError",
    "TableExistsError",
    "DataLoadError",
)
