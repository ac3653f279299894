"""The tabular store.

The store owns the tables and executes the queries clients submit.
Clients only ever talk to it through two operations:

* :meth:`TableStore.register_table` copies local data into
  the store under a name and returns a :class:`TableHandle`.
* :meth:`TableStore.execute` receives a serialized query plan
  and returns the resulting rows, or raises an error.

Executing a request happens in two phases, like in most
query engines:

1. **Planning**: the :class:`plyground.store.planner.StorePlanner`
   converts the request into a tree of :mod:`plyground.compute` nodes.
   Unknown tables and malformed requests are detected here.
2. **Execution**: the root node of the tree is asked for its batches,
   which pulls data through every node down to the table.
   Type mismatches and unknown columns are detected here.

How rows would be distributed and shuffled across machines
to perform groupings and sorting is entirely up to the engine,
the client never needs to know about it.
"""

from .planner import StorePlanner
from .store import StoreState, TableHandle, TableStore

__all__ = ("TableStore", "TableHandle", "StoreState", "StorePlanner")
