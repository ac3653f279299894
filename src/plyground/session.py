"""Sessions with a tabular store.

A session is how a client talks to a store: tables are
copied into the store through the session, lazy frames submit
their plans through it, and closing it destroys every
table it registered.

>>> from plyground import connect
>>> sc = connect("local")
>>> flights = sc.copy_to("flights", [{"carrier": "AA"}, {"carrier": "DL"}])
>>> sc.list_tables()
['flights']
>>> sc.close()
>>> sc.list_tables()
Traceback (most recent call last):
    ...
plyground.exceptions.ConnectionError: Session with local is closed
"""

import re
from typing import Any

import pyarrow as pa

from . import config
from .compute import CSVDataSource, ParquetDataSource
from .compute.datasources import DataSourceNode
from .dataframe import LazyFrame
from .exceptions import ConnectionError, DataLoadError
from .plan import Source
from .store import TableStore

log = config.get_logger()

LOCAL_TARGET = re.compile(r"^local(\[(\*|[1-9][0-9]*)\])?$")


def connect(target: str = "local", store: TableStore | None = None) -> "Session":
    """Open a session with a store.

    :param target: Where the store runs, ``"local"``, ``"local[4]"``
                   or ``"local[*]"`` for a store running in this process.
    :param store: Use an already existing store instead of creating one.
    """
    return Session(target, store=store)


def as_arrow_table(data: Any) -> pa.Table:
    """Convert the supported kinds of local data to a :class:`pyarrow.Table`.

    Accepts tables, record batches, dictionaries of columns
    and lists of rows.
    """
    if isinstance(data, pa.Table):
        return data
    if isinstance(data, pa.RecordBatch):
        return pa.Table.from_batches([data])
    if isinstance(data, dict):
        return pa.table(data)
    if isinstance(data, list):
        return pa.Table.from_pylist(data)
    raise TypeError(f"Unsupported data of type {type(data).__name__}")


def load_datasource(source: DataSourceNode) -> pa.Table:
    """Read all the data of a datasource into a table.

    Missing or unreadable files raise :class:`plyground.exceptions.DataLoadError`.
    """
    try:
        batches = list(source.batches())
    except (OSError, pa.ArrowException) as e:
        log.warning("Unable to load %s: %s", source, e)
        raise DataLoadError(f"Unable to load {source}: {e}") from e
    if not batches:
        return source.poll_schema().empty_table()
    return pa.Table.from_batches(batches)


class Session:
    """A connection to a tabular store.

    Sessions can be used as context managers,
    so that they are closed when the block ends::

        with connect() as sc:
            flights = sc.read_csv("flights", "flights.csv")
            print(flights.filter(col("dep_delay") > 1000))
    """

    def __init__(self, target: str = "local", store: TableStore | None = None) -> None:
        """
        :param target: Where the store runs, see :func:`connect`.
        :param store: Use an already existing store instead of creating one.
        """
        if not LOCAL_TARGET.match(target):
            raise ConnectionError(
                f"Unable to connect to {target!r}, only local stores are supported"
            )

        self.target = target
        self._store = store if store is not None else TableStore()
        self._registered: set[str] = set()
        self._open = True
        log.info("Connected to %s", target)

    @property
    def is_open(self) -> bool:
        return self._open

    def _ensure_open(self) -> TableStore:
        if not self._open:
            raise ConnectionError(f"Session with {self.target} is closed")
        return self._store

    def copy_to(self, name: str, data: Any, overwrite: bool = False) -> LazyFrame:
        """Copy local data into the store and return a lazy frame reading it.

        :param name: The name of the table in the store.
        :param data: A pyarrow Table or RecordBatch, a dictionary of columns
                     or a list of rows.
        :param overwrite: Replace a table with the same name.
        """
        store = self._ensure_open()
        handle = store.register_table(name, as_arrow_table(data), overwrite=overwrite)
        self._registered.add(name)
        return LazyFrame(self, Source(handle.name, handle.columns))

    def read_csv(
        self, name: str, path: str, overwrite: bool = False, block_size: int | None = None
    ) -> LazyFrame:
        """Load a local CSV file into the store as a table."""
        self._ensure_open()
        return self.copy_to(
            name, load_datasource(CSVDataSource(path, block_size)), overwrite=overwrite
        )

    def read_parquet(self, name: str, path: str, overwrite: bool = False) -> LazyFrame:
        """Load a local Parquet file into the store as a table."""
        self._ensure_open()
        return self.copy_to(
            name, load_datasource(ParquetDataSource(path)), overwrite=overwrite
        )

    def table(self, name: str) -> LazyFrame:
        """A lazy frame reading a table already in the store."""
        handle = self._ensure_open().handle(name)
        return LazyFrame(self, Source(handle.name, handle.columns))

    def drop(self, name: str) -> None:
        self._ensure_open().drop_table(name)
        self._registered.discard(name)

    def list_tables(self) -> list[str]:
        return self._ensure_open().list_tables()

    def execute(self, request: dict) -> pa.Table:
        """Submit a serialized plan to the store and wait for its result."""
        return self._ensure_open().execute(request)

    def close(self) -> None:
        """Close the session destroying the tables it registered.

        Closing an already closed session does nothing.
        """
        if not self._open:
            return

        for name in sorted(self._registered):
            if self._store.has_table(name):
                self._store.drop_table(name)
        self._registered.clear()
        self._open = False
        log.info("Disconnected from %s", self.target)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"<Session {self.target} ({state})>"
