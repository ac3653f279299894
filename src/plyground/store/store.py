"""The tabular store holding tables and running queries."""

import enum

import pyarrow as pa

from .. import config
from ..exceptions import InvalidColumn, RemoteExecutionError, TableExistsError
from .planner import InvalidRequestError, StorePlanner, UnknownTableError

log = config.get_logger()


class StoreState(enum.Enum):
    """What the store is doing with the last submitted request."""

    IDLE = "idle"
    EXECUTING = "executing"
    RETURNED = "returned"
    FAILED = "failed"


class TableHandle:
    """Reference to a table registered in the store.

    The handle only carries the name and the schema of the table,
    the rows stay in the store.
    """

    def __init__(self, name: str, schema: pa.Schema) -> None:
        self.name = name
        self.schema = schema

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.schema.names)

    def __repr__(self) -> str:
        return f"TableHandle({self.name!r}, columns={list(self.columns)})"


class TableStore:
    """Keep named tables and execute the plans submitted against them.

    Tables are kept in memory as :class:`pyarrow.Table` objects,
    requests are planned by :class:`plyground.store.planner.StorePlanner`
    and run by the compute engine.

    >>> import pyarrow as pa
    >>> store = TableStore()
    >>> store.register_table("flights", pa.table({"dep_delay": [1200, 5]}))
    TableHandle('flights', columns=['dep_delay'])
    >>> store.execute({"type": "limit", "n": 1, "child": {"type": "source", "table": "flights"}}).to_pydict()
    {'dep_delay': [1200]}
    >>> store.state
    <StoreState.RETURNED: 'returned'>
    """

    def __init__(self) -> None:
        self._tables: dict[str, pa.Table] = {}
        self.state = StoreState.IDLE

    def register_table(
        self, name: str, data: pa.Table, overwrite: bool = False
    ) -> TableHandle:
        """Copy a table into the store under the given name.

        :param name: The name the table will be available as.
        :param data: The rows of the table.
        :param overwrite: Replace an existing table with the same name
                          instead of failing.
        """
        if not isinstance(data, pa.Table):
            raise TypeError(f"Expected a pyarrow.Table, got {type(data).__name__}")
        if name in self._tables and not overwrite:
            raise TableExistsError(
                f"Table {name!r} already exists, pass overwrite=True to replace it"
            )

        self._tables[name] = data
        log.info("Registered table %s (%d rows, %d columns)", name, data.num_rows, data.num_columns)
        return TableHandle(name, data.schema)

    def drop_table(self, name: str) -> None:
        """Destroy a table, failing if it doesn't exist."""
        if name not in self._tables:
            raise RemoteExecutionError(
                f"Table not found: {name}", RemoteExecutionError.TABLE_NOT_FOUND
            )
        del self._tables[name]
        log.info("Dropped table %s", name)

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def list_tables(self) -> list[str]:
        return sorted(self._tables)

    def handle(self, name: str) -> TableHandle:
        """Get a handle to an already registered table."""
        if name not in self._tables:
            raise RemoteExecutionError(
                f"Table not found: {name}", RemoteExecutionError.TABLE_NOT_FOUND
            )
        return TableHandle(name, self._tables[name].schema)

    def execute(self, request: dict) -> pa.Table:
        """Run a serialized plan and return all the resulting rows.

        Blocks until the whole result is available.
        Failures are reported as :class:`plyground.exceptions.RemoteExecutionError`,
        or :class:`plyground.exceptions.InvalidColumn` when the plan
        references a column that doesn't exist.
        """
        self.state = StoreState.EXECUTING
        try:
            plan = self._plan(request)
            log.debug("Executing %s", plan)
            result = self._run(plan)
        except Exception:
            self.state = StoreState.FAILED
            raise

        self.state = StoreState.RETURNED
        log.debug("Returned %d rows", result.num_rows)
        return result

    def _plan(self, request: dict):
        try:
            return StorePlanner(request, catalog=self._tables).plan()
        except UnknownTableError as e:
            log.warning("Planning failed: %s", e)
            raise RemoteExecutionError(str(e), RemoteExecutionError.TABLE_NOT_FOUND) from e
        except InvalidRequestError as e:
            log.warning("Planning failed: %s", e)
            raise RemoteExecutionError(str(e), RemoteExecutionError.INVALID_PLAN) from e

    def _run(self, plan) -> pa.Table:
        try:
            batches = list(plan.batches())
        except KeyError as e:
            log.warning("Execution failed, unknown column %s", e.args[0])
            raise InvalidColumn(e.args[0]) from e
        except (pa.ArrowException, TypeError, ValueError) as e:
            log.warning("Execution failed: %s", e)
            raise RemoteExecutionError(str(e), RemoteExecutionError.EXECUTION_ERROR) from e

        if not batches:
            return pa.table({})
        try:
            return pa.Table.from_batches(batches)
        except pa.ArrowInvalid as e:
            raise RemoteExecutionError(str(e), RemoteExecutionError.EXECUTION_ERROR) from e
