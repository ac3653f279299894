"""Results materialized locally."""

import pyarrow as pa

from .. import config
from ..utils import tabulate


class Realized:
    """Rows returned by the store, owned by the local process.

    A ``Realized`` result has no relationship with the store
    anymore: it keeps working after the session is closed
    and none of the lazy verbs apply to it.

    >>> import pyarrow as pa
    >>> result = Realized(pa.table({"carrier": ["AA", "DL"], "delay": [20.0, 5.0]}))
    >>> print(result)
    # A table: 2 x 2
    carrier | delay
    ------- | -----
    AA      | 20.00
    DL      | 5.00
    """

    def __init__(self, table: pa.Table) -> None:
        """
        :param table: The rows of the result.
        """
        if not isinstance(table, pa.Table):
            raise ValueError("Invalid input, expected a pyarrow.Table")
        self.table = table

    @property
    def num_rows(self) -> int:
        return self.table.num_rows

    @property
    def column_names(self) -> list[str]:
        return self.table.column_names

    @property
    def schema(self) -> pa.Schema:
        return self.table.schema

    def __len__(self) -> int:
        return self.table.num_rows

    def to_arrow(self) -> pa.Table:
        return self.table

    def to_pylist(self) -> list[dict]:
        """The rows as a list of ``{column: value}`` dictionaries."""
        return self.table.to_pylist()

    def to_pydict(self) -> dict[str, list]:
        """The columns as a ``{column: [values]}`` dictionary."""
        return self.table.to_pydict()

    def __str__(self) -> str:
        return (
            f"# A table: {self.table.num_rows} x {self.table.num_columns}\n"
            + tabulate.tabulate(self.table, max_rows=config.get_display_max_rows())
        )

    __repr__ = __str__
