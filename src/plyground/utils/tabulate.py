"""Format tabular data into a text table for print.

The `tabulate` function takes a `pyarrow.Table` or `pyarrow.RecordBatch`
and formats it into a text table. It truncates long strings,
formats floats to 2 decimal places, shows nulls as ``NA``
and limits the number of rows to display.

It is used to print both collected results and the
previews of lazy queries.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "carrier": ["AA", "DL", "UA"],
    ...     "flights": [8, 8, None],
    ...     "delay": [66.5, 38.72, 77.46],
    ... }
    >>> table = pa.table(data)
    >>> print(tabulate(table, max_rows=2))
    carrier | flights | delay
    ------- | ------- | -----
    AA      | 8       | 66.50
    DL      | 8       | 38.72
    ... and 1 more rows
"""

from typing import Any

import pyarrow as pa


def tabulate(
    data: pa.Table | pa.RecordBatch, max_rows: int = 20, more_rows_hint: bool = True
) -> str:
    """Format a Table or RecordBatch into a text table.

    Will produce a string like::

        carrier | flights | delay
        ------- | ------- | -----
        AA      | 8       | 66.50
        DL      | NA      | 38.72

    :param data: The rows to format.
    :param max_rows: How many rows to show at most.
    :param more_rows_hint: Add a line telling how many rows were not shown.
    """
    cols = data.column_names
    rows = [
        [format_value(row[c]) for c in cols]
        for row in data.slice(length=max_rows).to_pylist()
    ]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    table = "\n".join(header + separator + textrows)
    if more_rows_hint and data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    ).rstrip()


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    Floats get 2 decimal places, long strings are truncated.
    """
    if v is None:
        return "NA"
    if isinstance(v, float):
        return f"{v:.2f}"
    elif isinstance(v, bool):
        return "true" if v else "false"

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v
