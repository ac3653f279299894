"""Query Plan nodes that load data

The datasource nodes are the leaves of every plan:
they read the rows of a table, convert them into
the format accepted by the compute engine and forward
them to the next node in the plan.

Tables registered in the store are kept in memory
and read through :class:`PyArrowTableDataSource`,
local CSV and Parquet files are loaded into the store
through :class:`CSVDataSource` and :class:`ParquetDataSource`.
"""

from abc import abstractmethod

import pyarrow as pa
import pyarrow.csv
import pyarrow.parquet

from .base import QueryPlanNode


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the data source without loading its content."""
        ...


class CSVDataSource(DataSourceNode):
    """Load data from a CSV file.

    Given a local CSV file path, read the content
    block by block, converting it into Arrow format.
    """

    def __init__(self, filename: str, block_size: int | None = None) -> None:
        """
        :param filename: The path of the local CSV file.
        :param block_size: How many bytes to read for each batch,
                           influences how many batches will be produced.
        """
        self.filename = filename
        self.block_size = block_size

    def __str__(self) -> str:
        return f"CSVDataSource({self.filename}, block_size={self.block_size})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Open the CSV file and emit the batches."""
        with pa.csv.open_csv(
            self.filename, read_options=pa.csv.ReadOptions(block_size=self.block_size)
        ) as reader:
            yield from reader

    def poll_schema(self) -> pa.Schema:
        with pa.csv.open_csv(self.filename) as reader:
            return reader.schema


class ParquetDataSource(DataSourceNode):
    """Load data from a Parquet file."""

    def __init__(self, filename: str, batch_size: int | None = None) -> None:
        """
        :param filename: The path of the local parquet file.
        :param batch_size: How many rows to read for each batch.
        """
        self.filename = filename
        self.batch_size = batch_size or 65536

    def __str__(self) -> str:
        return f"ParquetDataSource({self.filename}, batch_size={self.batch_size})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Open the Parquet file and emit the batches."""
        with pa.parquet.ParquetFile(self.filename) as reader:
            yield from reader.iter_batches(batch_size=self.batch_size)

    def poll_schema(self) -> pa.Schema:
        with pa.parquet.ParquetFile(self.filename) as reader:
            return reader.schema_arrow


class PyArrowTableDataSource(DataSourceNode):
    """Read data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    This is how the store reads the tables registered in it.
    A table with no rows still emits one empty batch, so that
    the nodes consuming it know the schema of the data.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other nodes."""
        if isinstance(self.table, pa.RecordBatch):
            yield self.table
            return

        batches = self.table.to_batches()
        if not batches:
            yield pa.RecordBatch.from_pylist([], schema=self.table.schema)
        else:
            yield from batches

    def poll_schema(self) -> pa.Schema:
        return self.table.schema
