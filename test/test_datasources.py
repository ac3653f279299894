import os
import tempfile

import pyarrow as pa
import pyarrow.csv as csv
import pyarrow.parquet as pq
import pytest

from plyground.compute.datasources import (
    CSVDataSource,
    ParquetDataSource,
    PyArrowTableDataSource,
)

# Mock data for testing
MOCK_PYARROW_TABLE = pa.table(
    {"year": [2013, 2013, 2013], "month": [1, 5, 12], "dep_delay": [2, 1005, -3]}
)

MOCK_CSV_FILE = tempfile.NamedTemporaryFile(delete=False, mode="w+", suffix=".csv")
MOCK_PARQUET_FILE = tempfile.NamedTemporaryFile(
    delete=False, mode="w+", suffix=".parquet"
)


def setup_module():
    csv.write_csv(MOCK_PYARROW_TABLE, MOCK_CSV_FILE.name)
    MOCK_CSV_FILE.close()
    pq.write_table(MOCK_PYARROW_TABLE, MOCK_PARQUET_FILE.name)
    MOCK_PARQUET_FILE.close()


def teardown_module():
    os.unlink(MOCK_CSV_FILE.name)
    os.unlink(MOCK_PARQUET_FILE.name)


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_str",
    [
        (
            CSVDataSource,
            (MOCK_CSV_FILE.name, None),
            f"CSVDataSource({MOCK_CSV_FILE.name}, block_size=None)",
        ),
        (
            ParquetDataSource,
            (MOCK_PARQUET_FILE.name, None),
            f"ParquetDataSource({MOCK_PARQUET_FILE.name}, batch_size=65536)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            "PyArrowTableDataSource(columns=['year', 'month', 'dep_delay'], rows=3)",
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            "PyArrowTableDataSource(columns=['year', 'month', 'dep_delay'], rows=3)",
        ),
    ],
)
def test_init_and_str(data_source_class, init_args, expected_str):
    data_source = data_source_class(*init_args)
    assert str(data_source) == expected_str


@pytest.mark.parametrize(
    "data_source_class, init_args, expected_batches",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name, None), MOCK_PYARROW_TABLE.to_batches()),
        (
            ParquetDataSource,
            (MOCK_PARQUET_FILE.name, None),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE,),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
        (
            PyArrowTableDataSource,
            (MOCK_PYARROW_TABLE.to_batches()[0],),
            MOCK_PYARROW_TABLE.to_batches(),
        ),
    ],
)
def test_batches(data_source_class, init_args, expected_batches):
    data_source = data_source_class(*init_args)
    batches = list(data_source.batches())
    assert len(batches) == len(expected_batches)
    for batch, expected_batch in zip(batches, expected_batches):
        assert batch.equals(expected_batch)


@pytest.mark.parametrize(
    "data_source_class, init_args",
    [
        (CSVDataSource, (MOCK_CSV_FILE.name,)),
        (ParquetDataSource, (MOCK_PARQUET_FILE.name,)),
        (PyArrowTableDataSource, (MOCK_PYARROW_TABLE,)),
    ],
)
def test_poll_schema(data_source_class, init_args):
    schema = data_source_class(*init_args).poll_schema()
    assert schema.names == ["year", "month", "dep_delay"]


def test_empty_table_emits_schema():
    empty = pa.table({"carrier": pa.array([], type=pa.string())})
    batches = list(PyArrowTableDataSource(empty).batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema == empty.schema
