import pyarrow as pa
import pyarrow.csv as csv
import pyarrow.parquet as pq
import pytest

from plyground import (
    ConnectionError,
    DataLoadError,
    LazyFrame,
    PlygroundError,
    RemoteExecutionError,
    Session,
    TableExistsError,
    TableStore,
    connect,
)

FLIGHTS = pa.table({"carrier": ["AA", "DL"], "dep_delay": [1200, 5]})


@pytest.mark.parametrize("target", ["local", "local[4]", "local[*]"])
def test_connect_local(target):
    sc = connect(target)
    assert isinstance(sc, Session)
    assert sc.is_open
    assert repr(sc) == f"<Session {target} (open)>"


@pytest.mark.parametrize("target", ["spark://cluster:7077", "local[0]", "localhost", ""])
def test_connect_unsupported_target(target):
    with pytest.raises(ConnectionError):
        connect(target)


def test_connection_error_hierarchy():
    import builtins

    assert issubclass(ConnectionError, PlygroundError)
    assert issubclass(ConnectionError, builtins.ConnectionError)


@pytest.mark.parametrize(
    "data",
    [
        FLIGHTS,
        FLIGHTS.to_batches()[0],
        {"carrier": ["AA", "DL"], "dep_delay": [1200, 5]},
        [{"carrier": "AA", "dep_delay": 1200}, {"carrier": "DL", "dep_delay": 5}],
    ],
)
def test_copy_to(data):
    with connect() as sc:
        flights = sc.copy_to("flights", data)
        assert isinstance(flights, LazyFrame)
        assert flights.columns == ("carrier", "dep_delay")
        assert flights.collect().to_arrow().equals(FLIGHTS)


def test_copy_to_unsupported_data():
    with connect() as sc:
        with pytest.raises(TypeError):
            sc.copy_to("flights", "carrier,dep_delay")


def test_copy_to_existing_name():
    with connect() as sc:
        sc.copy_to("flights", FLIGHTS)
        with pytest.raises(TableExistsError):
            sc.copy_to("flights", FLIGHTS)
        replaced = sc.copy_to("flights", {"year": [2013]}, overwrite=True)
        assert replaced.columns == ("year",)


def test_read_csv_and_parquet(tmp_path):
    csv.write_csv(FLIGHTS, tmp_path / "flights.csv")
    pq.write_table(FLIGHTS, tmp_path / "flights.parquet")

    with connect() as sc:
        from_csv = sc.read_csv("flights_csv", str(tmp_path / "flights.csv"))
        from_parquet = sc.read_parquet("flights_parquet", str(tmp_path / "flights.parquet"))
        assert from_csv.collect().to_pydict() == FLIGHTS.to_pydict()
        assert from_parquet.collect().to_pydict() == FLIGHTS.to_pydict()
        assert sc.list_tables() == ["flights_csv", "flights_parquet"]


def test_table_and_drop():
    with connect() as sc:
        sc.copy_to("flights", FLIGHTS)
        assert sc.table("flights").columns == ("carrier", "dep_delay")
        sc.drop("flights")
        assert sc.list_tables() == []
        with pytest.raises(RemoteExecutionError):
            sc.table("flights")


def test_execute():
    with connect() as sc:
        sc.copy_to("flights", FLIGHTS)
        result = sc.execute({"type": "limit", "n": 1, "child": {"type": "source", "table": "flights"}})
        assert result.to_pydict() == {"carrier": ["AA"], "dep_delay": [1200]}


def test_close_drops_registered_tables():
    store = TableStore()
    store.register_table("airlines", pa.table({"carrier": ["AA"]}))

    with connect(store=store) as sc:
        sc.copy_to("flights", FLIGHTS)
        assert store.list_tables() == ["airlines", "flights"]

    assert not sc.is_open
    assert repr(sc) == "<Session local (closed)>"
    assert store.list_tables() == ["airlines"]


def test_close_is_idempotent():
    sc = connect()
    sc.close()
    sc.close()
    assert not sc.is_open


@pytest.mark.parametrize(
    "operation, args",
    [
        ("copy_to", ("flights", FLIGHTS)),
        ("read_csv", ("flights", "flights.csv")),
        ("read_parquet", ("flights", "flights.parquet")),
        ("table", ("flights",)),
        ("drop", ("flights",)),
        ("list_tables", ()),
        ("execute", ({"type": "source", "table": "flights"},)),
    ],
)
def test_closed_session(operation, args):
    sc = connect()
    sc.close()
    with pytest.raises(ConnectionError, match="is closed"):
        getattr(sc, operation)(*args)


def test_frames_of_closed_session():
    sc = connect()
    flights = sc.copy_to("flights", FLIGHTS)
    sc.close()
    with pytest.raises(ConnectionError):
        flights.collect()
    assert str(flights).endswith("# Error: Session with local is closed")


def test_sessions_sharing_a_store():
    store = TableStore()
    first = connect(store=store)
    second = connect(store=store)
    first.copy_to("flights", FLIGHTS)
    assert second.table("flights").collect().num_rows == 2
    first.close()
    assert second.list_tables() == []
    second.close()


def test_read_unreadable_files(tmp_path):
    broken = tmp_path / "broken.parquet"
    broken.write_text("carrier,dep_delay\nAA,1200\n")

    with connect() as sc:
        with pytest.raises(DataLoadError, match="Unable to load"):
            sc.read_csv("flights", str(tmp_path / "missing.csv"))
        with pytest.raises(DataLoadError):
            sc.read_parquet("flights", str(broken))
        assert sc.list_tables() == []
