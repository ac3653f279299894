import dataclasses

import pytest

from plyground.plan import (
    Aggregate,
    Arrange,
    Filter,
    Limit,
    Mutate,
    Rename,
    Select,
    Source,
    asc,
    col,
    desc,
    mean,
    n,
)
from plyground.plan import count as count_reducer
from plyground.plan import sum as sum_reducer
from plyground.plan.reducers import Reducer

FLIGHTS = Source("flights", ("year", "carrier", "dep_delay", "distance", "air_time"))


def test_source():
    assert FLIGHTS.child is None
    assert FLIGHTS.source is FLIGHTS
    assert FLIGHTS.columns == ("year", "carrier", "dep_delay", "distance", "air_time")
    assert FLIGHTS.to_dict() == {"type": "source", "table": "flights"}


def test_steps_are_immutable():
    step = Select(FLIGHTS, ("carrier",))
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.names = ("year",)


def test_adding_steps_does_not_change_the_child():
    filtered = Filter(FLIGHTS, col("dep_delay") > 1000)
    before = filtered.to_dict()
    limited = Limit(filtered, 3)
    assert limited.child is filtered
    assert filtered.to_dict() == before


def test_select_columns():
    step = Select(FLIGHTS, ("dep_delay", "carrier"))
    assert step.columns == ("dep_delay", "carrier")
    assert step.to_dict()["columns"] == ["dep_delay", "carrier"]


def test_mutate_columns():
    step = Mutate(
        FLIGHTS,
        (
            ("speed", col("distance") / col("air_time") * 60),
            ("year", col("year") + 1),
        ),
    )
    assert step.columns == FLIGHTS.columns + ("speed",)
    assert list(step.to_dict()["columns"]) == ["speed", "year"]
    assert step.describe() == "Mutate(speed = ((distance / air_time) * 60), year = (year + 1))"


def test_rename_columns():
    step = Rename(FLIGHTS, (("carrier", "airline"),))
    assert step.columns == ("year", "airline", "dep_delay", "distance", "air_time")
    assert step.to_dict() == {
        "type": "rename",
        "columns": {"carrier": "airline"},
        "child": {"type": "source", "table": "flights"},
    }
    assert step.describe() == "Rename(airline = carrier)"


def test_filter_keeps_columns():
    step = Filter(FLIGHTS, col("dep_delay") > 1000)
    assert step.columns == FLIGHTS.columns
    assert step.describe() == "Filter((dep_delay > 1000))"


def test_arrange():
    step = Arrange(FLIGHTS, (asc("carrier"), desc(col("dep_delay"))))
    assert step.columns == FLIGHTS.columns
    assert step.to_dict()["keys"] == [
        {"column": "carrier", "descending": False},
        {"column": "dep_delay", "descending": True},
    ]
    assert step.describe() == "Arrange(carrier, desc(dep_delay))"


def test_aggregate():
    step = Aggregate(
        FLIGHTS,
        ("carrier",),
        (("flights", n()), ("delay", mean("dep_delay"))),
    )
    assert step.columns == ("carrier", "flights", "delay")
    assert step.to_dict()["reducers"] == {
        "flights": {"func": "n", "column": None},
        "delay": {"func": "mean", "column": "dep_delay"},
    }
    assert step.describe() == "Aggregate(keys=[carrier], flights = n(), delay = mean(dep_delay))"


def test_limit_validation():
    assert Limit(FLIGHTS, 0).to_dict()["n"] == 0
    for invalid in (-1, 2.5, True):
        with pytest.raises(ValueError):
            Limit(FLIGHTS, invalid)


def test_nested_to_dict_and_explain():
    plan = Limit(
        Arrange(Filter(FLIGHTS, col("dep_delay") > 1000), (desc("dep_delay"),)), 2
    )
    assert plan.source is FLIGHTS
    assert plan.to_dict() == {
        "type": "limit",
        "n": 2,
        "child": {
            "type": "arrange",
            "keys": [{"column": "dep_delay", "descending": True}],
            "child": {
                "type": "filter",
                "predicate": {
                    "type": "call",
                    "op": ">",
                    "args": [
                        {"type": "column", "name": "dep_delay"},
                        {"type": "literal", "value": 1000},
                    ],
                },
                "child": {"type": "source", "table": "flights"},
            },
        },
    }
    assert plan.explain() == (
        "Limit(2)\n"
        "  Arrange(desc(dep_delay))\n"
        "    Filter((dep_delay > 1000))\n"
        "      Source(flights)"
    )


def test_reducers():
    assert str(n()) == "n()"
    assert str(count_reducer(col("dep_delay"))) == "count(dep_delay)"
    assert sum_reducer("distance").to_dict() == {"func": "sum", "column": "distance"}
    with pytest.raises(ValueError):
        Reducer("median", "dep_delay")
    with pytest.raises(ValueError):
        Reducer("mean")
    with pytest.raises(ValueError):
        Reducer("n", "dep_delay")
    with pytest.raises(TypeError):
        mean(col("a") + 1)
