import pyarrow as pa
import pytest

from plyground.compute.base import QueryPlanNode
from plyground.compute.pagination import PaginateNode


class CountingNode(QueryPlanNode):
    """Emit the given batches and record how many were consumed."""

    def __init__(self, batches):
        self._batches = batches
        self.consumed = 0

    def batches(self):
        for batch in self._batches:
            self.consumed += 1
            yield batch

    def __str__(self):
        return "CountingNode"


def _batches(*sizes):
    start = 0
    batches = []
    for size in sizes:
        batches.append(pa.record_batch({"flight": list(range(start, start + size))}))
        start += size
    return batches


def _values(node):
    return [v for batch in node.batches() for v in batch.column(0).to_pylist()]


@pytest.mark.parametrize(
    "offset, length, expected",
    [
        (0, 3, [0, 1, 2]),
        (2, 3, [2, 3, 4]),
        (3, 4, [3, 4, 5, 6]),
        (8, 5, [8, 9]),
        (0, 0, []),
        (20, 5, []),
    ],
)
def test_paginate(offset, length, expected):
    node = PaginateNode(offset, length, CountingNode(_batches(4, 4, 2)))
    assert _values(node) == expected


def test_paginate_stops_consuming_child():
    child = CountingNode(_batches(4, 4, 2))
    assert _values(PaginateNode(0, 3, child)) == [0, 1, 2]
    assert child.consumed == 1


def test_empty_page_keeps_schema():
    node = PaginateNode(0, 0, CountingNode(_batches(4)))
    batches = list(node.batches())
    assert len(batches) == 1
    assert batches[0].num_rows == 0
    assert batches[0].schema.names == ["flight"]


def test_negative_arguments():
    with pytest.raises(ValueError):
        PaginateNode(-1, 2, CountingNode([]))
    with pytest.raises(ValueError):
        PaginateNode(0, -2, CountingNode([]))


def test_paginate_str():
    assert str(PaginateNode(2, 3, CountingNode([]))) == "PaginateNode(2:5, CountingNode)"
