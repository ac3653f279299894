import pyarrow as pa
import pyarrow.compute as pc
import pytest

from plyground.compute.base import ColumnRef, Literal
from plyground.compute.expressions import FunctionCallExpression, as_column


@pytest.fixture
def sample_batch():
    return pa.RecordBatch.from_arrays(
        [pa.array([1, 2, 3, 4, 5]), pa.array(["aa", "dl", "ua", "b6", "ev"])],
        names=["dep_delay", "carrier"],
    )


def test_function_call_expression_init():
    expr = FunctionCallExpression(pc.add, ColumnRef("dep_delay"), 1)
    assert expr.func == pc.add
    assert len(expr.args) == 2
    assert isinstance(expr.args[0], ColumnRef)
    assert expr.args[1] == 1


def test_function_call_expression_str():
    expr = FunctionCallExpression(pc.add, ColumnRef("dep_delay"), 1)
    assert str(expr) == "pyarrow.compute.add(ColumnRef(dep_delay),1)"


def test_literal_str():
    assert str(Literal(1000)) == "Literal(<pyarrow.Int64Scalar: 1000>)"


def test_function_call_expression_apply_simple(sample_batch):
    expr = FunctionCallExpression(pc.add, ColumnRef("dep_delay"), 1)
    result = expr.apply(sample_batch)
    expected = pa.array([2, 3, 4, 5, 6])
    assert result.equals(expected)


def test_function_call_expression_apply_nested(sample_batch):
    inner_expr = FunctionCallExpression(pc.multiply, ColumnRef("dep_delay"), 2)
    outer_expr = FunctionCallExpression(pc.add, inner_expr, Literal(1))
    result = outer_expr.apply(sample_batch)
    expected = pa.array([3, 5, 7, 9, 11])
    assert result.equals(expected)


def test_function_call_expression_apply_string_ops(sample_batch):
    expr = FunctionCallExpression(pc.utf8_upper, ColumnRef("carrier"))
    result = expr.apply(sample_batch)
    expected = pa.array(["AA", "DL", "UA", "B6", "EV"])
    assert result.equals(expected)


def test_function_call_expression_apply_comparison(sample_batch):
    expr = FunctionCallExpression(pc.greater, ColumnRef("dep_delay"), Literal(3))
    result = expr.apply(sample_batch)
    expected = pa.array([False, False, False, True, True])
    assert result.equals(expected)


def test_function_call_expression_apply_multiple_args(sample_batch):
    expr = FunctionCallExpression(
        pc.if_else,
        FunctionCallExpression(pc.greater, ColumnRef("dep_delay"), 3),
        ColumnRef("carrier"),
        "x",
    )
    result = expr.apply(sample_batch)
    expected = pa.array(["x", "x", "x", "b6", "ev"])
    assert result.equals(expected)


def test_function_call_expression_apply_null_handling(sample_batch):
    delays_with_null = pa.array([1, None, 3, 4, 5])
    batch_with_null = pa.RecordBatch.from_arrays(
        [delays_with_null, sample_batch["carrier"]], names=["dep_delay", "carrier"]
    )
    expr = FunctionCallExpression(pc.add, ColumnRef("dep_delay"), 1)
    result = expr.apply(batch_with_null)
    expected = pa.array([2, None, 4, 5, 6])
    assert result.equals(expected)


def test_function_call_expression_apply_invalid_column():
    batch = pa.RecordBatch.from_arrays([pa.array([1, 2, 3])], names=["dep_delay"])
    expr = FunctionCallExpression(pc.add, ColumnRef("non_existent"), 1)
    with pytest.raises(KeyError):
        expr.apply(batch)


def test_function_call_expression_apply_type_mismatch():
    batch = pa.RecordBatch.from_arrays([pa.array(["a", "b", "c"])], names=["carrier"])
    expr = FunctionCallExpression(pc.add, ColumnRef("carrier"), 1)
    with pytest.raises(pa.ArrowNotImplementedError):
        expr.apply(batch)


def test_as_column_broadcasts_scalars(sample_batch):
    expr = FunctionCallExpression(pc.add, Literal(1), Literal(2))
    result = as_column(sample_batch, expr.apply(sample_batch))
    assert result.to_pylist() == [3, 3, 3, 3, 3]


def test_as_column_keeps_arrays(sample_batch):
    column = as_column(sample_batch, ColumnRef("dep_delay").apply(sample_batch))
    assert column.equals(sample_batch["dep_delay"])


def test_expressions_repr_as_str():
    expr = FunctionCallExpression(pc.multiply, ColumnRef("distance"), Literal(60))
    assert repr(expr) == str(expr)
    assert repr({"speed": ColumnRef("speed")}) == "{'speed': ColumnRef(speed)}"
