"""Expressions used by the verbs of a lazy query.

Expressions are never evaluated by the client. Writing
``col("dep_delay") > 1000`` builds a small tree that describes
the computation, the tree is serialized with :meth:`Expr.to_dict`
and the store evaluates it row by row.

>>> predicate = (col("dep_delay") > 1000) & (col("carrier") == "AA")
>>> str(predicate)
"((dep_delay > 1000) & (carrier == 'AA'))"
>>> sorted(predicate.columns())
['carrier', 'dep_delay']
>>> (col("distance") / col("air_time") * 60).to_dict()["op"]
'*'
"""

from dataclasses import dataclass
from typing import Any

__all__ = ("Expr", "Column", "Literal", "Call", "col", "lit", "wrap")

JSON_SCALARS = (bool, int, float, str, type(None))

BINARY_OPERATORS = ("+", "-", "*", "/", "==", "!=", ">", ">=", "<", "<=", "&", "|")
UNARY_OPERATORS = ("~", "neg", "is_null")


class Expr:
    """Base class of all expressions.

    Python operators on expressions build new expressions,
    so they can't be used as booleans: ``a and b`` must
    be written as ``a & b``.
    """

    def columns(self) -> set[str]:
        """Names of the columns the expression reads."""
        raise NotImplementedError

    def to_dict(self) -> dict:
        """Serialize the expression for submission to the store."""
        raise NotImplementedError

    def __bool__(self) -> bool:
        raise TypeError(
            "Expressions can't be used as booleans, use & | ~ instead of and, or, not"
        )

    def _binary(self, op: str, other: Any, reverse: bool = False) -> "Call":
        other = wrap(other)
        return Call(op, (other, self) if reverse else (self, other))

    def __add__(self, other: Any) -> "Call":
        return self._binary("+", other)

    def __radd__(self, other: Any) -> "Call":
        return self._binary("+", other, reverse=True)

    def __sub__(self, other: Any) -> "Call":
        return self._binary("-", other)

    def __rsub__(self, other: Any) -> "Call":
        return self._binary("-", other, reverse=True)

    def __mul__(self, other: Any) -> "Call":
        return self._binary("*", other)

    def __rmul__(self, other: Any) -> "Call":
        return self._binary("*", other, reverse=True)

    def __truediv__(self, other: Any) -> "Call":
        return self._binary("/", other)

    def __rtruediv__(self, other: Any) -> "Call":
        return self._binary("/", other, reverse=True)

    def __eq__(self, other: Any) -> "Call":  # type: ignore[override]
        return self._binary("==", other)

    def __ne__(self, other: Any) -> "Call":  # type: ignore[override]
        return self._binary("!=", other)

    def __gt__(self, other: Any) -> "Call":
        return self._binary(">", other)

    def __ge__(self, other: Any) -> "Call":
        return self._binary(">=", other)

    def __lt__(self, other: Any) -> "Call":
        return self._binary("<", other)

    def __le__(self, other: Any) -> "Call":
        return self._binary("<=", other)

    def __and__(self, other: Any) -> "Call":
        return self._binary("&", other)

    def __rand__(self, other: Any) -> "Call":
        return self._binary("&", other, reverse=True)

    def __or__(self, other: Any) -> "Call":
        return self._binary("|", other)

    def __ror__(self, other: Any) -> "Call":
        return self._binary("|", other, reverse=True)

    def __invert__(self) -> "Call":
        return Call("~", (self,))

    def __neg__(self) -> "Call":
        return Call("neg", (self,))

    def is_null(self) -> "Call":
        return Call("is_null", (self,))

    __hash__ = object.__hash__


@dataclass(frozen=True, eq=False, repr=False)
class Column(Expr):
    """Reference to a column of the upstream table."""

    name: str

    def columns(self) -> set[str]:
        return {self.name}

    def to_dict(self) -> dict:
        return {"type": "column", "name": self.name}

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"col({self.name!r})"


@dataclass(frozen=True, eq=False, repr=False)
class Literal(Expr):
    """A constant value, limited to what JSON can represent."""

    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.value, JSON_SCALARS):
            raise TypeError(
                f"Unsupported literal {self.value!r} of type {type(self.value).__name__}"
            )

    def columns(self) -> set[str]:
        return set()

    def to_dict(self) -> dict:
        return {"type": "literal", "value": self.value}

    def __str__(self) -> str:
        return repr(self.value)

    def __repr__(self) -> str:
        return f"lit({self.value!r})"


@dataclass(frozen=True, eq=False, repr=False)
class Call(Expr):
    """An operator applied to one or two expressions."""

    op: str
    args: tuple[Expr, ...]

    def __post_init__(self) -> None:
        arity = 2 if self.op in BINARY_OPERATORS else 1
        if self.op not in BINARY_OPERATORS + UNARY_OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op}")
        if len(self.args) != arity:
            raise ValueError(f"Operator {self.op} expects {arity} arguments")

    def columns(self) -> set[str]:
        return set().union(*(arg.columns() for arg in self.args))

    def to_dict(self) -> dict:
        return {
            "type": "call",
            "op": self.op,
            "args": [arg.to_dict() for arg in self.args],
        }

    def __str__(self) -> str:
        if len(self.args) == 2:
            return f"({self.args[0]} {self.op} {self.args[1]})"
        if self.op == "~":
            return f"~{self.args[0]}"
        if self.op == "neg":
            return f"-{self.args[0]}"
        return f"{self.op}({self.args[0]})"

    __repr__ = __str__


def col(name: str) -> Column:
    """Reference a column by name."""
    return Column(name)


def lit(value: Any) -> Literal:
    """Build a literal value."""
    return Literal(value)


def wrap(value: Any) -> Expr:
    """Turn plain python values into literals, leaving expressions untouched."""
    if isinstance(value, Expr):
        return value
    return Literal(value)
