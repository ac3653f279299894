"""The lazy dataframe object itself."""

from typing import TYPE_CHECKING, Any, Iterable, Self

from .. import config
from ..exceptions import InvalidColumn, PlygroundError
from ..plan import (
    Aggregate,
    Arrange,
    Column,
    Expr,
    Filter,
    Limit,
    Mutate,
    PlanStep,
    Reducer,
    Rename,
    Select,
    SortKey,
    n,
    wrap,
)
from ..utils import tabulate
from .realized import Realized

if TYPE_CHECKING:
    from ..session import Session

log = config.get_logger()


def _column_name(column: str | Column) -> str:
    if isinstance(column, Column):
        return column.name
    if isinstance(column, str):
        return column
    raise TypeError(f"Expected a column name or col(), got {column!r}")


class LazyFrame:
    """A table of the store with a chain of verbs applied to it.

    The lazy frame holds no data: every verb returns a new
    ``LazyFrame`` with one more step in its plan and nothing
    is sent to the store until :meth:`collect` or :meth:`preview`
    are invoked, or the frame is printed.

    Columns are checked while the plan is built, so
    referencing a column that doesn't exist fails right away
    with :class:`plyground.exceptions.InvalidColumn`.
    """

    def __init__(
        self, session: "Session", plan: PlanStep, groups: tuple[str, ...] = ()
    ) -> None:
        """
        :param session: The session with the store the plan will be submitted to.
        :param plan: The last step of the query plan.
        :param groups: The grouping keys used by :meth:`summarise`.
        """
        if not isinstance(plan, PlanStep):
            raise ValueError("Invalid input, expected a PlanStep")

        self.session = session
        self.plan = plan
        self.groups = tuple(groups)

    @property
    def columns(self) -> tuple[str, ...]:
        """Names of the columns the query will return."""
        return self.plan.columns

    def _derive(self, plan: PlanStep, groups: Iterable[str] | None = None) -> Self:
        return self.__class__(
            self.session, plan, self.groups if groups is None else tuple(groups)
        )

    def _check_columns(
        self, names: Iterable[str], available: Iterable[str] | None = None
    ) -> None:
        available = tuple(self.columns if available is None else available)
        for name in names:
            if name not in available:
                raise InvalidColumn(name, available)

    def select(self, *columns: str | Column) -> Self:
        """Keep only the given columns.

        Grouping columns are always kept, if they are not
        part of the selection they are added in front of it.
        """
        names = [_column_name(c) for c in columns]
        if not names:
            raise ValueError("select requires at least one column")
        self._check_columns(names)

        missing_groups = [g for g in self.groups if g not in names]
        if missing_groups:
            log.info("Adding missing grouping columns: %s", ", ".join(missing_groups))
        names = list(dict.fromkeys(missing_groups + names))
        return self._derive(Select(self.plan, tuple(names)))

    def filter(self, *predicates: Expr) -> Self:
        """Keep only the rows for which all the predicates are true.

        >>> from plyground import connect, col
        >>> with connect() as sc:
        ...     flights = sc.copy_to("flights", {"dep_delay": [1200, 5], "carrier": ["AA", "DL"]})
        ...     flights.filter(col("dep_delay") > 1000).collect().to_pylist()
        [{'dep_delay': 1200, 'carrier': 'AA'}]
        """
        if not predicates:
            raise ValueError("filter requires at least one predicate")

        predicate = None
        for p in predicates:
            if not isinstance(p, Expr):
                raise TypeError(f"Filter predicates must be expressions, got {p!r}")
            self._check_columns(sorted(p.columns()))
            predicate = p if predicate is None else predicate & p
        return self._derive(Filter(self.plan, predicate))

    def arrange(self, *keys: str | Column | SortKey) -> Self:
        """Order rows by the given keys, use :func:`plyground.desc` for descending order."""
        if not keys:
            raise ValueError("arrange requires at least one key")

        sort_keys = tuple(
            key if isinstance(key, SortKey) else SortKey(_column_name(key)) for key in keys
        )
        self._check_columns(key.column for key in sort_keys)
        return self._derive(Arrange(self.plan, sort_keys))

    def mutate(self, **exprs: Any) -> Self:
        """Add new columns, or replace existing ones, computed from expressions.

        Each expression can reference columns created by
        the expressions preceding it in the same call.
        """
        if not exprs:
            raise ValueError("mutate requires at least one expression")

        available = list(self.columns)
        steps = []
        for name, expr in exprs.items():
            expr = wrap(expr)
            self._check_columns(sorted(expr.columns()), available)
            if name not in available:
                available.append(name)
            steps.append((name, expr))
        return self._derive(Mutate(self.plan, tuple(steps)))

    def rename(self, **mapping: str) -> Self:
        """Rename columns, in the form ``new_name="old_name"``."""
        if not mapping:
            raise ValueError("rename requires at least one column")

        self._check_columns(mapping.values())
        if len(set(mapping.values())) != len(mapping):
            raise ValueError(f"rename uses the same column more than once: {mapping}")
        renames = tuple((old, new) for new, old in mapping.items())
        plan = Rename(self.plan, renames)
        if len(set(plan.columns)) != len(plan.columns):
            raise ValueError(f"rename would produce duplicate columns: {list(plan.columns)}")

        lookup = dict(renames)
        return self._derive(plan, groups=(lookup.get(g, g) for g in self.groups))

    def group_by(self, *keys: str | Column) -> Self:
        """Group rows by the given columns, replacing any previous grouping.

        Grouping does nothing by itself, it changes what
        :meth:`summarise` and :meth:`count` compute.
        """
        names = [_column_name(k) for k in keys]
        if not names:
            raise ValueError("group_by requires at least one column")
        self._check_columns(names)
        return self._derive(self.plan, groups=dict.fromkeys(names))

    def ungroup(self) -> Self:
        return self._derive(self.plan, groups=())

    def summarise(self, **reducers: Reducer) -> Self:
        """Reduce each group to a single row.

        Without grouping the whole table is reduced to one row.
        The result is not grouped anymore.

        >>> from plyground import connect, mean
        >>> with connect() as sc:
        ...     flights = sc.copy_to("flights", {"dep_delay": [10, 20, 30]})
        ...     flights.summarise(delay=mean("dep_delay")).collect().to_pylist()
        [{'delay': 20.0}]
        """
        if not reducers and not self.groups:
            raise ValueError("summarise requires at least one reducer")

        for name, reducer in reducers.items():
            if not isinstance(reducer, Reducer):
                raise TypeError(f"summarise expects reducers like mean(), got {reducer!r}")
            if name in self.groups:
                raise ValueError(f"Column {name} is a grouping column")
            if reducer.column is not None:
                self._check_columns([reducer.column])

        plan = Aggregate(self.plan, self.groups, tuple(reducers.items()))
        return self._derive(plan, groups=())

    summarize = summarise

    def count(self, *keys: str | Column, name: str = "n") -> Self:
        """Count the rows for each combination of the given keys.

        Without keys, the current grouping is used.
        """
        frame = self.group_by(*keys) if keys else self
        return frame.summarise(**{name: n()})

    def head(self, n: int = 6) -> Self:
        """Keep only the first ``n`` rows."""
        return self._derive(Limit(self.plan, n))

    def collect(self) -> Realized:
        """Execute the query and return all its rows.

        Blocks until the store returned the whole result.
        """
        return Realized(self.session.execute(self.plan.to_dict()))

    def preview(self, n: int | None = None) -> Realized:
        """Execute the query fetching at most ``n`` rows.

        :param n: How many rows to fetch, defaults to
                  :func:`plyground.config.get_preview_rows`.
        """
        if n is None:
            n = config.get_preview_rows()
        return Realized(self.session.execute(Limit(self.plan, n).to_dict()))

    def explain(self) -> str:
        """Describe the steps of the query, the last one first."""
        return self.plan.explain()

    def to_dict(self) -> dict:
        """The request that will be submitted to the store."""
        return self.plan.to_dict()

    def __str__(self) -> str:
        header = [
            f"# Source: lazy query [?? x {len(self.columns)}]",
            f"# Database: plyground {self.session.target}",
        ]
        if self.groups:
            header.append(f"# Groups: {', '.join(self.groups)}")

        rows = config.get_preview_rows()
        try:
            # One more row than displayed tells if more rows exist.
            preview = self.preview(rows + 1).to_arrow()
        except PlygroundError as e:
            return "\n".join(header + [f"# Error: {e}"])

        text = tabulate.tabulate(preview, max_rows=rows, more_rows_hint=False)
        if preview.num_rows > rows:
            text += "\n# ... with more rows"
        return "\n".join(header + [text])

    __repr__ = __str__
