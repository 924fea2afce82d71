"""
Data extraction strategies.

A column gets its values from records through an extractor:

- ``StatelessExtractor``: a pure ``fn(record)``.
- ``StatefulExtractor``: ``step(record, state)`` plus ``init_state()`` and an
  optional ``aggregator(accumulated_key, state)`` feeding the aggregate row.

State belongs to one column for one render call. The table formatter calls
``initialize()`` at the start of every render and threads the returned object
through ``extract`` in record order; it is discarded when the call returns.

The ``summing``/``counting``/``minimum``/``maximum``/``averaging`` helpers
build the common stateful extractors.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .exceptions import MissingStateInitializerError

D = TypeVar("D")
S = TypeVar("S")


@dataclass(frozen=True)
class StatelessExtractor(Generic[D]):
    """Extract a value from each record without memory across records."""

    fn: Callable[[D], Any]

    @property
    def has_aggregator(self) -> bool:
        return False

    def initialize(self) -> None:
        return None

    def extract(self, record: D, state: None = None) -> Any:
        return self.fn(record)

    def aggregate(self, key: Any, state: None = None) -> Any:
        return None


@dataclass(frozen=True)
class StatefulExtractor(Generic[D, S]):
    """
    Extract values while accumulating column-private state.

    Attributes:
        step: Called once per non-null record with the running state; returns
            the cell value and may mutate the state
        init_state: Creates a fresh state at the start of each render call
        aggregator: Produces the aggregate-row value from the final state;
            receives the key of the aggregate row (None for the closing row)
    """

    step: Callable[[D, S], Any]
    init_state: Callable[[], S] | None
    aggregator: Callable[[Any, S], Any] | None = None

    @property
    def has_aggregator(self) -> bool:
        return self.aggregator is not None

    def initialize(self) -> S:
        if self.init_state is None:
            raise MissingStateInitializerError()
        return self.init_state()

    def extract(self, record: D, state: S) -> Any:
        return self.step(record, state)

    def aggregate(self, key: Any, state: S) -> Any:
        if self.aggregator is None:
            return None
        return self.aggregator(key, state)


Extractor = StatelessExtractor[Any] | StatefulExtractor[Any, Any]


# ---------------------------------------------------------------------------
# Ready-made aggregations
# ---------------------------------------------------------------------------


@dataclass
class Accumulator:
    """Running figures shared by the ready-made aggregations."""

    total: Any = None
    count: int = 0
    lowest: Any = None
    highest: Any = None

    def add(self, value: Any) -> None:
        if value is None:
            return
        self.total = value if self.total is None else self.total + value
        self.count += 1
        if self.lowest is None or value < self.lowest:
            self.lowest = value
        if self.highest is None or value > self.highest:
            self.highest = value


def _accumulating(
    fn: Callable[[Any], Any], result: Callable[[Accumulator], Any]
) -> StatefulExtractor[Any, Accumulator]:
    def step(record: Any, state: Accumulator) -> Any:
        value = fn(record)
        state.add(value)
        return value

    return StatefulExtractor(
        step=step,
        init_state=Accumulator,
        aggregator=lambda _key, state: result(state),
    )


def summing(fn: Callable[[Any], Any]) -> StatefulExtractor[Any, Accumulator]:
    """Show ``fn(record)`` per row and the sum of all values in the aggregate row."""
    return _accumulating(fn, lambda acc: acc.total if acc.count else 0)


def counting(fn: Callable[[Any], Any] | None = None) -> StatefulExtractor[Any, Accumulator]:
    """
    Count non-null values.

    Without ``fn`` every non-null record counts and its cells stay blank.
    """
    if fn is None:
        return StatefulExtractor(
            step=lambda _record, state: state.add(1),
            init_state=Accumulator,
            aggregator=lambda _key, state: state.count,
        )
    return _accumulating(fn, lambda acc: acc.count)


def minimum(fn: Callable[[Any], Any]) -> StatefulExtractor[Any, Accumulator]:
    """Show ``fn(record)`` per row and the smallest value in the aggregate row."""
    return _accumulating(fn, lambda acc: acc.lowest)


def maximum(fn: Callable[[Any], Any]) -> StatefulExtractor[Any, Accumulator]:
    """Show ``fn(record)`` per row and the largest value in the aggregate row."""
    return _accumulating(fn, lambda acc: acc.highest)


def averaging(fn: Callable[[Any], Any]) -> StatefulExtractor[Any, Accumulator]:
    """Show ``fn(record)`` per row and the mean of the non-null values."""
    return _accumulating(fn, lambda acc: acc.total / acc.count if acc.count else None)
