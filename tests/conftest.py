"""Pytest fixtures for plaintable tests."""

from dataclasses import dataclass
from datetime import date

import pytest

from plaintable import (
    BorderFormatter,
    BorderStyle,
    ColumnBuilder,
    TableFormatter,
    TableFormatterBuilder,
    summing,
)


@dataclass
class Fruit:
    """Sample record used across the tests."""

    name: str
    qty: float | None
    price: float
    picked: date | None = None


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PLAINTABLE_* settings from the developer shell out of the tests."""
    monkeypatch.delenv("PLAINTABLE_BORDER_STYLE", raising=False)
    monkeypatch.delenv("PLAINTABLE_LOG_LEVEL", raising=False)


@pytest.fixture
def fruits() -> list[Fruit]:
    """Three fruits with quantities 1, 2 and 4."""
    return [
        Fruit("apple", 1.0, 0.5, date(2024, 9, 1)),
        Fruit("banana", 2.0, 0.25, date(2024, 9, 2)),
        Fruit("cherry", 4.0, 3.0, None),
    ]


@pytest.fixture
def ascii_border() -> BorderFormatter:
    """Single-line ASCII border."""
    return BorderFormatter.from_style(BorderStyle.ASCII)


@pytest.fixture
def fruit_table(ascii_border: BorderFormatter) -> TableFormatter:
    """Name column plus a right aligned, summed quantity column."""
    return (
        TableFormatterBuilder()
        .border(ascii_border)
        .show_aggregation()
        .stateless("Name", lambda f: f.name, aggregate_constant="Total")
        .column(
            ColumnBuilder()
            .title("Qty")
            .extractor(summing(lambda f: f.qty))
            .value_type(float)
            .align("right")
        )
        .build()
    )
