"""
Table formatting.

``TableFormatter`` is the orchestrator of the render pipeline::

    record --extract--> value --convert--> text --format--> cell --border--> line

Rendering happens in two passes. ``process`` extracts and converts every
cell and resolves the column widths; ``render`` then formats each cell at
its column's resolved width and interleaves the rows with border lines.

Example:
    from plaintable import TableFormatterBuilder

    table = (
        TableFormatterBuilder()
        .heading("Fruits")
        .stateless("Name", lambda r: r["name"])
        .stateless("Qty", lambda r: r["qty"], value_type=int)
        .build()
    )
    print(table.render([{"name": "apple", "qty": 3}]))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .border import BorderFormatter, default_border
from .cell import CellContentFormatter
from .column import ColumnDefinition
from .exceptions import ConfigurationError, NoColumnsError
from .models import SEPARATOR, AggregateRow, LineType, RowType

logger = logging.getLogger(__name__)

_HEADING_FORMATTER = CellContentFormatter()


def _identity(title: str) -> str | None:
    return title


class RowKind(Enum):
    """Kinds of rows in the processed table."""

    HEADER = "header"
    DATA = "data"
    SEPARATOR = "separator"
    SUBTOTAL = "subtotal"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class TableRow:
    """
    One processed row.

    Attributes:
        kind: What the row represents
        cells: Converted cell texts (None = null value); empty for separators
        key: Key of a subtotal row, None otherwise
    """

    kind: RowKind
    cells: tuple[str | None, ...] = ()
    key: Any = None


@dataclass(frozen=True)
class TableData:
    """
    Result of the first rendering pass.

    Attributes:
        header: Header row, or None when every title is blank
        rows: Data, separator and subtotal rows in input order
        aggregate: Closing aggregate row, or None
        widths: Resolved width of every column
    """

    header: TableRow | None
    rows: tuple[TableRow, ...]
    aggregate: TableRow | None
    widths: tuple[int, ...]

    @property
    def data_rows(self) -> list[TableRow]:
        return [row for row in self.rows if row.kind is RowKind.DATA]

    def content_rows(self, include_aggregates: bool = True) -> list[TableRow]:
        """Rows carrying cells, in display order, without the header."""
        kinds = {RowKind.DATA}
        if include_aggregates:
            kinds |= {RowKind.SUBTOTAL, RowKind.AGGREGATE}
        rows = [row for row in self.rows if row.kind in kinds]
        if include_aggregates and self.aggregate is not None:
            rows.append(self.aggregate)
        return rows


@dataclass(frozen=True)
class TableFormatter:
    """
    Immutable table definition able to render any number of record sequences.

    Attributes:
        columns: Ordered column definitions
        border: Glyphs and layout of the frame
        heading: Title bar text; no title bar when None
        show_aggregation: Append an aggregate row when a column aggregates
        separate_data_with_lines: Draw the internal line between data rows
        header_converter: Converts column titles for the header row

    Raises:
        NoColumnsError: If no column is given
        ConfigurationError: If a column is not a ColumnDefinition
    """

    columns: Sequence[ColumnDefinition]
    border: BorderFormatter = field(default_factory=default_border)
    heading: str | None = None
    show_aggregation: bool = False
    separate_data_with_lines: bool = False
    header_converter: Callable[[str], str | None] = _identity

    def __post_init__(self) -> None:
        columns = tuple(self.columns)
        if not columns:
            raise NoColumnsError()
        for index, column in enumerate(columns):
            if not isinstance(column, ColumnDefinition):
                raise ConfigurationError(
                    f"columns[{index}]", column, "must be a ColumnDefinition"
                )
        object.__setattr__(self, "columns", columns)
        if not isinstance(self.border, BorderFormatter):
            raise ConfigurationError("border", self.border, "must be a BorderFormatter")

    @property
    def titles(self) -> list[str]:
        """Column titles after the header converter, None shown as empty."""
        return [self.header_converter(c.title) or "" for c in self.columns]

    @property
    def has_aggregator(self) -> bool:
        return any(column.has_aggregator for column in self.columns)

    def process(self, records: Iterable[Any]) -> TableData:
        """
        Extract and convert every cell and resolve the column widths.

        Each call creates fresh column states; nothing is kept afterwards.

        Args:
            records: Records to show; may contain None (blank row),
                ``SEPARATOR`` and ``AggregateRow`` markers

        Returns:
            The processed table

        Raises:
            ConversionError: If a value cannot be converted
        """
        titles = self.titles
        header = None
        if any(title.strip() for title in titles):
            header = TableRow(RowKind.HEADER, tuple(titles))

        states = [column.initialize() for column in self.columns]
        rows: list[TableRow] = []
        for record in records:
            if record is SEPARATOR:
                rows.append(TableRow(RowKind.SEPARATOR))
            elif isinstance(record, AggregateRow):
                rows.append(self._aggregate_row(RowKind.SUBTOTAL, record.key, states))
            elif record is None:
                rows.append(TableRow(RowKind.DATA, (None,) * len(self.columns)))
            else:
                cells = tuple(
                    column.row_value(record, state)
                    for column, state in zip(self.columns, states)
                )
                rows.append(TableRow(RowKind.DATA, cells))

        aggregate = None
        if self.show_aggregation and self.has_aggregator:
            aggregate = self._aggregate_row(RowKind.AGGREGATE, None, states)

        widths = self._resolve_widths([header, *rows, aggregate])
        logger.debug(
            "Processed table: %d rows, %d columns, widths=%s",
            len(rows),
            len(self.columns),
            list(widths),
        )
        return TableData(header=header, rows=tuple(rows), aggregate=aggregate, widths=widths)

    def render(self, records: Iterable[Any]) -> str:
        """
        Render records into a bordered table.

        Args:
            records: Records to show (see ``process``)

        Returns:
            Newline joined lines without a trailing newline

        Raises:
            ConversionError: If a value cannot be converted; nothing is rendered
        """
        data = self.process(records)
        widths = data.widths
        border = self.border
        lines: list[str] = []

        def rule(line_type: LineType, span: bool = False) -> None:
            line = border.render_line(line_type, widths, span=span)
            if line is not None:
                lines.append(line)

        def row(row_type: RowType, table_row: TableRow) -> None:
            lines.append(border.render_row(row_type, self._format_cells(table_row, widths)))

        if self.heading is not None:
            rule(LineType.TOP_EDGE, span=True)
            title = _HEADING_FORMATTER.format(self.heading, border.spanning_width(widths))
            lines.append(border.render_row(RowType.HEADING, [title]))
            rule(LineType.HEADING)
        else:
            rule(LineType.TOP_EDGE)

        if data.header is not None:
            row(RowType.HEADER, data.header)
            rule(LineType.HEADER)

        previous_was_data = False
        for table_row in data.rows:
            if table_row.kind is RowKind.SEPARATOR:
                rule(LineType.SEPARATOR)
                previous_was_data = False
            elif table_row.kind is RowKind.SUBTOTAL:
                rule(LineType.AGGREGATE)
                row(RowType.AGGREGATE, table_row)
                previous_was_data = False
            else:
                if previous_was_data and self.separate_data_with_lines:
                    rule(LineType.INTERNAL)
                row(RowType.DATA, table_row)
                previous_was_data = True

        if data.aggregate is not None:
            rule(LineType.AGGREGATE)
            row(RowType.AGGREGATE, data.aggregate)

        rule(LineType.BOTTOM_EDGE)
        logger.debug("Rendered table: %d lines", len(lines))
        return "\n".join(lines)

    def _aggregate_row(self, kind: RowKind, key: Any, states: list[Any]) -> TableRow:
        cells = tuple(
            column.aggregate_value(key, state) for column, state in zip(self.columns, states)
        )
        return TableRow(kind, cells, key)

    def _resolve_widths(self, rows: list[TableRow | None]) -> tuple[int, ...]:
        widths = []
        for index, column in enumerate(self.columns):
            formatter = column.cell_formatter
            natural = [
                formatter.natural_width(row.cells[index])
                for row in rows
                if row is not None and row.cells
            ]
            widths.append(formatter.bound_width(max(natural, default=0)))
        return tuple(widths)

    def _format_cells(self, row: TableRow, widths: Sequence[int]) -> list[str]:
        return [
            column.cell_formatter.format(text, width)
            for column, text, width in zip(self.columns, row.cells, widths)
        ]
