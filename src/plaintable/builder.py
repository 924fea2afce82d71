"""Builders for table and column definitions.

Configuration is done via fluent method chaining, then ``build()`` validates
everything and returns an immutable definition.

Example:
    table = (
        TableFormatterBuilder()
        .heading("Stock")
        .border_style("unicode")
        .show_aggregation(True)
        .stateless("Fruit", lambda r: r.name)
        .column(
            ColumnBuilder()
            .title("Qty")
            .extractor(summing(lambda r: r.qty))
            .value_type(int)
            .align("right")
            .build()
        )
        .build()
    )
"""

from collections.abc import Callable
from typing import Any

from .border import BorderFormatter, BorderStyle
from .cell import CellContentFormatter, EllipsisPolicy
from .column import ColumnDefinition
from .converters import Converter, converter_for
from .exceptions import ConfigurationError
from .extractors import Extractor, StatefulExtractor, StatelessExtractor
from .models import Alignment
from .table import TableFormatter


class ColumnBuilder:
    """Fluent builder for a ColumnDefinition.

    Cell formatting options (``align``, ``min_width`` ...) are collected and
    turned into a CellContentFormatter at build time, unless a complete
    formatter is given with ``cell_formatter()``.
    """

    def __init__(self) -> None:
        self._title = ""
        self._extractor: Extractor | None = None
        self._converter: Converter | None = None
        self._value_type: type | None = None
        self._cell_formatter: CellContentFormatter | None = None
        self._cell_options: dict[str, Any] = {}
        self._aggregate_constant: str | None = None
        self._aggregate_converter: Converter | None = None

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def title(self, text: str) -> "ColumnBuilder":
        """Set the header text (default: empty)."""
        self._title = text
        return self

    def extractor(self, value: Extractor | Callable[[Any], Any]) -> "ColumnBuilder":
        """Set the extractor; a plain callable becomes a StatelessExtractor."""
        if not isinstance(value, (StatelessExtractor, StatefulExtractor)):
            value = StatelessExtractor(value)
        self._extractor = value
        return self

    def stateful(
        self,
        step: Callable[[Any, Any], Any],
        init_state: Callable[[], Any] | None,
        aggregator: Callable[[Any, Any], Any] | None = None,
    ) -> "ColumnBuilder":
        """Use a stateful extractor built from its three functions."""
        self._extractor = StatefulExtractor(step, init_state, aggregator)
        return self

    def converter(self, value: Converter) -> "ColumnBuilder":
        """Set the converter explicitly (overrides ``value_type``)."""
        self._converter = value
        return self

    def value_type(self, value: type) -> "ColumnBuilder":
        """Pick the default converter registered for a value type."""
        self._value_type = value
        return self

    def aggregate_constant(self, text: str | None) -> "ColumnBuilder":
        """Show fixed text in aggregate rows (e.g. ``"Total"``)."""
        self._aggregate_constant = text
        return self

    def aggregate_converter(self, value: Converter) -> "ColumnBuilder":
        """Convert aggregator results differently from the row values."""
        self._aggregate_converter = value
        return self

    # -------------------------------------------------------------------------
    # Cell formatting
    # -------------------------------------------------------------------------

    def cell_formatter(self, value: CellContentFormatter) -> "ColumnBuilder":
        """Use a complete cell formatter (ignores the other cell options)."""
        self._cell_formatter = value
        return self

    def align(self, value: Alignment | str) -> "ColumnBuilder":
        """Set the alignment (``left``, ``right`` or ``center``)."""
        if isinstance(value, str):
            try:
                value = Alignment(value.strip().lower())
            except ValueError:
                raise ConfigurationError(
                    "alignment", value, "expected one of: left, right, center"
                ) from None
        self._cell_options["alignment"] = value
        return self

    def min_width(self, value: int) -> "ColumnBuilder":
        """Set the narrowest cell width (default: 0)."""
        self._cell_options["min_width"] = value
        return self

    def max_width(self, value: int | None) -> "ColumnBuilder":
        """Set the widest cell width (default: unbounded)."""
        self._cell_options["max_width"] = value
        return self

    def null_value(self, text: str) -> "ColumnBuilder":
        """Set the text shown for absent values (default: empty)."""
        self._cell_options["null_value"] = text
        return self

    def padding_char(self, char: str) -> "ColumnBuilder":
        """Set the fill character for short cells (default: space)."""
        self._cell_options["padding_char"] = char
        return self

    def ellipsis(self, value: EllipsisPolicy) -> "ColumnBuilder":
        """Set how over-long text is shortened."""
        self._cell_options["ellipsis"] = value
        return self

    def build(self) -> ColumnDefinition:
        """Create the column definition.

        Raises:
            MissingExtractorError: If no extractor was set
            ConfigurationError: If an option is invalid
        """
        converter = self._converter
        if converter is None:
            converter = converter_for(self._value_type)
        formatter = self._cell_formatter or CellContentFormatter(**self._cell_options)
        return ColumnDefinition(
            title=self._title,
            extractor=self._extractor,  # type: ignore[arg-type]
            converter=converter,
            cell_formatter=formatter,
            aggregate_constant=self._aggregate_constant,
            aggregate_converter=self._aggregate_converter,
        )


class TableFormatterBuilder:
    """Fluent builder for a TableFormatter.

    All configuration methods return ``self`` for chaining. Columns appear in
    the order they are added.
    """

    def __init__(self) -> None:
        self._columns: list[ColumnDefinition] = []
        self._border: BorderFormatter | None = None
        self._heading: str | None = None
        self._show_aggregation = False
        self._separate_data_with_lines = False
        self._header_converter: Callable[[str], str | None] | None = None

    # -------------------------------------------------------------------------
    # Table layout
    # -------------------------------------------------------------------------

    def heading(self, text: str | None) -> "TableFormatterBuilder":
        """Set the title bar text; any non-None value enables the title bar."""
        self._heading = text
        return self

    def show_aggregation(self, enabled: bool = True) -> "TableFormatterBuilder":
        """Enable/disable the closing aggregate row (default: False)."""
        self._show_aggregation = enabled
        return self

    def separate_data_with_lines(self, enabled: bool = True) -> "TableFormatterBuilder":
        """Enable/disable lines between data rows (default: False)."""
        self._separate_data_with_lines = enabled
        return self

    def border(self, value: BorderFormatter) -> "TableFormatterBuilder":
        """Use a custom border formatter."""
        self._border = value
        return self

    def border_style(self, style: BorderStyle | str, **overrides: Any) -> "TableFormatterBuilder":
        """Use a predefined border style (default: ``ascii_double``)."""
        self._border = BorderFormatter.from_style(style, **overrides)
        return self

    def header_converter(self, value: Callable[[str], str | None]) -> "TableFormatterBuilder":
        """Convert column titles before they are shown (e.g. ``str.upper``)."""
        self._header_converter = value
        return self

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def column(self, definition: ColumnDefinition | ColumnBuilder) -> "TableFormatterBuilder":
        """Append a column definition (a ColumnBuilder is built first)."""
        if isinstance(definition, ColumnBuilder):
            definition = definition.build()
        self._columns.append(definition)
        return self

    def stateless(
        self, title: str, fn: Callable[[Any], Any], **options: Any
    ) -> "TableFormatterBuilder":
        """Append a column showing ``fn(record)``.

        Keyword options name ColumnBuilder methods, e.g.
        ``value_type=int, align="right", max_width=10``.
        """
        builder = ColumnBuilder().title(title).extractor(StatelessExtractor(fn))
        return self.column(_apply_options(builder, options))

    def stateful(
        self,
        title: str,
        step: Callable[[Any, Any], Any],
        init_state: Callable[[], Any] | None,
        aggregator: Callable[[Any, Any], Any] | None = None,
        **options: Any,
    ) -> "TableFormatterBuilder":
        """Append a column backed by a stateful extractor.

        Keyword options work as in ``stateless``.
        """
        builder = ColumnBuilder().title(title).stateful(step, init_state, aggregator)
        return self.column(_apply_options(builder, options))

    def build(self) -> TableFormatter:
        """Create the table formatter.

        Raises:
            NoColumnsError: If no column was added
        """
        options: dict[str, Any] = {
            "columns": tuple(self._columns),
            "heading": self._heading,
            "show_aggregation": self._show_aggregation,
            "separate_data_with_lines": self._separate_data_with_lines,
        }
        if self._border is not None:
            options["border"] = self._border
        if self._header_converter is not None:
            options["header_converter"] = self._header_converter
        return TableFormatter(**options)


_COLUMN_OPTIONS = frozenset(
    {
        "converter",
        "value_type",
        "aggregate_constant",
        "aggregate_converter",
        "cell_formatter",
        "align",
        "min_width",
        "max_width",
        "null_value",
        "padding_char",
        "ellipsis",
    }
)


def _apply_options(builder: ColumnBuilder, options: dict[str, Any]) -> ColumnBuilder:
    for name, value in options.items():
        if name not in _COLUMN_OPTIONS:
            raise ConfigurationError(
                "column option", name, f"expected one of: {', '.join(sorted(_COLUMN_OPTIONS))}"
            )
        getattr(builder, name)(value)
    return builder
