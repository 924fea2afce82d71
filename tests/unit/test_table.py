"""Tests for TableFormatter rendering."""

import logging

import pytest

from plaintable import (
    SEPARATOR,
    AggregateRow,
    BorderFormatter,
    BorderStyle,
    ColumnBuilder,
    ColumnDefinition,
    RowKind,
    StatefulExtractor,
    StatelessExtractor,
    TableFormatter,
    TableFormatterBuilder,
    summing,
)
from plaintable.converters import StringConverter
from plaintable.exceptions import ConfigurationError, ConversionError, NoColumnsError


class TestRender:
    """Tests for the overall table layout."""

    def test_full_table(self, fruit_table, fruits) -> None:
        """Header, data and aggregate rows are framed by rules."""
        assert fruit_table.render(fruits) == "\n".join(
            [
                "+--------+------+",
                "| Name   |  Qty |",
                "+--------+------+",
                "| apple  | 1.00 |",
                "| banana | 2.00 |",
                "| cherry | 4.00 |",
                "+--------+------+",
                "| Total  | 7.00 |",
                "+--------+------+",
            ]
        )

    def test_no_trailing_newline(self, fruit_table, fruits) -> None:
        """Output ends with the bottom edge."""
        assert not fruit_table.render(fruits).endswith("\n")

    def test_every_line_has_the_same_width(self, fruit_table, fruits) -> None:
        """All cells of a column share the resolved width."""
        lines = fruit_table.render([*fruits, None]).splitlines()
        assert len({len(line) for line in lines}) == 1

    def test_deterministic_and_reusable(self, fruit_table, fruits) -> None:
        """Rendering twice gives identical output; state does not leak."""
        first = fruit_table.render(fruits)
        assert fruit_table.render(fruits) == first
        assert "7.00" in first

    def test_empty_records(self, fruit_table) -> None:
        """Without records only header and aggregate rows remain."""
        assert fruit_table.render([]).splitlines() == [
            "+-------+------+",
            "| Name  |  Qty |",
            "+-------+------+",
            "+-------+------+",
            "| Total | 0.00 |",
            "+-------+------+",
        ]

    def test_generator_input(self, fruit_table, fruits) -> None:
        """Records may be any iterable."""
        assert fruit_table.render(f for f in fruits) == fruit_table.render(fruits)


class TestNullRecords:
    """Tests for None records."""

    def test_null_record_is_blank_row(self, fruit_table, fruits) -> None:
        """A None record renders blank cells and does not affect the sum."""
        records = [fruits[0], fruits[1], None, fruits[2]]
        lines = fruit_table.render(records).splitlines()
        assert lines[5] == "|        |      |"
        assert lines[-2] == "| Total  | 7.00 |"

    @pytest.mark.parametrize("position", [0, 1, 2, 3])
    def test_null_record_position_does_not_affect_sum(self, fruit_table, fruits, position) -> None:
        """The aggregate is the same wherever the None record sits."""
        records = list(fruits)
        records.insert(position, None)
        lines = fruit_table.render(records).splitlines()
        assert lines[3 + position] == "|        |      |"
        assert lines[-2] == "| Total  | 7.00 |"

    def test_null_value_shown(self) -> None:
        """Null cells show the column's null value."""
        table = (
            TableFormatterBuilder()
            .border_style("ascii")
            .stateless("A", lambda r: r, null_value="-")
            .build()
        )
        assert table.render([None]).splitlines()[3] == "| - |"

    def test_extractor_not_called_for_null_records(self) -> None:
        """Stateful steps run once per non-null record, in order."""
        seen = []
        extractor = StatefulExtractor(
            step=lambda r, s: seen.append(r),
            init_state=list,
        )
        table = TableFormatter(columns=[ColumnDefinition("A", extractor)])
        table.render([1, None, 2, None, 3])
        assert seen == [1, 2, 3]

    def test_sum_with_trivial_converter(self) -> None:
        """Summing 1.0, 2.0 and 4.0 around a null record gives 7.0."""
        table = (
            TableFormatterBuilder()
            .show_aggregation()
            .column(ColumnBuilder().title("Qty").extractor(summing(lambda r: r)))
            .build()
        )
        data = table.process([1.0, 2.0, None, 4.0])
        assert data.aggregate is not None
        assert data.aggregate.cells == ("7.0",)


class TestHeaderAndHeading:
    """Tests for header row and heading visibility."""

    def test_header_hidden_when_titles_blank(self) -> None:
        """Without a non-blank title there is no header row."""
        table = (
            TableFormatterBuilder()
            .border_style("ascii")
            .stateless("", lambda r: r)
            .stateless(" ", lambda r: r)
            .build()
        )
        assert table.render(["x"]).splitlines() == ["+---+---+", "| x | x |", "+---+---+"]

    def test_header_shown_with_one_title(self) -> None:
        """One non-blank title is enough for the header row."""
        table = (
            TableFormatterBuilder()
            .stateless("", lambda r: r)
            .stateless("B", lambda r: r)
            .build()
        )
        assert table.process(["x"]).header is not None

    def test_header_converter(self, fruits) -> None:
        """Titles go through the header converter."""
        table = (
            TableFormatterBuilder()
            .header_converter(str.upper)
            .stateless("Name", lambda f: f.name)
            .build()
        )
        assert "| NAME   |" in table.render(fruits)

    def test_heading(self, fruit_table, fruits) -> None:
        """The heading spans every column below a spanning top edge."""
        table = TableFormatter(
            columns=fruit_table.columns, border=fruit_table.border, heading="Fruits"
        )
        assert table.render(fruits).splitlines()[:4] == [
            "+---------------+",
            "| Fruits        |",
            "+--------+------+",
            "| Name   |  Qty |",
        ]

    def test_heading_is_truncated(self, fruit_table, fruits) -> None:
        """Long headings are shortened and never widen the columns."""
        table = TableFormatter(
            columns=fruit_table.columns,
            border=fruit_table.border,
            heading="A very long heading that does not fit",
        )
        assert table.render(fruits).splitlines()[1] == "| A very lon... |"


class TestAggregation:
    """Tests for aggregate rows."""

    def test_no_aggregate_row_without_aggregator(self, fruits) -> None:
        """A constant alone does not produce an aggregate row."""
        table = (
            TableFormatterBuilder()
            .show_aggregation()
            .stateless("Name", lambda f: f.name, aggregate_constant="Total")
            .build()
        )
        assert table.process(fruits).aggregate is None
        assert "Total" not in table.render(fruits)

    def test_no_aggregate_row_when_disabled(self, fruits) -> None:
        """show_aggregation must be enabled."""
        table = TableFormatterBuilder().column(
            ColumnBuilder().title("Qty").extractor(summing(lambda f: f.qty))
        ).build()
        assert table.process(fruits).aggregate is None

    def test_subtotal_and_separator_markers(self, fruit_table, fruits) -> None:
        """Markers insert subtotal rows and separator lines in place."""
        records = [fruits[0], fruits[1], AggregateRow("first"), SEPARATOR, fruits[2]]
        assert fruit_table.render(records).splitlines() == [
            "+--------+------+",
            "| Name   |  Qty |",
            "+--------+------+",
            "| apple  | 1.00 |",
            "| banana | 2.00 |",
            "+--------+------+",
            "| Total  | 3.00 |",
            "+--------+------+",
            "| cherry | 4.00 |",
            "+--------+------+",
            "| Total  | 7.00 |",
            "+--------+------+",
        ]

    def test_subtotal_key_reaches_aggregator(self) -> None:
        """The marker key is passed as accumulated key."""
        table = (
            TableFormatterBuilder()
            .stateful("Group", lambda r, s: r, dict, lambda key, s: key)
            .build()
        )
        data = table.process(["a", AggregateRow("first half"), "b"])
        subtotal = [row for row in data.rows if row.kind is RowKind.SUBTOTAL]
        assert subtotal[0].cells == ("first half",)
        assert subtotal[0].key == "first half"


class TestLines:
    """Tests for internal and hidden lines."""

    def test_separate_data_with_lines(self, fruit_table, fruits) -> None:
        """Internal lines appear only between consecutive data rows."""
        table = TableFormatter(
            columns=fruit_table.columns,
            border=fruit_table.border,
            separate_data_with_lines=True,
        )
        lines = table.render(fruits).splitlines()
        assert lines[3:8] == [
            "| apple  | 1.00 |",
            "+--------+------+",
            "| banana | 2.00 |",
            "+--------+------+",
            "| cherry | 4.00 |",
        ]

    def test_hidden_lines_emit_nothing(self, fruits) -> None:
        """Hidden internal lines do not produce blank lines."""
        table = (
            TableFormatterBuilder()
            .border_style(BorderStyle.NO_VERTICAL)
            .separate_data_with_lines()
            .stateless("Name", lambda f: f.name)
            .build()
        )
        lines = table.render(fruits).splitlines()
        # top edge, header, header line, three rows, bottom edge
        assert len(lines) == 7
        assert "" not in lines

    def test_plain_border(self, fruits) -> None:
        """PLAIN renders only rows."""
        table = (
            TableFormatterBuilder()
            .border_style("plain")
            .stateless("Name", lambda f: f.name)
            .stateless("Qty", lambda f: f.qty, value_type=float, align="right")
            .build()
        )
        assert table.render(fruits).splitlines() == [
            "Name    Qty",
            "apple  1.00",
            "banana 2.00",
            "cherry 4.00",
        ]


class TestWidths:
    """Tests for column width resolution."""

    def test_max_width_clamps_and_truncates(self, fruits) -> None:
        """Cells wider than max_width are shortened."""
        table = (
            TableFormatterBuilder()
            .stateless("Name", lambda f: f.name, max_width=4)
            .build()
        )
        data = table.process(fruits)
        assert data.widths == (4,)
        assert "| b... |" in table.render(fruits)

    def test_min_width(self, fruits) -> None:
        """Narrow columns grow to min_width."""
        table = TableFormatterBuilder().stateless("N", lambda f: "x", min_width=3).build()
        assert table.process(fruits).widths == (3,)

    def test_null_value_counts_towards_width(self) -> None:
        """Null cells are measured by their null value."""
        table = TableFormatterBuilder().stateless("A", lambda r: r, null_value="n/a").build()
        assert table.process([None]).widths == (3,)


class TestErrors:
    """Tests for construction and render errors."""

    def test_no_columns(self) -> None:
        """A table needs at least one column."""
        with pytest.raises(NoColumnsError):
            TableFormatter(columns=[])

    def test_wrong_column_type(self) -> None:
        """Columns must be ColumnDefinitions."""
        with pytest.raises(ConfigurationError, match=r"columns\[0\]"):
            TableFormatter(columns=[StatelessExtractor(str)])

    def test_conversion_error_aborts_render(self) -> None:
        """A value the converter rejects aborts the whole render."""
        table = TableFormatter(
            columns=[ColumnDefinition("Name", StatelessExtractor(lambda r: r), StringConverter())]
        )
        with pytest.raises(ConversionError) as exc_info:
            table.render(["ok", 3])
        assert exc_info.value.column == "Name"

    def test_columns_are_frozen(self, fruit_table) -> None:
        """The column list is stored as a tuple."""
        assert isinstance(fruit_table.columns, tuple)

    def test_border_type(self) -> None:
        """The border must be a BorderFormatter."""
        with pytest.raises(ConfigurationError, match="border"):
            TableFormatter(
                columns=[ColumnDefinition("A", StatelessExtractor(str))],
                border=BorderStyle.ASCII,
            )


class TestLogging:
    """Tests for debug logging."""

    def test_debug_log_reports_widths(self, fruit_table, fruits, caplog) -> None:
        """Processing logs the resolved widths at debug level."""
        with caplog.at_level(logging.DEBUG, logger="plaintable.table"):
            fruit_table.render(fruits)
        assert "widths=[6, 4]" in caplog.text
        assert "3 rows, 2 columns" in caplog.text

    def test_custom_border_instance(self, fruits) -> None:
        """A BorderFormatter instance can be passed directly."""
        border = BorderFormatter.from_style("unicode")
        table = TableFormatterBuilder().border(border).stateless("A", lambda f: f.name).build()
        assert table.render(fruits).startswith("╔")
