"""YAML manifest parsing and validation for declarative tables.

A manifest describes a table without code::

    heading: Fruit stock
    border: unicode
    show_aggregation: true
    columns:
      - title: Fruit
        field: name
        aggregate_label: Total
      - title: Qty
        field: stock.qty
        type: int
        aggregate: sum
      - title: Picked
        field: picked
        type: date
        format: "%d %b"

``field`` is a dotted path looked up on mappings (keys) or objects
(attributes); a missing step yields a null value.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from .border import BorderStyle
from .builder import ColumnBuilder, TableFormatterBuilder
from .converters import (
    BooleanConverter,
    Converter,
    DateConverter,
    DateTimeConverter,
    DurationConverter,
    StringConverter,
    TimeConverter,
    TrivialConverter,
    float_converter,
    integer_converter,
)
from .exceptions import ConfigurationError, ConversionError, ManifestError
from .extractors import (
    StatelessExtractor,
    averaging,
    counting,
    maximum,
    minimum,
    summing,
)
from .models import Alignment
from .table import TableFormatter

COLUMN_TYPES = ("auto", "str", "int", "float", "bool", "date", "time", "datetime", "duration")
AGGREGATES = ("sum", "count", "min", "max", "avg")

_NUMERIC_TYPES = {"auto", "int", "float", "duration"}
_RIGHT_ALIGNED_TYPES = {"int", "float", "duration"}
_ISO_PARSERS: dict[str, Callable[[str], Any]] = {
    "date": date.fromisoformat,
    "time": time.fromisoformat,
    "datetime": datetime.fromisoformat,
}
_AGGREGATIONS = {
    "sum": summing,
    "min": minimum,
    "max": maximum,
    "avg": averaging,
}


def resolve_field(record: Any, path: str) -> Any:
    """Follow a dotted path through mappings and attributes."""
    value = record
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _require(d: Mapping[str, Any], key: str, expected: type, path: str, default: Any) -> Any:
    value = d.get(key, default)
    if value is None:
        return value
    # bool is an int subclass; "true" must not pass as a width
    if (isinstance(value, bool) and expected is not bool) or not isinstance(value, expected):
        raise ManifestError(f"{path}.{key}", value, f"must be of type {expected.__name__}")
    return value


@dataclass(frozen=True)
class ColumnDecl:
    """A single column declaration."""

    field: str
    title: str = ""
    type: str = "auto"
    align: str | None = None
    min_width: int = 0
    max_width: int | None = None
    null_value: str = ""
    aggregate: str | None = None
    aggregate_label: str | None = None
    format: str | None = None
    true_value: str = "true"
    false_value: str = "false"
    fraction_digits: int | None = None
    grouping: bool | None = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], path: str = "column") -> ColumnDecl:
        """
        Parse a column declaration.

        Raises:
            ManifestError: If a key is unknown, missing or has a bad value
        """
        if not isinstance(d, Mapping):
            raise ManifestError(path, d, "must be a mapping")
        unknown = sorted(set(d) - set(cls.__dataclass_fields__))
        if unknown:
            raise ManifestError(f"{path}.{unknown[0]}", d[unknown[0]], "unknown key")
        if not d.get("field"):
            raise ManifestError(f"{path}.field", d.get("field"), "is required")

        column_type = str(d.get("type", "auto")).lower()
        if column_type not in COLUMN_TYPES:
            raise ManifestError(
                f"{path}.type", d["type"], f"expected one of: {', '.join(COLUMN_TYPES)}"
            )
        aggregate = d.get("aggregate")
        if aggregate is not None:
            aggregate = str(aggregate).lower()
            if aggregate not in AGGREGATES:
                raise ManifestError(
                    f"{path}.aggregate", d["aggregate"], f"expected one of: {', '.join(AGGREGATES)}"
                )
            if aggregate in ("sum", "avg") and column_type not in _NUMERIC_TYPES:
                raise ManifestError(
                    f"{path}.aggregate", aggregate, f"not supported for {column_type} columns"
                )
        align = d.get("align")
        if align is not None and str(align).lower() not in {a.value for a in Alignment}:
            raise ManifestError(f"{path}.align", align, "expected one of: left, right, center")

        return cls(
            field=_require(d, "field", str, path, None),
            title=_require(d, "title", str, path, ""),
            type=column_type,
            align=None if align is None else str(align).lower(),
            min_width=_require(d, "min_width", int, path, 0),
            max_width=_require(d, "max_width", int, path, None),
            null_value=_require(d, "null_value", str, path, ""),
            aggregate=aggregate,
            aggregate_label=_require(d, "aggregate_label", str, path, None),
            format=_require(d, "format", str, path, None),
            true_value=_require(d, "true_value", str, path, "true"),
            false_value=_require(d, "false_value", str, path, "false"),
            fraction_digits=_require(d, "fraction_digits", int, path, None),
            grouping=_require(d, "grouping", bool, path, None),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"field": self.field}
        for name, spec in self.__dataclass_fields__.items():
            value = getattr(self, name)
            if name != "field" and value != spec.default:
                result[name] = value
        return result

    def converter(self) -> Converter:
        """Build the converter for row values."""
        numbers: dict[str, Any] = {}
        if self.fraction_digits is not None:
            numbers["min_fraction_digits"] = self.fraction_digits
            numbers["max_fraction_digits"] = self.fraction_digits
        if self.grouping is not None:
            numbers["grouping"] = self.grouping

        if self.type == "int":
            return integer_converter(**numbers)
        if self.type == "float":
            return float_converter(**numbers)
        if self.type == "bool":
            return BooleanConverter(self.true_value, self.false_value)
        if self.type == "str":
            return StringConverter()
        if self.type == "duration":
            return DurationConverter()
        if self.type == "date":
            return DateConverter(self.format) if self.format else DateConverter()
        if self.type == "time":
            return TimeConverter(self.format) if self.format else TimeConverter()
        if self.type == "datetime":
            return DateTimeConverter(self.format) if self.format else DateTimeConverter()
        return TrivialConverter()

    def aggregate_converter(self) -> Converter | None:
        """Build the converter for aggregate values when it differs from ``converter``."""
        if self.aggregate == "count":
            return integer_converter()
        if self.aggregate == "avg" and self.type in ("auto", "int"):
            if self.fraction_digits is not None:
                return float_converter(
                    min_fraction_digits=self.fraction_digits,
                    max_fraction_digits=self.fraction_digits,
                )
            return float_converter()
        return None

    def value_of(self, record: Any) -> Any:
        """Extract this column's value from a record, parsing ISO strings for temporal types."""
        value = resolve_field(record, self.field)
        parser = _ISO_PARSERS.get(self.type)
        if parser is not None and isinstance(value, str):
            try:
                return parser(value)
            except ValueError:
                raise ConversionError(value, f"not an ISO {self.type}") from None
        if self.type in ("int", "float") and isinstance(value, str):
            try:
                return Decimal(value) if self.type == "float" else int(value)
            except (ArithmeticError, ValueError):
                raise ConversionError(value, f"not a valid {self.type}") from None
        # float columns accumulate as Decimal; float + Decimal is a TypeError
        if self.type == "float" and isinstance(value, float):
            return Decimal(repr(value))
        return value

    def build(self) -> ColumnBuilder:
        """Create a column builder for this declaration."""
        if self.aggregate == "count":
            extractor: Any = counting(self.value_of)
        elif self.aggregate is not None:
            extractor = _AGGREGATIONS[self.aggregate](self.value_of)
        else:
            extractor = StatelessExtractor(self.value_of)

        align = self.align
        if align is None:
            align = "right" if self.type in _RIGHT_ALIGNED_TYPES else "left"

        builder = (
            ColumnBuilder()
            .title(self.title)
            .extractor(extractor)
            .converter(self.converter())
            .align(align)
            .min_width(self.min_width)
            .max_width(self.max_width)
            .null_value(self.null_value)
            .aggregate_constant(self.aggregate_label)
        )
        aggregate_converter = self.aggregate_converter()
        if aggregate_converter is not None:
            builder.aggregate_converter(aggregate_converter)
        return builder


@dataclass(frozen=True)
class TableManifest:
    """Parsed manifest for a declarative table."""

    columns: tuple[ColumnDecl, ...]
    heading: str | None = None
    border: str | None = None
    show_aggregation: bool = False
    separate_data_with_lines: bool = False

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> TableManifest:
        """
        Parse a table manifest.

        Raises:
            ManifestError: If the manifest is malformed
        """
        if not isinstance(d, Mapping):
            raise ManifestError("manifest", d, "must be a mapping")
        unknown = sorted(set(d) - set(cls.__dataclass_fields__))
        if unknown:
            raise ManifestError(unknown[0], d[unknown[0]], "unknown key")

        columns = d.get("columns")
        if not isinstance(columns, list) or not columns:
            raise ManifestError("columns", columns, "must be a non-empty list")

        border = d.get("border")
        if border is not None:
            try:
                border = BorderStyle.parse(str(border)).value
            except ConfigurationError as e:
                raise ManifestError("border", border, e.reason) from None

        heading = d.get("heading")
        return cls(
            columns=tuple(
                ColumnDecl.from_dict(column, f"columns[{i}]") for i, column in enumerate(columns)
            ),
            heading=None if heading is None else str(heading),
            border=border,
            show_aggregation=_require(d, "show_aggregation", bool, "manifest", False),
            separate_data_with_lines=_require(
                d, "separate_data_with_lines", bool, "manifest", False
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> TableManifest:
        import yaml

        data = yaml.safe_load(yaml_str)
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"columns": [column.to_dict() for column in self.columns]}
        if self.heading is not None:
            result["heading"] = self.heading
        if self.border is not None:
            result["border"] = self.border
        if self.show_aggregation:
            result["show_aggregation"] = True
        if self.separate_data_with_lines:
            result["separate_data_with_lines"] = True
        return result

    def build(
        self, *, border_style: BorderStyle | str | None = None, heading: str | None = None
    ) -> TableFormatter:
        """
        Create the table formatter.

        Args:
            border_style: Overrides the manifest's border
            heading: Overrides the manifest's heading

        Raises:
            ManifestError: If a declaration cannot be turned into a column
        """
        builder = (
            TableFormatterBuilder()
            .heading(self.heading if heading is None else heading)
            .show_aggregation(self.show_aggregation)
            .separate_data_with_lines(self.separate_data_with_lines)
            .border_style(border_style or self.border or BorderStyle.ASCII_DOUBLE)
        )
        for i, column in enumerate(self.columns):
            try:
                builder.column(column.build())
            except ManifestError:
                raise
            except ConfigurationError as e:
                raise ManifestError(f"columns[{i}].{e.field}", e.value, e.reason) from e
        return builder.build()
