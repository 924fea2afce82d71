"""
plaintable: Render records as aligned, bordered plain-text tables.

This library provides a table renderer with:
- Stateless and stateful (aggregating) column extraction
- Typed value converters (numbers, dates, durations, booleans)
- Fixed-width cells with alignment and ellipsis truncation
- Predefined and custom border glyph sets
- CSV export and declarative YAML manifests

Example:
    from plaintable import ColumnBuilder, TableFormatterBuilder, summing

    table = (
        TableFormatterBuilder()
        .heading("Fruit stock")
        .show_aggregation()
        .stateless("Fruit", lambda r: r["name"], aggregate_constant="Total")
        .column(
            ColumnBuilder()
            .title("Qty")
            .extractor(summing(lambda r: r["qty"]))
            .value_type(int)
            .align("right")
        )
        .build()
    )
    print(table.render(records))
"""

import importlib.metadata

from .border import BorderFormatter, BorderStyle
from .builder import ColumnBuilder, TableFormatterBuilder
from .cell import CellContentFormatter, EllipsisPolicy
from .column import ColumnDefinition
from .converters import (
    BooleanConverter,
    Converter,
    DateConverter,
    DateTimeConverter,
    DurationConverter,
    NumberConverter,
    Rounding,
    StringConverter,
    TimeConverter,
    TrivialConverter,
    converter_for,
    float_converter,
    integer_converter,
    register_converter,
)
from .csv_export import render_csv
from .exceptions import (
    ConfigurationError,
    ConversionError,
    InvalidNumberFormatError,
    ManifestError,
    MissingExtractorError,
    MissingStateInitializerError,
    NoColumnsError,
    PlainTableError,
)
from .extractors import (
    StatefulExtractor,
    StatelessExtractor,
    averaging,
    counting,
    maximum,
    minimum,
    summing,
)
from .manifest import ColumnDecl, TableManifest
from .models import (
    HIDDEN_LINE,
    SEPARATOR,
    AggregateRow,
    Alignment,
    KeptSegment,
    LineSpec,
    LineType,
    RowSpec,
    RowType,
)
from .table import RowKind, TableData, TableFormatter, TableRow

try:
    __version__ = importlib.metadata.version("plaintable")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Main classes
    "TableFormatter",
    "TableFormatterBuilder",
    "ColumnBuilder",
    "ColumnDefinition",
    "BorderFormatter",
    "CellContentFormatter",
    "EllipsisPolicy",
    "render_csv",
    # Processed table
    "TableData",
    "TableRow",
    "RowKind",
    # Models
    "Alignment",
    "KeptSegment",
    "LineSpec",
    "RowSpec",
    "LineType",
    "RowType",
    "BorderStyle",
    "HIDDEN_LINE",
    "SEPARATOR",
    "AggregateRow",
    # Extractors
    "StatelessExtractor",
    "StatefulExtractor",
    "summing",
    "counting",
    "minimum",
    "maximum",
    "averaging",
    # Converters
    "Converter",
    "TrivialConverter",
    "StringConverter",
    "BooleanConverter",
    "DateConverter",
    "TimeConverter",
    "DateTimeConverter",
    "DurationConverter",
    "NumberConverter",
    "Rounding",
    "integer_converter",
    "float_converter",
    "converter_for",
    "register_converter",
    # Manifest
    "TableManifest",
    "ColumnDecl",
    # Exceptions - Base
    "PlainTableError",
    # Exceptions - Categories
    "ConfigurationError",
    "ConversionError",
    # Exceptions - Configuration
    "MissingExtractorError",
    "MissingStateInitializerError",
    "NoColumnsError",
    "InvalidNumberFormatError",
    "ManifestError",
]
