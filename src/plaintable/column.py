"""Column definitions binding extraction, conversion and cell formatting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .cell import CellContentFormatter
from .converters import Converter, TrivialConverter
from .exceptions import (
    ConfigurationError,
    ConversionError,
    MissingExtractorError,
    MissingStateInitializerError,
)
from .extractors import Extractor, StatefulExtractor, StatelessExtractor


@dataclass(frozen=True)
class ColumnDefinition:
    """
    One addressable table column.

    Attributes:
        title: Header text (blank titles do not force a header row)
        extractor: Stateless or stateful value extraction
        converter: Turns extracted values into display text
        cell_formatter: Shapes display text into fixed-width cells
        aggregate_constant: Fixed aggregate-row text; takes precedence over
            the extractor's aggregator
        aggregate_converter: Converter for aggregator results (defaults to
            ``converter``), e.g. a count shown under a text column

    Raises:
        MissingExtractorError: If no extractor is given
        MissingStateInitializerError: If a stateful extractor has no init_state
        ConfigurationError: If a collaborator has the wrong shape
    """

    title: str
    extractor: Extractor
    converter: Converter = field(default_factory=TrivialConverter)
    cell_formatter: CellContentFormatter = field(default_factory=CellContentFormatter)
    aggregate_constant: str | None = None
    aggregate_converter: Converter | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str):
            raise ConfigurationError("title", self.title, "must be a string")
        if self.extractor is None:
            raise MissingExtractorError(self.title)
        if not isinstance(self.extractor, (StatelessExtractor, StatefulExtractor)):
            raise ConfigurationError(
                "extractor", self.extractor, "must be a stateless or stateful extractor"
            )
        if isinstance(self.extractor, StatefulExtractor):
            fn_name, fn = "step", self.extractor.step
        else:
            fn_name, fn = "fn", self.extractor.fn
        if fn is None:
            raise MissingExtractorError(self.title)
        if not callable(fn):
            raise ConfigurationError(f"extractor {fn_name}", fn, "must be callable")
        if isinstance(self.extractor, StatefulExtractor):
            if self.extractor.init_state is None:
                raise MissingStateInitializerError(self.title)
            if not callable(self.extractor.init_state):
                raise ConfigurationError(
                    "init_state", self.extractor.init_state, "must be callable"
                )
            if self.extractor.aggregator is not None and not callable(self.extractor.aggregator):
                raise ConfigurationError(
                    "aggregator", self.extractor.aggregator, "must be callable"
                )
        if not callable(self.converter):
            raise ConfigurationError("converter", self.converter, "must be callable")
        if self.aggregate_converter is not None and not callable(self.aggregate_converter):
            raise ConfigurationError(
                "aggregate_converter", self.aggregate_converter, "must be callable"
            )
        if not isinstance(self.cell_formatter, CellContentFormatter):
            raise ConfigurationError(
                "cell_formatter", self.cell_formatter, "must be a CellContentFormatter"
            )

    @property
    def has_aggregator(self) -> bool:
        """Whether the extractor contributes a computed aggregate value."""
        return self.extractor.has_aggregator

    def initialize(self) -> Any:
        """Create this column's state for one render call."""
        return self.extractor.initialize()

    def row_value(self, record: Any, state: Any) -> str | None:
        """
        Extract and convert the cell text of one non-null record.

        Raises:
            ConversionError: Tagged with this column's title
        """
        return self._convert(self.converter, self.extractor.extract(record, state))

    def aggregate_value(self, key: Any, state: Any) -> str | None:
        """
        Text of this column's cell in an aggregate row.

        The constant wins; otherwise the aggregator result is converted.
        Columns with neither show their null value.
        """
        if self.aggregate_constant is not None:
            return self.aggregate_constant
        if not self.extractor.has_aggregator:
            return None
        converter = self.aggregate_converter or self.converter
        return self._convert(converter, self.extractor.aggregate(key, state))

    def _convert(self, converter: Converter, value: Any) -> str | None:
        try:
            return converter(value)
        except ConversionError as e:
            raise e.for_column(self.title) from e
