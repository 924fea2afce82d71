"""Exceptions for plaintable."""

from typing import Any

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class PlainTableError(Exception):
    """
    Base exception for all plaintable errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(PlainTableError):
    """
    Raised when a table definition is invalid.

    Configuration errors are programmer mistakes detected while a table,
    column, cell formatter or border is constructed. They never depend on
    the records being rendered.

    Attributes:
        field: Name of the offending setting
        value: The rejected value
        reason: Human readable explanation
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ConversionError(PlainTableError):
    """
    Raised when a converter cannot represent an extracted value.

    A conversion error aborts the whole render call; no partial table is
    produced.

    Attributes:
        value: The value that could not be converted
        reason: Why the converter rejected it
        column: Title of the column being rendered (if known)
    """

    def __init__(self, value: Any, reason: str, *, column: str | None = None) -> None:
        self.value = value
        self.reason = reason
        self.column = column
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Cannot convert {self.value!r}: {self.reason}"
        if self.column is not None:
            msg += f" [column={self.column!r}]"
        return msg

    def for_column(self, column: str) -> "ConversionError":
        """Return a copy of this error tagged with the column title."""
        return ConversionError(self.value, self.reason, column=column)


# ---------------------------------------------------------------------------
# Configuration Exceptions
# ---------------------------------------------------------------------------


class MissingExtractorError(ConfigurationError):
    """Raised when a column is defined without a data extractor."""

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__("extractor", None, f"column {title!r} has no data extractor")


class MissingStateInitializerError(ConfigurationError):
    """Raised when a stateful column has no state initializer."""

    def __init__(self, title: str | None = None) -> None:
        self.title = title
        subject = "stateful column" if title is None else f"stateful column {title!r}"
        super().__init__("init_state", None, f"{subject} needs a state initializer")


class NoColumnsError(ConfigurationError):
    """Raised when a table is defined without any column."""

    def __init__(self) -> None:
        super().__init__("columns", [], "a table needs at least one column")


class InvalidNumberFormatError(ConfigurationError):
    """Raised when a number converter is configured inconsistently."""

    pass


class ManifestError(ConfigurationError):
    """
    Raised when a declarative table manifest cannot be turned into a table.

    Attributes:
        path: Location of the offending entry (e.g. ``columns[2].align``)
    """

    def __init__(self, path: str, value: Any, reason: str) -> None:
        self.path = path
        super().__init__(path, value, reason)
