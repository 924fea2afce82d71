"""
Value converters.

A converter turns a typed value extracted from a record into the text shown
in a cell. Converters map ``None`` to ``None``; the cell formatter decides
how an absent value looks.

Example:
    from plaintable.converters import NumberConverter, Rounding

    price = NumberConverter(min_fraction_digits=2, max_fraction_digits=2,
                            rounding=Rounding.HALF_EVEN)
    price(1234.565)  # '1234.56'
"""

from __future__ import annotations

import decimal
import locale
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from .exceptions import ConversionError, InvalidNumberFormatError


class Converter(Protocol):
    """Protocol for value converters."""

    def __call__(self, value: Any) -> str | None:
        """
        Convert a value to display text.

        Args:
            value: Extracted cell value, possibly None

        Returns:
            Display text, or None when the value is absent
        """
        ...


# ---------------------------------------------------------------------------
# Simple converters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrivialConverter:
    """Convert any value with ``str()``."""

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


@dataclass(frozen=True)
class StringConverter:
    """Pass strings through unchanged."""

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConversionError(value, f"expected str, got {type(value).__name__}")
        return value


@dataclass(frozen=True)
class BooleanConverter:
    """Map booleans to configurable literals."""

    true_value: str = "true"
    false_value: str = "false"

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, bool):
            raise ConversionError(value, f"expected bool, got {type(value).__name__}")
        return self.true_value if value else self.false_value


# ---------------------------------------------------------------------------
# Date and time
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateConverter:
    """Format ``datetime.date`` values with a ``strftime`` pattern."""

    pattern: str = "%Y-%m-%d"

    def __call__(self, value: Any) -> str | None:
        # Anything that is not a date is shown as absent.
        if not isinstance(value, date):
            return None
        return value.strftime(self.pattern)


@dataclass(frozen=True)
class TimeConverter:
    """Format ``datetime.time`` values with a ``strftime`` pattern."""

    pattern: str = "%H:%M:%S"

    def __call__(self, value: Any) -> str | None:
        if isinstance(value, datetime):
            value = value.time()
        if not isinstance(value, time):
            return None
        return value.strftime(self.pattern)


@dataclass(frozen=True)
class DateTimeConverter:
    """Format ``datetime.datetime`` values with a ``strftime`` pattern."""

    pattern: str = "%Y-%m-%d %H:%M:%S"

    def __call__(self, value: Any) -> str | None:
        if not isinstance(value, datetime):
            return None
        return value.strftime(self.pattern)


@dataclass(frozen=True)
class DurationConverter:
    """
    Format elapsed time as ``H:MM:SS``.

    Accepts ``timedelta`` values or a number of seconds. Hours are not
    wrapped, so ``90000`` seconds renders as ``25:00:00``. Fractional seconds
    are truncated. With ``show_days`` the output becomes ``1d 01:00:00``.

    The largest representable ``timedelta`` is 999999999 days; plain second
    counts are unbounded.
    """

    show_days: bool = False

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, timedelta):
            seconds = _trunc(value)
        elif isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            if isinstance(value, float) and not math.isfinite(value):
                raise ConversionError(value, "duration must be finite")
            if isinstance(value, Decimal) and not value.is_finite():
                raise ConversionError(value, "duration must be finite")
            seconds = int(value)
        else:
            raise ConversionError(
                value, f"expected timedelta or seconds, got {type(value).__name__}"
            )

        sign = "-" if seconds < 0 else ""
        seconds = abs(seconds)
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        if self.show_days:
            days, hours = divmod(hours, 24)
            return f"{sign}{days}d {hours:02d}:{minutes:02d}:{secs:02d}"
        return f"{sign}{hours}:{minutes:02d}:{secs:02d}"


def _trunc(value: timedelta) -> int:
    """Whole seconds of a timedelta, truncated toward zero."""
    total = value.days * 86400 + value.seconds
    if total < 0 and value.microseconds:
        total += 1
    return total


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class Rounding(Enum):
    """Rounding modes for number converters."""

    HALF_UP = decimal.ROUND_HALF_UP
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR
    UNNECESSARY = "unnecessary"  # refuse to round


@dataclass(frozen=True)
class NumberConverter:
    """
    Locale-style number formatting on top of ``decimal``.

    Floats are converted through their shortest ``repr`` so ``0.1`` stays
    ``0.1`` rather than its binary expansion.

    Attributes:
        min_fraction_digits: Fraction digits always shown (zero padded)
        max_fraction_digits: Fraction digits kept after rounding (None = all)
        grouping: Insert ``grouping_separator`` every ``grouping_size`` digits
        rounding: How to drop surplus fraction digits
        decimal_separator: Text between integer and fraction part
        grouping_separator: Text between digit groups
        grouping_size: Number of digits per group

    Raises:
        InvalidNumberFormatError: If the settings contradict each other
    """

    min_fraction_digits: int = 0
    max_fraction_digits: int | None = None
    grouping: bool = False
    rounding: Rounding = Rounding.HALF_UP
    decimal_separator: str = "."
    grouping_separator: str = ","
    grouping_size: int = 3

    def __post_init__(self) -> None:
        if self.min_fraction_digits < 0:
            raise InvalidNumberFormatError(
                "min_fraction_digits", self.min_fraction_digits, "must not be negative"
            )
        if self.max_fraction_digits is not None:
            if self.max_fraction_digits < 0:
                raise InvalidNumberFormatError(
                    "max_fraction_digits", self.max_fraction_digits, "must not be negative"
                )
            if self.max_fraction_digits < self.min_fraction_digits:
                raise InvalidNumberFormatError(
                    "max_fraction_digits",
                    self.max_fraction_digits,
                    f"must be >= min_fraction_digits ({self.min_fraction_digits})",
                )
        if self.grouping_size <= 0:
            raise InvalidNumberFormatError(
                "grouping_size", self.grouping_size, "must be positive"
            )
        if not self.decimal_separator:
            raise InvalidNumberFormatError(
                "decimal_separator", self.decimal_separator, "cannot be empty"
            )

    @classmethod
    def with_locale_separators(cls, **options: Any) -> "NumberConverter":
        """
        Create a converter using the separators of the current process locale.

        The locale must already be selected with ``locale.setlocale``; the
        ``C`` locale yields ``.`` and no grouping separator.
        """
        conv = locale.localeconv()
        options.setdefault("decimal_separator", conv["decimal_point"] or ".")
        options.setdefault("grouping_separator", conv["thousands_sep"])
        if not options["grouping_separator"]:
            options["grouping"] = False
            options["grouping_separator"] = ","
        return cls(**options)

    def __call__(self, value: Any) -> str | None:
        if value is None:
            return None
        number = self._to_decimal(value)

        if not number.is_finite():
            if number.is_nan():
                return "NaN"
            return "-∞" if number.is_signed() else "∞"

        number = self._round(value, number)
        sign, digits, _ = number.as_tuple()
        text = format(abs(number), "f")
        int_part, _, frac_part = text.partition(".")

        frac_part = frac_part.rstrip("0")
        if len(frac_part) < self.min_fraction_digits:
            frac_part = frac_part.ljust(self.min_fraction_digits, "0")

        if self.grouping:
            int_part = self._group(int_part)

        result = int_part
        if frac_part:
            result += self.decimal_separator + frac_part
        is_zero = not any(digits)
        if sign and not is_zero:
            result = "-" + result
        return result

    def _to_decimal(self, value: Any) -> Decimal:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise ConversionError(value, f"expected a number, got {type(value).__name__}")
        if isinstance(value, float):
            return Decimal(repr(value))
        return Decimal(value)

    def _round(self, original: Any, number: Decimal) -> Decimal:
        if self.max_fraction_digits is None:
            return number
        quantum = Decimal(1).scaleb(-self.max_fraction_digits)
        if number.as_tuple().exponent >= -self.max_fraction_digits:  # type: ignore[operator]
            return number
        with decimal.localcontext() as ctx:
            # quantize needs room for every integer digit plus the kept fraction
            ctx.prec = max(ctx.prec, number.adjusted() + self.max_fraction_digits + 2)
            if self.rounding is Rounding.UNNECESSARY:
                rounded = number.quantize(quantum, rounding=decimal.ROUND_HALF_EVEN)
                if rounded != number:
                    raise ConversionError(
                        original,
                        f"needs rounding to {self.max_fraction_digits} fraction digits "
                        "but rounding is disabled",
                    )
                return rounded
            return number.quantize(quantum, rounding=self.rounding.value)

    def _group(self, digits: str) -> str:
        groups = []
        while len(digits) > self.grouping_size:
            groups.append(digits[-self.grouping_size :])
            digits = digits[: -self.grouping_size]
        groups.append(digits)
        return self.grouping_separator.join(reversed(groups))


def integer_converter(**overrides: Any) -> NumberConverter:
    """Whole numbers with digit grouping; fractional input is an error."""
    options: dict[str, Any] = {
        "min_fraction_digits": 0,
        "max_fraction_digits": 0,
        "grouping": True,
        "rounding": Rounding.UNNECESSARY,
    }
    options.update(overrides)
    return NumberConverter(**options)


def float_converter(**overrides: Any) -> NumberConverter:
    """Two fraction digits, rounded half up, no grouping."""
    options: dict[str, Any] = {
        "min_fraction_digits": 2,
        "max_fraction_digits": 2,
        "grouping": False,
        "rounding": Rounding.HALF_UP,
    }
    options.update(overrides)
    return NumberConverter(**options)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_REGISTRY: dict[type, Callable[[], Converter]] = {
    bool: BooleanConverter,
    int: integer_converter,
    float: float_converter,
    Decimal: float_converter,
    datetime: DateTimeConverter,
    date: DateConverter,
    time: TimeConverter,
    timedelta: DurationConverter,
    str: StringConverter,
}


def register_converter(value_type: type, factory: Callable[[], Converter]) -> None:
    """
    Register the default converter factory for a value type.

    Args:
        value_type: Type whose values (and subclasses' values) the factory handles
        factory: Zero-argument callable returning a converter
    """
    _REGISTRY[value_type] = factory


def converter_for(value_type: type | None) -> Converter:
    """
    Get the default converter for a declared column value type.

    The type's MRO is searched so subclasses inherit their base's converter
    (``bool`` is matched before ``int``, ``datetime`` before ``date``).

    Args:
        value_type: Declared type of the column values, or None

    Returns:
        A converter instance; TrivialConverter when nothing is registered
    """
    if value_type is None:
        return TrivialConverter()
    for klass in value_type.__mro__:
        factory = _REGISTRY.get(klass)
        if factory is not None:
            return factory()
    return TrivialConverter()
