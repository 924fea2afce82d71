"""
Cell content formatting.

Turns converted text into a cell of an exact width: over-long text is
shortened with an ellipsis, short text is padded according to the alignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConfigurationError
from .models import Alignment, KeptSegment


@dataclass(frozen=True)
class EllipsisPolicy:
    """
    Rule for shortening text that does not fit its cell.

    Attributes:
        sign: Marker inserted where text was removed
        kept_segment: Which part of the text survives
        trim_to_word: Cut at a word boundary instead of mid-word when possible

    Raises:
        ConfigurationError: If the sign is empty
    """

    sign: str = "..."
    kept_segment: KeptSegment = KeptSegment.START
    trim_to_word: bool = False

    def __post_init__(self) -> None:
        if not self.sign:
            raise ConfigurationError("ellipsis sign", self.sign, "cannot be empty")

    def shorten(self, text: str, width: int) -> str:
        """
        Shorten text to at most ``width`` characters.

        The result may be shorter than ``width`` when word trimming backs off
        to a boundary; the cell formatter pads it afterwards.

        Args:
            text: Text to shorten
            width: Character budget including the sign

        Returns:
            The text itself if it fits, otherwise the kept part plus the sign
        """
        if len(text) <= width:
            return text
        if width <= len(self.sign):
            return self.sign[:width]

        budget = width - len(self.sign)
        if self.kept_segment is KeptSegment.START:
            return self._head(text, budget) + self.sign
        if self.kept_segment is KeptSegment.END:
            return self.sign + self._tail(text, budget)

        head_budget = (budget + 1) // 2
        tail_budget = budget - head_budget
        return self._head(text, head_budget) + self.sign + self._tail(text, tail_budget)

    def _head(self, text: str, budget: int) -> str:
        if budget <= 0:
            return ""
        if self.trim_to_word:
            cut = text.rfind(" ", 0, budget + 1)
            if cut > 0:
                return text[:cut]
        return text[:budget]

    def _tail(self, text: str, budget: int) -> str:
        if budget <= 0:
            return ""
        start = len(text) - budget
        if self.trim_to_word:
            cut = text.find(" ", start - 1)
            if cut != -1 and cut + 1 < len(text):
                return text[cut + 1 :]
        return text[start:]


@dataclass(frozen=True)
class CellContentFormatter:
    """
    Fixed-width cell formatting for one column.

    Attributes:
        alignment: Side(s) receiving the padding
        padding_char: Single character used to fill short cells
        null_value: Text shown for absent values (subject to alignment)
        min_width: Narrowest allowed cell
        max_width: Widest allowed cell (None = unbounded)
        ellipsis: How over-long text is shortened

    Example:
        >>> CellContentFormatter(alignment=Alignment.RIGHT).format("42", 5)
        '   42'
    """

    alignment: Alignment = Alignment.LEFT
    padding_char: str = " "
    null_value: str = ""
    min_width: int = 0
    max_width: int | None = None
    ellipsis: EllipsisPolicy = field(default_factory=EllipsisPolicy)

    def __post_init__(self) -> None:
        if len(self.padding_char) != 1:
            raise ConfigurationError(
                "padding_char", self.padding_char, "must be exactly one character"
            )
        if self.min_width < 0:
            raise ConfigurationError("min_width", self.min_width, "must not be negative")
        if self.max_width is not None and self.max_width < self.min_width:
            raise ConfigurationError(
                "max_width", self.max_width, f"must be >= min_width ({self.min_width})"
            )

    @classmethod
    def left_aligned(cls, **options: Any) -> "CellContentFormatter":
        """Create a left aligned cell formatter (the default)."""
        return cls(alignment=Alignment.LEFT, **options)

    @classmethod
    def right_aligned(cls, **options: Any) -> "CellContentFormatter":
        """Create a right aligned cell formatter (typical for numbers)."""
        return cls(alignment=Alignment.RIGHT, **options)

    @classmethod
    def centered(cls, **options: Any) -> "CellContentFormatter":
        """Create a centered cell formatter."""
        return cls(alignment=Alignment.CENTER, **options)

    def bound_width(self, width: int) -> int:
        """Clamp a width into ``[min_width, max_width]``."""
        width = max(width, self.min_width)
        if self.max_width is not None:
            width = min(width, self.max_width)
        return width

    def natural_width(self, text: str | None) -> int:
        """Width the cell would take on its own, before column resolution."""
        return self.bound_width(len(self.null_value if text is None else text))

    def format(self, text: str | None, forced_width: int | None = None) -> str:
        """
        Format text into a cell.

        Args:
            text: Converted text; None is replaced by ``null_value``
            forced_width: Exact width to produce; when omitted the text's own
                length clamped into ``[min_width, max_width]`` is used

        Returns:
            A string of exactly the effective width
        """
        value = self.null_value if text is None else text
        width = self.bound_width(len(value)) if forced_width is None else forced_width

        if len(value) > width:
            value = self.ellipsis.shorten(value, width)
        if len(value) < width:
            value = self._pad(value, width)
        return value

    def _pad(self, value: str, width: int) -> str:
        diff = width - len(value)
        if self.alignment is Alignment.RIGHT:
            return self.padding_char * diff + value
        if self.alignment is Alignment.CENTER:
            left = diff // 2
            return self.padding_char * left + value + self.padding_char * (diff - left)
        return value + self.padding_char * diff
