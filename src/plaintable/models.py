"""Core models for plaintable."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Alignment(Enum):
    """Horizontal alignment of text inside a cell."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class KeptSegment(Enum):
    """Part of an over-long text that survives shortening."""

    START = "start"
    END = "end"
    CENTER = "center"  # both ends, sign in the middle


class LineType(Enum):
    """Horizontal rules a table may draw."""

    TOP_EDGE = "top_edge"
    HEADING = "heading"
    HEADER = "header"
    INTERNAL = "internal"  # between data rows
    SEPARATOR = "separator"  # between row groups
    AGGREGATE = "aggregate"
    BOTTOM_EDGE = "bottom_edge"


class RowType(Enum):
    """Kinds of content rows a table may draw."""

    HEADING = "heading"
    HEADER = "header"
    DATA = "data"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class LineSpec:
    """
    Glyphs of a horizontal rule.

    A rule over columns of widths ``[3, 2]`` with one character of padding on
    each side renders as::

        left + pad + body*3 + pad + internal + pad + body*2 + pad + right

    Attributes:
        left: Glyph at the left table edge
        internal: Glyph where the rule crosses a column separator
        right: Glyph at the right table edge
        body: Glyph repeated over the cell content width
        padding: Glyph repeated over the cell padding (defaults to ``body``)
        hidden: When True the rule is not drawn at all
    """

    left: str = ""
    internal: str = ""
    right: str = ""
    body: str = ""
    padding: str | None = None
    hidden: bool = False

    @classmethod
    def uniform(cls, vertical: str, body: str) -> "LineSpec":
        """Create a rule using the same glyph at every vertical crossing."""
        return cls(left=vertical, internal=vertical, right=vertical, body=body)

    @property
    def padding_glyph(self) -> str:
        return self.body if self.padding is None else self.padding


HIDDEN_LINE = LineSpec(hidden=True)
"""Line spec that suppresses the rule entirely."""


@dataclass(frozen=True)
class RowSpec:
    """
    Glyphs framing the cells of a content row.

    Attributes:
        left: Glyph at the left table edge
        internal: Glyph between two cells
        right: Glyph at the right table edge
        padding: Glyph repeated over the cell padding
    """

    left: str = ""
    internal: str = ""
    right: str = ""
    padding: str = " "

    @classmethod
    def uniform(cls, vertical: str, padding: str = " ") -> "RowSpec":
        """Create a row frame using the same glyph for edges and separators."""
        return cls(left=vertical, internal=vertical, right=vertical, padding=padding)


class _Separator:
    """Marker requesting a row-group separator line in the record stream."""

    _instance: "_Separator | None" = None

    def __new__(cls) -> "_Separator":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SEPARATOR"


SEPARATOR = _Separator()
"""Insert into the records to draw a row-group separator line at that point."""


@dataclass(frozen=True)
class AggregateRow:
    """
    Marker requesting an aggregate (subtotal) row in the record stream.

    The row is computed from the column states accumulated so far. ``key`` is
    handed to every column aggregator as its ``accumulated_key`` argument.
    """

    key: Any = None
