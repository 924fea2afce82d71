"""
Border rendering.

A border is a set of glyph specs: one ``LineSpec`` per horizontal rule type
and one ``RowSpec`` per content row type. Layout toggles decide whether the
outer edges and the separators between columns are drawn and how much padding
surrounds each cell.

Example (``BorderStyle.ASCII_DOUBLE``, widths ``[5, 3]``)::

    +=======+=====+
    | apple |   3 |
    +=======+=====+
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import ConfigurationError
from .models import HIDDEN_LINE, LineSpec, LineType, RowSpec, RowType


class BorderStyle(Enum):
    """Predefined border glyph sets."""

    ASCII = "ascii"
    ASCII_DOUBLE = "ascii_double"
    UNICODE = "unicode"
    NO_VERTICAL = "no_vertical"
    PLAIN = "plain"

    @classmethod
    def parse(cls, name: str) -> "BorderStyle":
        """
        Look up a style by its value, case-insensitively.

        Raises:
            ConfigurationError: If no style has that name
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise ConfigurationError(
                "border style", name, f"expected one of: {choices}"
            ) from None


@dataclass(frozen=True)
class BorderFormatter:
    """
    Glyph specs plus layout toggles for drawing a table frame.

    Attributes:
        lines: Spec for every ``LineType``
        rows: Spec for every ``RowType``
        draw_vertical_edge: Draw the left and right table edges
        draw_vertical_separator: Draw glyphs between columns
        left_padding: Padding glyphs before each cell
        right_padding: Padding glyphs after each cell

    Raises:
        ConfigurationError: If a line or row type has no spec, or a padding
            width is negative
    """

    lines: Mapping[LineType, LineSpec]
    rows: Mapping[RowType, RowSpec]
    draw_vertical_edge: bool = True
    draw_vertical_separator: bool = True
    left_padding: int = 1
    right_padding: int = 1

    def __post_init__(self) -> None:
        missing_lines = [t.value for t in LineType if t not in self.lines]
        if missing_lines:
            raise ConfigurationError("lines", missing_lines, "missing line specs")
        missing_rows = [t.value for t in RowType if t not in self.rows]
        if missing_rows:
            raise ConfigurationError("rows", missing_rows, "missing row specs")
        if self.left_padding < 0:
            raise ConfigurationError("left_padding", self.left_padding, "must not be negative")
        if self.right_padding < 0:
            raise ConfigurationError(
                "right_padding", self.right_padding, "must not be negative"
            )
        # Freeze the spec tables so shared formatters cannot be altered.
        object.__setattr__(self, "lines", MappingProxyType(dict(self.lines)))
        object.__setattr__(self, "rows", MappingProxyType(dict(self.rows)))

    @classmethod
    def from_style(
        cls, style: BorderStyle | str = BorderStyle.ASCII_DOUBLE, **overrides: Any
    ) -> "BorderFormatter":
        """
        Create a formatter from a predefined style.

        Args:
            style: Style or its name
            **overrides: Any BorderFormatter field to replace

        Returns:
            New BorderFormatter
        """
        if isinstance(style, str):
            style = BorderStyle.parse(style)
        options: dict[str, Any] = dict(_PRESETS[style])
        options.update(overrides)
        return cls(**options)

    def with_line(self, line_type: LineType, spec: LineSpec) -> "BorderFormatter":
        """Return a copy drawing ``line_type`` with ``spec``."""
        return replace(self, lines={**self.lines, line_type: spec})

    def with_row(self, row_type: RowType, spec: RowSpec) -> "BorderFormatter":
        """Return a copy framing ``row_type`` rows with ``spec``."""
        return replace(self, rows={**self.rows, row_type: spec})

    def spanning_width(self, widths: Sequence[int]) -> int:
        """
        Content width of one cell spanning all columns.

        Covers the column widths plus the padding and separators that lie
        between them, so a spanning row is exactly as wide as a regular one.
        """
        gaps = max(len(widths) - 1, 0)
        width = sum(widths) + gaps * (self.left_padding + self.right_padding)
        if self.draw_vertical_separator:
            width += gaps
        return width

    def render_line(
        self, line_type: LineType, widths: Sequence[int], *, span: bool = False
    ) -> str | None:
        """
        Render a horizontal rule.

        Args:
            line_type: Which rule to draw
            widths: Resolved column widths
            span: Draw body glyphs instead of column crossings (used above a
                heading that spans every column)

        Returns:
            The rule, or None if the spec is hidden
        """
        spec = self.lines[line_type]
        if spec.hidden:
            return None
        pad = spec.padding_glyph
        segments = [
            pad * self.left_padding + spec.body * width + pad * self.right_padding
            for width in widths
        ]
        joiner = (spec.body if span else spec.internal) if self.draw_vertical_separator else ""
        return self._frame(spec.left, joiner.join(segments), spec.right)

    def render_row(self, row_type: RowType, cells: Sequence[str]) -> str:
        """
        Render a content row from already formatted cells.

        Args:
            row_type: Which row frame to use
            cells: Fixed-width cell texts, left to right

        Returns:
            The framed row
        """
        spec = self.rows[row_type]
        padded = [
            spec.padding * self.left_padding + cell + spec.padding * self.right_padding
            for cell in cells
        ]
        joiner = spec.internal if self.draw_vertical_separator else ""
        return self._frame(spec.left, joiner.join(padded), spec.right)

    def _frame(self, left: str, body: str, right: str) -> str:
        if self.draw_vertical_edge:
            return left + body + right
        return body


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


def _lines(default: LineSpec, **by_type: LineSpec) -> dict[LineType, LineSpec]:
    specs = {line_type: default for line_type in LineType}
    specs.update({LineType(name.lower()): spec for name, spec in by_type.items()})
    return specs


def _rows(spec: RowSpec) -> dict[RowType, RowSpec]:
    return {row_type: spec for row_type in RowType}


_ASCII_SINGLE = LineSpec.uniform("+", "-")
_ASCII_DOUBLE = LineSpec.uniform("+", "=")
_UNICODE_DOUBLE = LineSpec(left="╠", internal="╪", right="╣", body="═")
_DASHES = LineSpec.uniform("-", "-")
_DASHES_GAPPED = LineSpec(left="-", internal=" ", right="-", body="-")

_PRESETS: Mapping[BorderStyle, Mapping[str, Any]] = MappingProxyType(
    {
        BorderStyle.ASCII: {
            "lines": _lines(_ASCII_SINGLE),
            "rows": _rows(RowSpec.uniform("|")),
        },
        BorderStyle.ASCII_DOUBLE: {
            "lines": _lines(_ASCII_DOUBLE, INTERNAL=_ASCII_SINGLE),
            "rows": _rows(RowSpec.uniform("|")),
        },
        BorderStyle.UNICODE: {
            "lines": _lines(
                _UNICODE_DOUBLE,
                TOP_EDGE=LineSpec(left="╔", internal="╤", right="╗", body="═"),
                HEADING=LineSpec(left="╠", internal="╤", right="╣", body="═"),
                INTERNAL=LineSpec(left="╟", internal="┼", right="╢", body="─"),
                BOTTOM_EDGE=LineSpec(left="╚", internal="╧", right="╝", body="═"),
            ),
            "rows": _rows(RowSpec(left="║", internal="│", right="║")),
        },
        BorderStyle.NO_VERTICAL: {
            "lines": _lines(
                _DASHES_GAPPED,
                TOP_EDGE=_DASHES,
                HEADING=_DASHES,
                INTERNAL=HIDDEN_LINE,
                BOTTOM_EDGE=_DASHES,
            ),
            "rows": _rows(RowSpec.uniform(" ")),
            "draw_vertical_edge": False,
        },
        BorderStyle.PLAIN: {
            "lines": _lines(HIDDEN_LINE),
            "rows": _rows(RowSpec.uniform(" ")),
            "draw_vertical_edge": False,
            "left_padding": 0,
            "right_padding": 0,
        },
    }
)


def default_border() -> BorderFormatter:
    """The border used when a table does not choose one."""
    return BorderFormatter.from_style(BorderStyle.ASCII_DOUBLE)
