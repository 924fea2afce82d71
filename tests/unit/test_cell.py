"""Tests for cell content formatting and ellipsis policies."""

import pytest

from plaintable.cell import CellContentFormatter, EllipsisPolicy
from plaintable.exceptions import ConfigurationError
from plaintable.models import Alignment, KeptSegment


class TestEllipsisPolicy:
    """Tests for EllipsisPolicy.shorten."""

    def test_text_that_fits_is_unchanged(self) -> None:
        """Text no longer than the width is returned as is."""
        assert EllipsisPolicy().shorten("apple", 5) == "apple"

    def test_keep_start(self) -> None:
        """START keeps the head of the text."""
        assert EllipsisPolicy().shorten("abcdefghij", 8) == "abcde..."

    def test_keep_end(self) -> None:
        """END keeps the tail of the text."""
        policy = EllipsisPolicy(kept_segment=KeptSegment.END)
        assert policy.shorten("abcdefghij", 8) == "...fghij"

    def test_keep_center_shows_sign_once(self) -> None:
        """CENTER keeps both ends around a single sign."""
        policy = EllipsisPolicy(kept_segment=KeptSegment.CENTER)
        assert policy.shorten("abcdefghij", 8) == "abc...ij"

    def test_huckleberry(self) -> None:
        """Shortening keeps the leading characters and ends with the sign."""
        assert EllipsisPolicy().shorten("huckleberry", 7) == "huck..."

    def test_trim_to_word_start(self) -> None:
        """Word trimming cuts the head at a space."""
        policy = EllipsisPolicy(trim_to_word=True)
        assert policy.shorten("ab cd ef gh", 8) == "ab cd..."

    def test_trim_to_word_end(self) -> None:
        """Word trimming starts the tail after a space."""
        policy = EllipsisPolicy(kept_segment=KeptSegment.END, trim_to_word=True)
        assert policy.shorten("ab cd ef gh", 8) == "...ef gh"

    def test_trim_to_word_without_space_cuts_mid_word(self) -> None:
        """Without a usable space the text is cut mid-word."""
        policy = EllipsisPolicy(trim_to_word=True)
        assert policy.shorten("abcdefghij", 8) == "abcde..."

    def test_width_smaller_than_sign(self) -> None:
        """A width below the sign length shows part of the sign."""
        assert EllipsisPolicy().shorten("abcdef", 2) == ".."

    def test_custom_sign(self) -> None:
        """The sign can be any non-empty text."""
        assert EllipsisPolicy(sign="~").shorten("abcdef", 4) == "abc~"

    def test_empty_sign_rejected(self) -> None:
        """An empty sign is a configuration error."""
        with pytest.raises(ConfigurationError, match="ellipsis sign"):
            EllipsisPolicy(sign="")


class TestCellContentFormatter:
    """Tests for CellContentFormatter.format."""

    def test_right_aligned_number(self) -> None:
        """Right alignment pads on the left."""
        assert CellContentFormatter.right_aligned().format("42", 5) == "   42"

    def test_left_aligned(self) -> None:
        """Left alignment pads on the right."""
        assert CellContentFormatter.left_aligned().format("ab", 5) == "ab   "

    def test_centered_odd_remainder_goes_right(self) -> None:
        """Centering puts the odd padding character on the right."""
        assert CellContentFormatter.centered().format("ab", 5) == " ab  "

    def test_padding_char(self) -> None:
        """Short cells are filled with the padding character."""
        formatter = CellContentFormatter(alignment=Alignment.RIGHT, padding_char=".")
        assert formatter.format("7", 3) == "..7"

    def test_null_value_is_aligned(self) -> None:
        """None is replaced by the null value, which is then padded."""
        formatter = CellContentFormatter.right_aligned(null_value="-")
        assert formatter.format(None, 3) == "  -"

    def test_natural_width_respects_min_width(self) -> None:
        """Without a forced width short text grows to min_width."""
        assert CellContentFormatter(min_width=4).format("ab") == "ab  "

    def test_natural_width_respects_max_width(self) -> None:
        """Without a forced width long text is shortened to max_width."""
        assert CellContentFormatter(max_width=5).format("abcdefgh") == "ab..."

    def test_forced_width_overrides_bounds(self) -> None:
        """A forced width is used exactly."""
        assert CellContentFormatter(max_width=2).format("abc", 6) == "abc   "

    def test_long_text_truncated_to_forced_width(self) -> None:
        """Over-long text is shortened with the column's ellipsis policy."""
        formatter = CellContentFormatter(ellipsis=EllipsisPolicy(kept_segment=KeptSegment.END))
        assert formatter.format("huckleberry", 7) == "...erry"

    @pytest.mark.parametrize("segment", list(KeptSegment))
    @pytest.mark.parametrize("trim_to_word", [False, True])
    def test_ellipsis_result_has_exact_width(
        self, segment: KeptSegment, trim_to_word: bool
    ) -> None:
        """Shortened cells have the exact width and one sign."""
        formatter = CellContentFormatter(
            ellipsis=EllipsisPolicy(kept_segment=segment, trim_to_word=trim_to_word)
        )
        text = "the quick brown fox"
        for width in range(3, len(text)):
            cell = formatter.format(text, width)
            assert len(cell) == width
            assert cell.count("...") == 1

    def test_bound_width(self) -> None:
        """bound_width clamps into [min_width, max_width]."""
        formatter = CellContentFormatter(min_width=2, max_width=4)
        assert formatter.bound_width(0) == 2
        assert formatter.bound_width(3) == 3
        assert formatter.bound_width(10) == 4

    def test_unbounded_max_width(self) -> None:
        """Without max_width there is no upper bound."""
        assert CellContentFormatter().bound_width(500) == 500


class TestCellContentFormatterValidation:
    """Tests for CellContentFormatter construction checks."""

    def test_padding_char_must_be_one_character(self) -> None:
        """Padding must be a single character."""
        with pytest.raises(ConfigurationError, match="padding_char"):
            CellContentFormatter(padding_char="--")

    def test_negative_min_width(self) -> None:
        """min_width cannot be negative."""
        with pytest.raises(ConfigurationError, match="min_width"):
            CellContentFormatter(min_width=-1)

    def test_max_width_below_min_width(self) -> None:
        """max_width must not be smaller than min_width."""
        with pytest.raises(ConfigurationError) as exc_info:
            CellContentFormatter(min_width=5, max_width=3)
        assert exc_info.value.field == "max_width"
        assert exc_info.value.value == 3
