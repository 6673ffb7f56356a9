"""
Unit tests for the spacing-sensitive numeric tokenizer.
"""

import math

import pytest


class TestExtractNumbers:
    """Test suite for extract_numbers()."""

    def test_label_digits_are_not_tokens(self):
        """Should not split label fragments like 'ETA1' into numbers."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("ETA1       -0.0023") == [-0.0023]

    def test_theta_header_yields_nothing(self):
        """Should ignore 'TH 1' style labels separated by single spaces."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("         TH 1      TH 2      TH 3") == []

    def test_scientific_notation(self):
        """Should parse exponent notation preceded by two spaces."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("         2.75E+00  7.63E+01  1.52E+00") == [2.75, 76.3, 1.52]

    def test_single_space_requires_sign(self):
        """Should accept one space only before an explicit sign."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("X -1.5") == [-1.5]
        assert extract_numbers("X +2.0") == [2.0]
        assert extract_numbers("X 1.5") == []

    def test_number_at_line_start_is_ignored(self):
        """Should not take a number with no preceding spaces."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("1.0  2.0") == [2.0]

    def test_no_partial_tokens(self):
        """Should never yield a fragment of a longer numeral."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("  12.345E-02") == [pytest.approx(0.12345)]
        assert extract_numbers("  1.0.5") == []
        assert extract_numbers("  12abc") == []

    def test_empty_line(self):
        """Should return an empty list for lines without tokens."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("") == []
        assert extract_numbers(" ETA1") == []

    def test_idempotent(self):
        """Should return identical output for repeated calls on one line."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        line = "+        0.00E+00  1.90E-02 -3.3E-04"
        assert extract_numbers(line) == extract_numbers(line)
        assert extract_numbers(line) == [0.0, 0.019, -0.00033]

    def test_dotted_placeholder_is_nan(self):
        """Should keep NONMEM '.........' placeholders as NaN in position."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        values = extract_numbers("+       .........  6.00E-03")
        assert len(values) == 2
        assert math.isnan(values[0])
        assert values[1] == 0.006

    def test_dots_need_spacing(self):
        """Should ignore dot runs that the spacing rule does not qualify."""
        from nonmem_text.parsers.tokenizer import extract_numbers

        assert extract_numbers("NO. OF SIG. DIGITS.....  3.4") == [3.4]
        assert extract_numbers("  .  1.0") == [1.0]


class TestParseCell:
    """Test suite for parse_cell() and parse_number()."""

    def test_integer_stays_int(self):
        """Should keep integral numerals as int."""
        from nonmem_text.parsers.tokenizer import parse_cell

        value = parse_cell("1")
        assert value == 1
        assert isinstance(value, int)

    def test_float_and_exponent(self):
        """Should convert fractions and exponents to float."""
        from nonmem_text.parsers.tokenizer import parse_cell

        assert parse_cell("0.0") == 0.0
        assert isinstance(parse_cell("0.0"), float)
        assert parse_cell("-1.5E-02") == -0.015
        assert parse_cell("1E3") == 1000.0
        assert parse_cell(".5") == 0.5

    def test_text_is_returned_unchanged(self):
        """Should fall back to the original string for non-numerals."""
        from nonmem_text.parsers.tokenizer import parse_cell

        assert parse_cell("NAME") == "NAME"
        assert parse_cell("THETA1") == "THETA1"
        assert parse_cell("1.2.3") == "1.2.3"

    def test_large_negative_sentinel(self):
        """Should parse the extended-row sentinel as an int."""
        from nonmem_text.parsers.tokenizer import parse_number

        assert parse_number("-1000000001") == -1000000001
