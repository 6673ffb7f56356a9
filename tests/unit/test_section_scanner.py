"""
Unit tests for SectionScanner and BoundaryRule.
"""

import re

import pytest


class TestBoundaryRule:
    """Test suite for BoundaryRule model."""

    def test_patterns_compiled_from_strings(self):
        """Should compile start/end strings into regex patterns."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start=r'^\s*THETA', end=r'^\s*OMEGA')

        assert isinstance(rule.start, re.Pattern)
        assert rule.end.pattern == r'^\s*OMEGA'

    def test_defaults(self):
        """Should default to a plain first-occurrence report rule."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='X')

        assert rule.end is None
        assert rule.include_start is False
        assert rule.hold_until_data is False
        assert rule.skip is None
        assert rule.occurrence == 'first'
        assert rule.block == 'report'

    def test_invalid_occurrence_rejected(self):
        """Should reject occurrence values other than first/last."""
        from pydantic import ValidationError
        from nonmem_text.parsers.section_scanner import BoundaryRule

        with pytest.raises(ValidationError):
            BoundaryRule(start='X', occurrence='middle')

    def test_rule_is_frozen(self):
        """Should not allow mutation after construction."""
        from pydantic import ValidationError
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='X')
        with pytest.raises(ValidationError):
            rule.include_start = True


class TestSectionScanner:
    """Test suite for the Idle/Capturing scanner."""

    @pytest.fixture
    def scanner(self):
        from nonmem_text.parsers.section_scanner import SectionScanner
        return SectionScanner()

    def test_captures_between_start_and_end(self, scanner):
        """Should collect tokens after the start line up to the end line."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["THETA  9.0", "   1.0   2.0", "   3.0", "OMEGA  7.0", "   8.0"]
        rule = BoundaryRule(start='^THETA', end='^OMEGA')

        assert scanner.scan(lines, rule) == [1.0, 2.0, 3.0]

    def test_include_start(self, scanner):
        """Should take tokens from the start line when include_start is set."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = [" ETABAR:   1.0  2.0", " SE:   3.0"]
        rule = BoundaryRule(start=r'^\s*ETABAR:', end=r'^\s*SE:', include_start=True)

        assert scanner.scan(lines, rule) == [1.0, 2.0]

    def test_missing_start_returns_empty(self, scanner):
        """Should return [] without error when the section is absent."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='^EIGENVALUES', end='^$')

        assert scanner.scan(["   1.0   2.0"], rule) == []

    def test_runs_to_end_without_end_match(self, scanner):
        """Should capture to end of input when the end never matches."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='^SIGMA', end='^NEVER')

        assert scanner.scan(["SIGMA", "   0.1", "   0.2"], rule) == [0.1, 0.2]

    def test_runs_to_end_without_end_pattern(self, scanner):
        """Should capture to end of input when the rule has no end."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='^SIGMA')

        assert scanner.scan(["SIGMA", "   0.1"], rule) == [0.1]

    def test_first_region_only(self, scanner):
        """Should ignore start matches after the first region closes."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["A", "   1.0", "B", "A", "   2.0", "B"]
        rule = BoundaryRule(start='^A', end='^B')

        assert scanner.scan(lines, rule) == [1.0]

    def test_last_occurrence(self, scanner):
        """Should return the final region when occurrence is 'last'."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["A", "   1.0", "B", "A", "   2.0", "B"]
        rule = BoundaryRule(start='^A', end='^B', occurrence='last')

        assert scanner.scan(lines, rule) == [2.0]

    def test_scan_all(self, scanner):
        """Should return every region in document order."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["A", "   1.0", "B", "x", "A", "   2.0", "   3.0"]
        rule = BoundaryRule(start='^A', end='^B')

        assert scanner.scan_all(lines, rule) == [[1.0], [2.0, 3.0]]

    def test_end_line_can_open_next_region(self, scanner):
        """Should let a closing line also start the next region."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["SEC", "   1.0", "SEC", "   2.0"]
        rule = BoundaryRule(start='^SEC', end='^SEC')

        assert scanner.scan_all(lines, rule) == [[1.0], [2.0]]

    def test_hold_until_data(self, scanner):
        """Should ignore end matches before the first token is captured."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["EIGENVALUES", "", "   1.0   2.0", "", "   9.0"]
        rule = BoundaryRule(start='EIGENVALUES', end=r'^\s*$', hold_until_data=True)

        assert scanner.scan(lines, rule) == [1.0, 2.0]

    def test_without_hold_blank_closes_immediately(self, scanner):
        """Should close on the first end match when hold is off."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["EIGENVALUES", "", "   1.0   2.0", ""]
        rule = BoundaryRule(start='EIGENVALUES', end=r'^\s*$')

        assert scanner.scan(lines, rule) == []

    def test_skip_lines(self, scanner):
        """Should drop tokens of lines matching the skip pattern."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["EIGEN", "             1         2", "         1.5E-01  2.5E+00", ""]
        rule = BoundaryRule(
            start='EIGEN', end=r'^\s*$', hold_until_data=True, skip=r'^[\s\d]+$'
        )

        assert scanner.scan(lines, rule) == [0.15, 2.5]

    def test_stateless_between_calls(self, scanner):
        """Should return identical results for repeated scans."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        lines = ["A", "   1.0", "B"]
        rule = BoundaryRule(start='^A', end='^B')

        assert scanner.scan(lines, rule) == scanner.scan(lines, rule) == [1.0]

    def test_accepts_iterators(self, scanner):
        """Should scan any iterable of lines, not only lists."""
        from nonmem_text.parsers.section_scanner import BoundaryRule

        rule = BoundaryRule(start='^A', end='^B')

        assert scanner.scan(iter(["A", "   4.0", "B"]), rule) == [4.0]
