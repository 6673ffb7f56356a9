"""
Integration tests for concurrent parsing with parse_many().
"""

import pytest

from nonmem_text import parse_many, read_segmented_table
from nonmem_text.api.batch import BatchResult


pytestmark = pytest.mark.integration


class TestParseMany:
    """Test suite for parse_many()."""

    def test_reports_and_failures(self, run_dir):
        """Should parse readable files and record failures per path."""
        good = run_dir / 'run1.lst'
        bad = run_dir / 'run2.lst'

        result = parse_many([good, bad], use_processes=False, max_workers=2)

        assert result.succeeded == 1
        assert result.failed == 1
        assert result.results[str(good)].objective_function_value == 280.457
        assert result.failures[str(bad)].startswith('SourceUnavailableError')

    def test_custom_parser(self, run_dir):
        """Should apply any path-taking parser."""
        ext = run_dir / 'run1.ext'

        result = parse_many([ext], parser=read_segmented_table, use_processes=False)

        assert len(result.results[str(ext)]) == 1

    def test_many_copies(self, run_dir):
        """Should parse independent copies concurrently with equal results."""
        paths = []
        source = (run_dir / 'run1.lst').read_bytes()
        for i in range(6):
            path = run_dir / f'copy{i}.lst'
            path.write_bytes(source)
            paths.append(path)

        result = parse_many(paths, use_processes=False, max_workers=3)

        assert result.failed == 0
        reports = list(result.results.values())
        # Reports hold NaN standard errors, so compare NaN-free fields
        first = reports[0]
        for report in reports:
            assert report.parameter_vectors == first.parameter_vectors
            assert report.objective_function_value == first.objective_function_value
            assert report.eigenvalues == first.eigenvalues
            assert report.theta_labels == first.theta_labels

    def test_empty_input(self):
        """Should return an empty result without starting a pool."""
        result = parse_many([])

        assert isinstance(result, BatchResult)
        assert result.succeeded == 0
        assert result.failed == 0
