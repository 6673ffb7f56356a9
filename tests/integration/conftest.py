"""
Pytest configuration for integration tests.

Sample NONMEM output for one warfarin run lives in tests/data. Each test
gets its own copy so file discovery sees exactly those files.
"""

import shutil
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent.parent / 'data'


@pytest.fixture
def run_dir(tmp_path):
    """Copy of tests/data in a temporary directory."""
    target = tmp_path / 'run'
    shutil.copytree(DATA_DIR, target)
    return target


@pytest.fixture
def model_path(run_dir):
    return run_dir / 'run1.mod'
