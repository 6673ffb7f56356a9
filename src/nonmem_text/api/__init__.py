"""
User-facing API interfaces for nonmem-text.

This module provides run-level access to a model's output files and
concurrent parsing of many files.
"""

from nonmem_text.api.run import ModelRun, table_file_names
from nonmem_text.api.batch import BatchResult, parse_many

__all__ = [
    'ModelRun',
    'table_file_names',
    'BatchResult',
    'parse_many',
]
