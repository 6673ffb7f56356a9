"""
nonmem-text: structured extraction of NONMEM report and table text.

Main package exports for user-facing API.
"""

from nonmem_text.exceptions import (
    NonmemTextError,
    SourceUnavailableError,
    UnknownSectionError,
)
from nonmem_text.models import (
    Report,
    TerminationStatus,
    Table,
    TableSection,
    SegmentedTable,
)
from nonmem_text.parsers import (
    parse_report,
    parse_report_text,
    parse_table,
    read_table,
    read_matrix,
    parse_segmented_table,
    read_segmented_table,
)
from nonmem_text.api import ModelRun, parse_many

__all__ = [
    'NonmemTextError',
    'SourceUnavailableError',
    'UnknownSectionError',
    'Report',
    'TerminationStatus',
    'Table',
    'TableSection',
    'SegmentedTable',
    'parse_report',
    'parse_report_text',
    'parse_table',
    'read_table',
    'read_matrix',
    'parse_segmented_table',
    'read_segmented_table',
    'ModelRun',
    'parse_many',
]
