"""
Structured records produced by the parsers.

Presentation layers consume these models and never mutate them.
"""

from nonmem_text.models.report import (
    Report,
    ParameterVectors,
    StandardErrors,
    TerminationStatus,
)
from nonmem_text.models.table import Cell, TypedRow, Table
from nonmem_text.models.segmented import (
    EXTENDED_ROW_KINDS,
    ColumnSummary,
    TableSection,
    SegmentedTable,
)

__all__ = [
    'Report',
    'ParameterVectors',
    'StandardErrors',
    'TerminationStatus',
    'Cell',
    'TypedRow',
    'Table',
    'EXTENDED_ROW_KINDS',
    'ColumnSummary',
    'TableSection',
    'SegmentedTable',
]
