"""
Parsing modules for NONMEM output text.

- Line source: line-ending normalization shared by all parsers
- Numeric tokenizer: spacing-sensitive number extraction
- Section scanner: Idle/Capturing state machine over boundary rules
- Report extractor: .lst listing -> Report
- Control parser: parameter labels, FIX flags and initial estimates
- Table readers: $TABLE output -> Table, .ext -> SegmentedTable
"""

from .lines import split_lines, read_text, read_lines
from .tokenizer import extract_numbers, parse_number, parse_cell
from .section_scanner import BoundaryRule, ScanState, SectionScanner
from .control_parser import parameter_records, initial_estimates
from .report_parser import (
    ReportExtractor,
    parse_report,
    parse_report_text,
    parse_report_methods,
)
from .table_parser import parse_row, parse_table, read_table, read_matrix
from .segmented_parser import (
    EXTENDED_ROW_THRESHOLD,
    parse_segmented_table,
    read_segmented_table,
)

__all__ = [
    # Line source
    'split_lines',
    'read_text',
    'read_lines',
    # Tokenizer
    'extract_numbers',
    'parse_number',
    'parse_cell',
    # Section scanning
    'BoundaryRule',
    'ScanState',
    'SectionScanner',
    # Reports
    'ReportExtractor',
    'parse_report',
    'parse_report_text',
    'parse_report_methods',
    'parameter_records',
    'initial_estimates',
    # Tables
    'parse_row',
    'parse_table',
    'read_table',
    'read_matrix',
    'EXTENDED_ROW_THRESHOLD',
    'parse_segmented_table',
    'read_segmented_table',
]
