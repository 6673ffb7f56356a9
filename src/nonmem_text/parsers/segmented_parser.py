"""
Segmented table reading for NONMEM .ext iteration files.

Algorithm:
1. Partition lines into sections at each marker line ("TABLE NO...")
2. Locate each section's header line by its first column name ("ITERATION");
   sections without one are dropped
3. Type all other lines against the header
4. Split rows on the sentinel column: above EXTENDED_ROW_THRESHOLD are
   primary (iteration) rows, at or below it extended rows
5. Drop sections with no primary rows
6. Summarize every column that is numeric on the first primary row

Column typing for summaries is decided by the first primary row only, so a
column that starts numeric keeps its series even if later cells are text.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from nonmem_text.models.segmented import ColumnSummary, SegmentedTable, TableSection
from nonmem_text.models.table import TypedRow
from .lines import read_text, split_lines
from .table_parser import parse_row

logger = logging.getLogger(__name__)


# Fixed by the NONMEM output format: ITERATION values at or below this mark
# extended (non-iteration) rows
EXTENDED_ROW_THRESHOLD = -1000000000


def split_sections(lines: List[str], marker: str) -> List[Tuple[str, List[str]]]:
    """
    Partition lines at marker lines.

    Lines before the first marker form a section with an empty label.

    Returns:
        (marker line verbatim, body lines) pairs in file order
    """
    sections: List[Tuple[str, List[str]]] = []
    label = ''
    body: List[str] = []
    started = False

    for line in lines:
        if line.strip().startswith(marker):
            if started or body:
                sections.append((label, body))
            label = line
            body = []
            started = True
        else:
            body.append(line)

    if started or body:
        sections.append((label, body))

    return sections


def is_primary(row: TypedRow, sentinel_column: str) -> bool:
    """
    Classify a row as an iteration row.

    A row whose sentinel cell is missing or not a number is not primary.
    """
    value = row.get(sentinel_column)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > EXTENDED_ROW_THRESHOLD


def summarize(header: List[str], rows: List[TypedRow]) -> Dict[str, ColumnSummary]:
    """
    First/last value and sparkline series per numeric column.

    A column is summarized when its cell on the first row is a number.
    The series has one entry per row; a row too short to reach the column
    contributes None so positions stay aligned with rows.
    """
    if not rows:
        return {}

    first_row = rows[0]
    summary = {}
    for column in header:
        value = first_row.get(column)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            series = [row.get(column) for row in rows]
            summary[column] = ColumnSummary(
                first=series[0],
                last=series[-1],
                series=series,
            )
    return summary


def parse_section(
    label: str,
    body: List[str],
    header_token: str
) -> Optional[TableSection]:
    """
    Build one TableSection, or None if it has no header or no primary rows.
    """
    header: Optional[List[str]] = None
    data_lines = []
    for line in body:
        if line.strip().startswith(header_token):
            if header is None:
                header = line.split()
            continue
        data_lines.append(line)

    if header is None:
        logger.debug(f"Dropping section without '{header_token}' header: {label!r}")
        return None

    sentinel_column = header[0]
    rows = [parse_row(header, line) for line in data_lines]
    primary = [row for row in rows if is_primary(row, sentinel_column)]
    extended = [row for row in rows if not is_primary(row, sentinel_column)]

    if not primary:
        logger.debug(
            f"Dropping section with no iteration rows "
            f"({len(extended)} extended): {label!r}"
        )
        return None

    return TableSection(
        label=label,
        header=header,
        sentinel_column=sentinel_column,
        rows=primary,
        extended_rows=extended,
        summary=summarize(header, primary),
    )


def parse_segmented_table(
    text: str,
    marker: Optional[str] = None,
    header_token: Optional[str] = None
) -> SegmentedTable:
    """
    Parse segmented table text (e.g. an .ext file).

    Args:
        text: Full file text
        marker: Section marker prefix (default from ParserSettings, "TABLE NO")
        header_token: First header column (default from ParserSettings,
            "ITERATION")

    Returns:
        SegmentedTable of sections that have at least one primary row

    Example:
        >>> tables = parse_segmented_table(ext_text)
        >>> tables[0].summary['OBJ'].last
        1190.8
    """
    from nonmem_text.config import get_settings

    settings = get_settings()
    marker = marker or settings.table_marker
    header_token = header_token or settings.header_token

    lines = split_lines(text, drop_blank=True)
    sections = []
    for label, body in split_sections(lines, marker):
        section = parse_section(label, body, header_token)
        if section is not None:
            sections.append(section)

    logger.debug(f"Parsed segmented table: {len(sections)} section(s) kept")
    return SegmentedTable(sections)


def read_segmented_table(path: Union[str, Path]) -> SegmentedTable:
    """
    Read a segmented table file.

    Raises:
        SourceUnavailableError: If the file cannot be read
    """
    return parse_segmented_table(read_text(path))
