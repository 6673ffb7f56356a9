"""
Delimited table reading for NONMEM $TABLE output and matrix files.

Layout after blank lines are dropped:
- line 0: title (e.g. "TABLE NO.  1"), ignored
- line 1: header, whitespace-delimited column names
- line 2+: data rows, whitespace-delimited cells
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from nonmem_text.models.table import Table, TypedRow
from .lines import read_text, split_lines
from .tokenizer import parse_cell

logger = logging.getLogger(__name__)


def parse_row(header: List[str], line: str) -> TypedRow:
    """
    Type one data line against a header.

    Cells are matched to columns by position. Missing trailing cells leave
    their keys out of the row; surplus cells are ignored. A repeated column
    name keeps the later cell.

    Example:
        >>> parse_row(['ID', 'TIME', 'DV'], '  1  0.5')
        {'ID': 1, 'TIME': 0.5}
    """
    values = line.split()
    return {
        column: parse_cell(value)
        for column, value in zip(header, values)
    }


def parse_table(text: str, skip_repeated_headers: bool = False) -> Table:
    """
    Parse whitespace-delimited table text.

    Args:
        text: Full table text (title line, header line, data lines)
        skip_repeated_headers: Drop repeated title and header lines that
            NONMEM writes before each subproblem's rows

    Returns:
        Table (empty, with no columns, if the text has no header line)

    Example:
        >>> table = parse_table("title\\nID TIME DV\\n1 0.0 5.2\\n1 1.0 4.8\\n")
        >>> table[1]
        {'ID': 1, 'TIME': 1.0, 'DV': 4.8}
    """
    lines = split_lines(text, drop_blank=True)
    if len(lines) < 2:
        logger.debug(f"Table text has {len(lines)} non-empty line(s); no header")
        return Table([], [])

    title = lines[0].strip()
    header_line = lines[1]
    header = header_line.split()

    rows = []
    for line in lines[2:]:
        if skip_repeated_headers and (
            line.strip() == title or line.split() == header
        ):
            continue
        rows.append(parse_row(header, line))

    logger.debug(f"Parsed table: {len(header)} columns, {len(rows)} rows")
    return Table(header, rows)


def read_table(path: Union[str, Path], skip_repeated_headers: bool = False) -> Table:
    """
    Read a table file.

    Raises:
        SourceUnavailableError: If the file cannot be read
    """
    return parse_table(read_text(path), skip_repeated_headers=skip_repeated_headers)


def read_matrix(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a .cov/.cor/.coi/.phi style table as a DataFrame.

    The first header column (NAME for covariance-type files) becomes the
    index; the remaining columns keep their header order.

    Raises:
        SourceUnavailableError: If the file cannot be read
    """
    table = read_table(path, skip_repeated_headers=True)
    if not table.header:
        return pd.DataFrame()
    return table.to_dataframe(index=table.header[0])
