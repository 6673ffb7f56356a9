"""
Run-level access to the output files of one NONMEM model.

Given a control stream (run1.mod), NONMEM writes its results next to it:
run1.lst (listing), run1.ext (iterations), run1.cov/.cor/.phi (matrices)
and any $TABLE FILE= outputs. ModelRun locates those files and hands them
to the parsers.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

import pandas as pd

from nonmem_text.models import Report, SegmentedTable, Table
from nonmem_text.parsers.lines import read_lines
from nonmem_text.parsers.report_parser import ReportExtractor, parse_report
from nonmem_text.parsers.segmented_parser import read_segmented_table
from nonmem_text.parsers.table_parser import read_matrix, read_table

logger = logging.getLogger(__name__)


TABLE_RECORD = re.compile(r'^\s*\$TABLE\b', re.IGNORECASE)
RECORD_START = re.compile(r'^\s*\$')
TABLE_FILE = re.compile(r'\bFILE\s*=\s*(\S+)', re.IGNORECASE)


def table_file_names(control_lines: List[str]) -> List[str]:
    """
    File names given by FILE= on $TABLE records.

    A record continues until the next line starting with '$'. Text after
    ';' is a comment.

    Example:
        >>> table_file_names(["$TABLE ID TIME DV", "  NOPRINT FILE=sdtab1"])
        ['sdtab1']
    """
    names = []
    in_table = False
    for line in control_lines:
        if RECORD_START.match(line):
            in_table = bool(TABLE_RECORD.match(line))
        if not in_table:
            continue
        code = line.split(';', 1)[0]
        match = TABLE_FILE.search(code)
        if match and match.group(1) not in names:
            names.append(match.group(1))
    return names


class ModelRun:
    """
    Output files of a single model run.

    Args:
        model_path: Control stream path (e.g., 'runs/run1.mod')

    Example:
        >>> run = ModelRun('runs/run1.mod')
        >>> run.report().termination_status
        <TerminationStatus.SUCCESSFUL: 'Successful'>
        >>> run.iterations().final.summary['OBJ'].last
        1190.8
        >>> [p.name for p in run.table_files()]
        ['sdtab1', 'patab1']
    """

    def __init__(self, model_path: Union[str, Path]):
        self.model_path = Path(model_path)
        self.directory = self.model_path.parent
        self.name = self.model_path.stem

    def __repr__(self) -> str:
        return f"ModelRun('{self.model_path}')"

    @property
    def report_path(self) -> Path:
        """The .lst listing, or the control stream itself if there is none."""
        lst = self.model_path.with_suffix('.lst')
        if lst.exists():
            return lst
        logger.info(f"No listing for {self.model_path.name}, using the control stream")
        return self.model_path

    @property
    def ext_path(self) -> Path:
        return self.model_path.with_suffix('.ext')

    def sibling(self, suffix: str) -> Path:
        """Path of an output file sharing the model's base name."""
        return self.model_path.with_suffix(suffix)

    def linked_files(self) -> List[Path]:
        """Existing files in the model directory sharing its base name."""
        if not self.directory.is_dir():
            return []
        return sorted(
            path for path in self.directory.iterdir()
            if path.is_file()
            and path.stem == self.name
            and path.name != self.model_path.name
        )

    def table_files(self) -> List[Path]:
        """Existing $TABLE output files named in the control stream."""
        names = table_file_names(read_lines(self.model_path))
        found = []
        for name in names:
            path = self.directory / name
            if path.is_file():
                found.append(path)
            else:
                logger.warning(f"Table file {name} named in {self.model_path.name} not found")
        return found

    def report(self) -> Report:
        """
        Parse the listing.

        Raises:
            SourceUnavailableError: If neither listing nor control stream exists
        """
        return parse_report(self.report_path)

    def reports(self) -> List[Report]:
        """Parse the listing into one Report per estimation step."""
        return ReportExtractor().extract_methods(read_lines(self.report_path))

    def iterations(self) -> SegmentedTable:
        """
        Parse the .ext iteration file.

        Raises:
            SourceUnavailableError: If the .ext file does not exist
        """
        return read_segmented_table(self.ext_path)

    def table(self, name: str, skip_repeated_headers: bool = True) -> Table:
        """
        Parse a $TABLE output file in the model directory.

        Raises:
            SourceUnavailableError: If the file does not exist
        """
        return read_table(self.directory / name, skip_repeated_headers=skip_repeated_headers)

    def matrix(self, suffix: str = '.cov') -> pd.DataFrame:
        """
        Parse a covariance-type matrix file (.cov, .cor, .coi, .phi).

        Raises:
            SourceUnavailableError: If the file does not exist
        """
        return read_matrix(self.sibling(suffix))
