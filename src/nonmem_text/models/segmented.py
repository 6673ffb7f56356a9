"""
Models for segmented tables such as NONMEM .ext iteration files.

An .ext file repeats a "TABLE NO." block per estimation step. Within a block,
rows with ITERATION above the extended-row threshold are iterations
(primary rows); rows at or below it carry final estimates, standard errors,
eigenvalues and other per-step summaries (extended rows).
"""

from typing import Dict, Iterator, List, Optional, Union, overload

from pydantic import BaseModel, ConfigDict, Field

from .table import Cell, Table, TypedRow


# ITERATION codes NONMEM uses for extended rows
EXTENDED_ROW_KINDS: Dict[str, int] = {
    'final_estimates': -1000000000,
    'standard_errors': -1000000001,
    'eigenvalues': -1000000002,
    'condition_number': -1000000003,
    'sd_correlation': -1000000004,
    'sd_correlation_se': -1000000005,
    'fixed': -1000000006,
    'termination': -1000000007,
    'partial_derivatives': -1000000008,
}


class ColumnSummary(BaseModel):
    """First/last value and sparkline series of one numeric column."""

    model_config = ConfigDict(frozen=True)

    first: Cell
    last: Optional[Cell] = None
    series: List[Optional[Cell]] = Field(
        default_factory=list,
        description="Column value on every primary row, in row order (None where a row is short)"
    )


class TableSection(BaseModel):
    """
    One "TABLE NO." block of a segmented table.

    Attributes:
        label: The section marker line, verbatim
        header: Column names of this section
        sentinel_column: Column that classifies rows (first header column)
        rows: Primary (iteration) rows
        extended_rows: Rows at or below the extended-row threshold
        summary: Per-column summaries for columns numeric on the first row

    Example:
        >>> section.first_row['OBJ']
        1234.5
        >>> section.summary['OBJ'].series
        [1234.5, 1200.1, 1190.8]
        >>> section.extended_row('standard_errors')['THETA1']
        0.12
    """

    model_config = ConfigDict(frozen=True)

    label: str
    header: List[str]
    sentinel_column: str
    rows: List[Dict[str, Cell]]
    extended_rows: List[Dict[str, Cell]] = Field(default_factory=list)
    summary: Dict[str, ColumnSummary] = Field(default_factory=dict)

    @property
    def first_row(self) -> TypedRow:
        return self.rows[0]

    @property
    def last_row(self) -> TypedRow:
        return self.rows[-1]

    @property
    def method(self) -> Optional[str]:
        """Estimation method named on the marker line, if any."""
        parts = self.label.split(':')
        if len(parts) < 2:
            return None
        return parts[1].strip() or None

    def table(self) -> Table:
        """Primary rows as a Table."""
        return Table(self.header, self.rows)

    def extended_row(self, kind: str) -> Optional[TypedRow]:
        """
        Look up an extended row by its NONMEM meaning.

        Args:
            kind: One of EXTENDED_ROW_KINDS (e.g., 'final_estimates')

        Returns:
            The row, or None if this section does not contain it

        Raises:
            ValueError: If kind is not a known extended-row kind
        """
        if kind not in EXTENDED_ROW_KINDS:
            raise ValueError(
                f"Unknown extended row kind: '{kind}'. "
                f"Valid kinds: {list(EXTENDED_ROW_KINDS)}"
            )
        code = EXTENDED_ROW_KINDS[kind]
        for row in self.extended_rows:
            if row.get(self.sentinel_column) == code:
                return row
        return None


class SegmentedTable:
    """
    Ordered collection of TableSection objects from one file.

    Sections without primary rows are never part of the collection.

    Example:
        >>> iterations = read_segmented_table('run1.ext')
        >>> iterations.final.method
        'First Order Conditional Estimation with Interaction'
        >>> iterations['TABLE NO.     1: ...']  # by marker line
    """

    def __init__(self, sections: List[TableSection]):
        self._sections = list(sections)

    @overload
    def __getitem__(self, key: int) -> TableSection: ...

    @overload
    def __getitem__(self, key: str) -> TableSection: ...

    @overload
    def __getitem__(self, key: slice) -> 'SegmentedTable': ...

    def __getitem__(self, key: Union[int, str, slice]) -> Union[TableSection, 'SegmentedTable']:
        """
        Access sections by index, marker line, or slice.

        Raises:
            KeyError: If no section has the given label
            IndexError: If integer index out of range
        """
        if isinstance(key, int):
            return self._sections[key]
        elif isinstance(key, str):
            for section in self._sections:
                if section.label == key or section.label.strip() == key.strip():
                    return section
            raise KeyError(f"No section labelled '{key}'")
        elif isinstance(key, slice):
            return SegmentedTable(self._sections[key])
        else:
            raise TypeError(f"Invalid key type: {type(key).__name__}")

    def __iter__(self) -> Iterator[TableSection]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"SegmentedTable(sections={len(self._sections)})"

    @property
    def labels(self) -> List[str]:
        """Marker lines of all sections, in file order."""
        return [section.label for section in self._sections]

    @property
    def final(self) -> Optional[TableSection]:
        """Last section (the final estimation step), or None if empty."""
        return self._sections[-1] if self._sections else None
