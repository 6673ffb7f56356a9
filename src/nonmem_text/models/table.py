"""
Typed rows and tables read from whitespace-delimited NONMEM output.

A TypedRow maps column name to an int/float when the cell is a numeral and
to the original string otherwise. Keys follow header order. A short source
row simply lacks its trailing keys.
"""

from typing import Dict, Iterator, List, Optional, Union, overload

import pandas as pd

Cell = Union[int, float, str]

TypedRow = Dict[str, Cell]


class Table:
    """
    Ordered collection of TypedRow sharing one header.

    Example:
        >>> table = Table(['ID', 'DV'], [{'ID': 1, 'DV': 5.2}])
        >>> table[0]['DV']
        5.2
        >>> table['ID']
        [1]
    """

    def __init__(self, header: List[str], rows: List[TypedRow]):
        """
        Initialize Table.

        Args:
            header: Column names in source order
            rows: Typed rows keyed by header names
        """
        self._header = list(header)
        self._rows = list(rows)

    @property
    def header(self) -> List[str]:
        """Column names in source order (copy)."""
        return list(self._header)

    @property
    def rows(self) -> List[TypedRow]:
        """All rows in source order (copy of the list)."""
        return list(self._rows)

    @overload
    def __getitem__(self, key: int) -> TypedRow: ...

    @overload
    def __getitem__(self, key: str) -> List[Optional[Cell]]: ...

    @overload
    def __getitem__(self, key: slice) -> 'Table': ...

    def __getitem__(self, key: Union[int, str, slice]) -> Union[TypedRow, List[Optional[Cell]], 'Table']:
        """
        Access rows by index or slice, or a column by name.

        Raises:
            KeyError: If the column name is not in the header
            IndexError: If integer index out of range
        """
        if isinstance(key, int):
            return self._rows[key]
        elif isinstance(key, str):
            return self.column(key)
        elif isinstance(key, slice):
            return Table(self._header, self._rows[key])
        else:
            raise TypeError(f"Invalid key type: {type(key).__name__}")

    def __iter__(self) -> Iterator[TypedRow]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._header == other._header and self._rows == other._rows

    def __repr__(self) -> str:
        return f"Table(columns={self._header}, rows={len(self._rows)})"

    def column(self, name: str) -> List[Optional[Cell]]:
        """
        Values of one column across all rows.

        Rows that are too short to contain the column yield None.

        Raises:
            KeyError: If the column name is not in the header
        """
        if name not in self._header:
            raise KeyError(f"No column '{name}' in table (columns: {self._header})")
        return [row.get(name) for row in self._rows]

    def to_dataframe(self, index: Optional[str] = None) -> pd.DataFrame:
        """
        Convert to a pandas DataFrame with columns in header order.

        Args:
            index: Optional column to use as the DataFrame index

        Returns:
            DataFrame (missing trailing cells become NaN)
        """
        columns = list(dict.fromkeys(self._header))
        df = pd.DataFrame(self._rows, columns=columns)
        if index is not None:
            df = df.set_index(index)
        return df
