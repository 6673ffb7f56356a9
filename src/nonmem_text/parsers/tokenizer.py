"""
Numeric tokenization for NONMEM report and table text.

Report lines mix labels and numbers separated by single spaces
(``TH 1    2.3E-01``, ``ETA1       -0.0023``). A number only counts as a
token when it is preceded by two or more spaces, or by a single space and
carries an explicit sign. Labels such as ``TH 1`` or ``ETA1`` therefore
never yield tokens.

NONMEM prints a run of dots (``.........``) where a fixed element has no
standard error. Under the same spacing rule such a run is a token whose
value is NaN, so the element keeps its position.
"""

import math
import re
from typing import List, Union

from nonmem_text.models.table import Cell


# Optional sign, digits, optional fraction, optional exponent
NUMBER = r'[+-]?\d+(?:\.\d*)?(?:[eE][+-]?\d+)?'

# Group 1 holds the numeral; a match without it is a dotted placeholder
TOKEN_PATTERN = re.compile(
    r'(?:(?<=  )|(?<= )(?=[+-]))'
    + r'(?:(' + NUMBER + r')|\.{2,})'
    + r'(?![\w.])'
)

# Table cells also accept a leading-dot fraction such as ".5"
CELL_PATTERN = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')


def extract_numbers(line: str) -> List[float]:
    """
    Extract the numeric tokens of one report line.

    Args:
        line: A single line of report text

    Returns:
        Token values in line order (empty if none qualify). A dotted
        placeholder gives ``nan``.

    Example:
        >>> extract_numbers("         TH 1      TH 2")
        []
        >>> extract_numbers("         2.75E+00  7.63E+01")
        [2.75, 76.3]
        >>> extract_numbers(" ETA1       -0.0023")
        [-0.0023]
        >>> extract_numbers("+       .........  6.00E-03")
        [nan, 0.006]
    """
    return [
        float(match.group(1)) if match.group(1) is not None else math.nan
        for match in TOKEN_PATTERN.finditer(line)
    ]


def parse_number(token: str) -> Union[int, float]:
    """
    Convert a numeral to int or float.

    Integers stay integers so identifier columns (ID, ITERATION) keep their
    natural type; anything with a fraction or exponent becomes a float.
    """
    if any(c in token for c in '.eE'):
        return float(token)
    return int(token)


def parse_cell(token: str) -> Cell:
    """
    Type a single table cell.

    Args:
        token: Raw whitespace-delimited cell text

    Returns:
        int or float when the whole token is a numeral, otherwise the
        original string unchanged

    Example:
        >>> parse_cell("1")
        1
        >>> parse_cell("-1.5E-02")
        -0.015
        >>> parse_cell("NAME")
        'NAME'
    """
    if CELL_PATTERN.fullmatch(token):
        return parse_number(token)
    return token
