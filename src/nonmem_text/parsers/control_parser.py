"""
Parameter setup from the head of a NONMEM listing.

A listing opens with a verbatim echo of the control stream, followed by the
initial estimates NONMEM actually started from:

    $THETA (0, 0.1) ; CL
    $OMEGA BLOCK(2) FIX ; IIV
     0.1 ; IIV_CL
     0.01 0.1 ; IIV_V
    ...
    0INITIAL ESTIMATE OF THETA:
     LOWER BOUND    INITIAL EST    UPPER BOUND
      0.0000E+00     1.0000E-01     1.0000E+06
    0INITIAL ESTIMATE OF OMEGA:
     0.1000E+00
     0.0000E+00   0.1000E+00

Labels and FIX flags come from the echoed records, initial values from the
INITIAL ESTIMATE tables.
"""

import logging
import re
from typing import Dict, List, Optional

from nonmem_text.models.report import ParameterVectors
from .tokenizer import CELL_PATTERN

logger = logging.getLogger(__name__)


PARAMETER_KINDS = ('theta', 'omega', 'sigma')

RECORD = re.compile(r'^\s*\$(\w+)')
BLOCK = re.compile(r'BLOCK\s*\(\s*(\d+)\s*\)', re.IGNORECASE)
SAME = re.compile(r'\bSAME\b', re.IGNORECASE)
DIGIT = re.compile(r'\d')

# The echo ends where the program output starts
PROGRAM_BANNER = re.compile(r'NONLINEAR MIXED EFFECTS MODEL PROGRAM')

INITIAL_ESTIMATE = re.compile(r'INITIAL ESTIMATE OF (THETA|OMEGA|SIGMA)')
# Carriage-controlled ('0', '1') or blank lines close an initial-estimate table
INITIAL_ESTIMATE_END = re.compile(r'^\S|^\s*$')


def _split_comment(line: str):
    code, _, comment = line.partition(';')
    return code, comment.strip()


def _numeric_row(line: str) -> Optional[List[float]]:
    """All tokens of the line as floats, or None if any token is a word."""
    tokens = line.split()
    if not tokens or not all(CELL_PATTERN.fullmatch(token) for token in tokens):
        return None
    return [float(token) for token in tokens]


def parameter_records(lines: List[str]) -> Dict[str, list]:
    """
    Labels and FIX flags from the echoed $THETA, $OMEGA and $SIGMA records.

    Each record line that holds a number defines one parameter; its label is
    the text after ``;`` and it is fixed when the line carries ``FIX``. For
    OMEGA and SIGMA only diagonal elements get an entry: a ``BLOCK(n)``
    record spans n rows and every row shares the block's FIX flag, while
    ``BLOCK(n) SAME`` repeats n entries without values.

    Args:
        lines: Listing lines (or the lines of a control stream)

    Returns:
        Report field values keyed ``theta_labels``, ``theta_fixed``,
        ``omega_labels`` and so on, each a list in record order
    """
    fields: Dict[str, list] = {}
    for kind in PARAMETER_KINDS:
        fields[f'{kind}_labels'] = []
        fields[f'{kind}_fixed'] = []

    kind: Optional[str] = None
    block_rows = 0
    block_fixed = False

    def add(label: str, fixed: bool):
        fields[f'{kind}_labels'].append(label)
        fields[f'{kind}_fixed'].append(fixed)

    for line in lines:
        if PROGRAM_BANNER.search(line):
            break

        record = RECORD.match(line)
        if record:
            name = record.group(1).lower()
            # $THETAP, $OMEGAPD and friends are priors, not parameters
            kind = name if name in PARAMETER_KINDS else None
            block_rows = 0
            block_fixed = False
            line = line[record.end():]
        if kind is None:
            continue

        code, label = _split_comment(line)
        fixed = 'FIX' in code.upper()

        block = BLOCK.search(code)
        if block and kind != 'theta':
            block_rows = int(block.group(1))
            block_fixed = fixed
            if SAME.search(code):
                for _ in range(block_rows):
                    add(label, block_fixed)
                block_rows = 0
                continue
            code = code[block.end():]

        if not DIGIT.search(code):
            continue

        if block_rows:
            add(label, block_fixed or fixed)
            block_rows -= 1
            if not block_rows:
                block_fixed = False
        else:
            add(label, fixed)

    logger.debug(
        f"Parameter records: {len(fields['theta_labels'])} THETA, "
        f"{len(fields['omega_labels'])} OMEGA, {len(fields['sigma_labels'])} SIGMA"
    )
    return fields


def initial_estimates(lines: List[str]) -> ParameterVectors:
    """
    Initial THETA, OMEGA and SIGMA values from the INITIAL ESTIMATE tables.

    THETA rows print lower bound, initial value and upper bound; the middle
    column is kept. OMEGA and SIGMA rows are lower-triangular matrix rows,
    flattened in print order like the final estimates. Rows holding words
    (block headers, ``YES``/``NO`` fixed columns) are ignored. Only the
    first table of each kind is read.
    """
    values: Dict[str, List[float]] = {kind: [] for kind in PARAMETER_KINDS}
    seen = set()
    kind: Optional[str] = None

    for line in lines:
        start = INITIAL_ESTIMATE.search(line)
        if start:
            kind = start.group(1).lower()
            if kind in seen:
                kind = None
            else:
                seen.add(kind)
            continue
        if kind is None:
            continue
        if INITIAL_ESTIMATE_END.search(line):
            kind = None
            continue

        row = _numeric_row(line)
        if row is None:
            continue
        if kind == 'theta':
            if len(row) >= 3:
                values['theta'].append(row[1])
        else:
            values[kind].extend(row)

    return ParameterVectors(**values)
