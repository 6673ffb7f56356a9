"""
Report extraction for NONMEM listing (.lst) files.

Composes SectionScanner runs, one per named section rule from
sections.yaml, and assembles a Report:

1. Parameter estimates are scanned inside the FINAL PARAMETER ESTIMATE block
2. Standard errors are scanned inside the STANDARD ERROR OF ESTIMATE block
3. Diagnostics (eigenvalues, gradients, shrinkage, ETABAR) scan the whole report
4. Status fields (termination, OFV, timings, flags) come from single lines
5. Labels, FIX flags and initial estimates come from the listing head

A missing section is never an error: its field stays empty/None/Unknown.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Pattern, Union

from nonmem_text.models.report import (
    ParameterVectors,
    Report,
    StandardErrors,
    TerminationStatus,
)
from .control_parser import initial_estimates, parameter_records
from .lines import read_lines, split_lines
from .section_scanner import SectionScanner
from .tokenizer import NUMBER

if TYPE_CHECKING:
    from nonmem_text.config import SectionRulesConfig

logger = logging.getLogger(__name__)


# First matching line decides
TERMINATION_MARKERS = [
    ('MINIMIZATION SUCCESSFUL', TerminationStatus.SUCCESSFUL),
    ('MINIMIZATION TERMINATED', TerminationStatus.TERMINATED),
]

OFV_LINE = re.compile(r'(FINAL VALUE|MINIMUM VALUE) OF OBJECTIVE FUNCTION:')
OBJV_TAG = re.compile(r'#OBJV:')
TRAILING_NUMBER = re.compile(r'(' + NUMBER + r')\s*$')
ANY_NUMBER = re.compile(NUMBER)

ESTIMATE_BLOCK = re.compile(r'FINAL PARAMETER ESTIMATE')
SE_BLOCK = re.compile(r'STANDARD ERROR OF ESTIMATE')
SE_BLOCK_END = re.compile(r'COVARIANCE MATRIX OF ESTIMATE|CORRELATION MATRIX OF ESTIMATE')

METHOD_TAG = re.compile(r'#METH:')
NEAR_BOUNDARY = re.compile(r'NEAR ITS BOUNDARY')
COVARIANCE_MATRIX = re.compile(r'COVARIANCE MATRIX OF ESTIMATE')
ESTIMATION_TIME = re.compile(r'Elapsed\s*estimation\s*time\s*in\s*seconds:\s*(' + NUMBER + r')')
COVARIANCE_TIME = re.compile(r'Elapsed\s*covariance\s*time\s*in\s*seconds:\s*(' + NUMBER + r')')

TERM_TAG = re.compile(r'#TERM:')
TERMINATION_LINE = re.compile(r'MINIMIZATION (SUCCESSFUL|TERMINATED)')
TERMINATION_TEXT_END = re.compile(r'ETABAR|#TERE:|^1(?!\d)')
SIMULATION = re.compile(r'SIMULATION STEP PERFORMED')
# NONMEM carriage control in column 1: '0' skips a line, '1' ejects a page
CARRIAGE_CONTROL = re.compile(r'^[01](?!\d)')

# Section rule name -> Report field name
REPORT_SECTIONS = {
    'eigenvalues': 'eigenvalues',
    'gradients': 'gradients',
    'shrinkage': 'shrinkage',
    'eps_shrinkage': 'eps_shrinkage',
    'relative_standard_errors': 'relative_standard_errors',
    'etabar': 'eta_bar',
    'etabar_se': 'etabar_se',
    'etabar_p_values': 'etabar_p_values',
}


def _block(
    lines: List[str],
    start: Pattern[str],
    end: Optional[Pattern[str]] = None
) -> Optional[List[str]]:
    """
    Lines after the first start match, up to (excluding) the next end match.

    Returns None if start never matches.
    """
    for i, line in enumerate(lines):
        if start.search(line):
            block = []
            for following in lines[i + 1:]:
                if end is not None and end.search(following):
                    break
                block.append(following)
            return block
    return None


def _first_float(pattern: Pattern[str], lines: List[str]) -> Optional[float]:
    for line in lines:
        match = pattern.search(line)
        if match:
            return float(match.group(1))
    return None


class ReportExtractor:
    """
    Build a Report from the lines of a NONMEM listing.

    Args:
        scanner: SectionScanner to use (default: new instance)
        rules: Section rule configuration (default: packaged sections.yaml)

    Example:
        >>> extractor = ReportExtractor()
        >>> report = extractor.extract(split_lines(text))
        >>> report.parameter_vectors.theta
        [2.75, 76.3, 1.52]
    """

    def __init__(
        self,
        scanner: Optional[SectionScanner] = None,
        rules: Optional['SectionRulesConfig'] = None
    ):
        from nonmem_text.config import get_section_rules

        self.scanner = scanner or SectionScanner()
        self.rules = rules or get_section_rules()

    def extract(self, lines: List[str]) -> Report:
        """
        Extract every known section from report lines.

        Args:
            lines: Report lines, blank lines included

        Returns:
            Report (fields of absent sections are empty)
        """
        estimates = self._estimate_lines(lines)
        errors = _block(lines, SE_BLOCK, SE_BLOCK_END) or []

        diagnostics: Dict[str, List[float]] = {
            field: self._scan(lines, name)
            for name, field in REPORT_SECTIONS.items()
        }

        report = Report(
            termination_status=self.termination_status(lines),
            objective_function_value=self.objective_function_value(lines),
            parameter_vectors=ParameterVectors(
                theta=self._scan(estimates, 'theta'),
                omega=self._scan(estimates, 'omega'),
                sigma=self._scan(estimates, 'sigma'),
            ),
            standard_errors=StandardErrors(
                theta_se=self._scan(errors, 'theta_se'),
                omega_se=self._scan(errors, 'omega_se'),
                sigma_se=self._scan(errors, 'sigma_se'),
            ),
            estimation_method=self.estimation_method(lines),
            near_boundary=any(NEAR_BOUNDARY.search(line) for line in lines),
            covariance_step=any(
                COVARIANCE_MATRIX.search(line) and 'INVERSE' not in line
                for line in lines
            ),
            estimation_time=_first_float(ESTIMATION_TIME, lines),
            covariance_time=_first_float(COVARIANCE_TIME, lines),
            termination_text=self.termination_text(lines),
            **diagnostics,
            **self.setup_fields(lines),
        )

        logger.debug(
            f"Extracted report: status={report.termination_status.value}, "
            f"ofv={report.objective_function_value}, "
            f"theta={len(report.parameter_vectors.theta)}, "
            f"eigenvalues={len(report.eigenvalues)}"
        )
        return report

    def extract_methods(self, lines: List[str]) -> List[Report]:
        """
        Extract one Report per estimation step.

        The listing is split at each ``#METH:`` line. A listing without
        method tags yields a single Report for the whole text. Labels, FIX
        flags, initial estimates and simulation info are read from the
        lines before the first step and shared by every step.
        """
        starts = [i for i, line in enumerate(lines) if METHOD_TAG.search(line)]
        if not starts:
            return [self.extract(lines)]

        setup = self.setup_fields(lines[:starts[0]])
        bounds = starts + [len(lines)]
        logger.debug(f"Found {len(starts)} estimation step(s)")
        return [
            self.extract(lines[begin:end]).model_copy(update=setup)
            for begin, end in zip(bounds, bounds[1:])
        ]

    @staticmethod
    def setup_fields(lines: List[str]) -> Dict[str, Any]:
        """Report fields describing the run setup rather than its results."""
        return {
            'initial_estimates': initial_estimates(lines),
            'simulation_info': ReportExtractor.simulation_info(lines),
            **parameter_records(lines),
        }

    def _scan(self, lines: List[str], name: str) -> List[float]:
        return self.scanner.scan(lines, self.rules.rule(name))

    @staticmethod
    def _estimate_lines(lines: List[str]) -> List[str]:
        block = _block(lines, ESTIMATE_BLOCK, SE_BLOCK)
        if block is not None:
            return block
        # No banner: everything before the standard-error block
        for i, line in enumerate(lines):
            if SE_BLOCK.search(line):
                return lines[:i]
        return lines

    @staticmethod
    def termination_status(lines: List[str]) -> TerminationStatus:
        """Status from the first line reporting a minimization outcome."""
        for line in lines:
            for marker, status in TERMINATION_MARKERS:
                if marker in line:
                    return status
        return TerminationStatus.UNKNOWN

    @staticmethod
    def objective_function_value(lines: List[str]) -> Optional[float]:
        """
        Final objective function value.

        Taken from the trailing number of a ``FINAL VALUE``/``MINIMUM VALUE
        OF OBJECTIVE FUNCTION:`` line; NONMEM 7 listings print it on the
        ``#OBJV:`` tag line instead, which is used as a fallback.
        """
        for line in lines:
            match = OFV_LINE.search(line)
            if match:
                value = TRAILING_NUMBER.search(line[match.end():])
                if value:
                    return float(value.group(1))

        for line in lines:
            if OBJV_TAG.search(line):
                cleaned = OBJV_TAG.sub('', line).replace('*', ' ')
                value = ANY_NUMBER.search(cleaned)
                if value:
                    return float(value.group(0))

        return None

    @staticmethod
    def termination_text(lines: List[str]) -> Optional[str]:
        """
        Minimization message printed after ``#TERM:``.

        Runs up to the ETABAR summary (or ``#TERE:``, or a page eject).
        Listings without the tag start at the minimization outcome line.
        Carriage-control characters and blank lines are dropped.
        """
        begin = next((i + 1 for i, line in enumerate(lines) if TERM_TAG.search(line)), None)
        if begin is None:
            begin = next((i for i, line in enumerate(lines) if TERMINATION_LINE.search(line)), None)
        if begin is None:
            return None

        text = []
        for line in lines[begin:]:
            if TERMINATION_TEXT_END.search(line):
                break
            cleaned = CARRIAGE_CONTROL.sub('', line).strip()
            if cleaned:
                text.append(cleaned)
        return '\n'.join(text) or None

    @staticmethod
    def simulation_info(lines: List[str]) -> Optional[str]:
        """
        Simulation summary starting at ``SIMULATION STEP PERFORMED``.

        Collects the indented lines that follow (sources, seeds). Only the
        first simulation is kept; later ones add a ``[multiple simulations]``
        note.
        """
        info: List[str] = []
        capturing = False
        for line in lines:
            if SIMULATION.search(line):
                if info:
                    info.append('[multiple simulations]')
                    break
                capturing = True
            elif capturing and line.strip() and not line.startswith(' '):
                capturing = False

            if capturing and line.strip():
                info.append(CARRIAGE_CONTROL.sub('', line).strip())
        return '\n'.join(info) or None

    @staticmethod
    def estimation_method(lines: List[str]) -> Optional[str]:
        for line in lines:
            match = METHOD_TAG.search(line)
            if match:
                return line[match.end():].strip() or None
        return None


def parse_report_text(text: str) -> Report:
    """Extract a Report from in-memory listing text."""
    return ReportExtractor().extract(split_lines(text))


def parse_report(path: Union[str, Path]) -> Report:
    """
    Read and extract a NONMEM listing file.

    Raises:
        SourceUnavailableError: If the file cannot be read
    """
    logger.debug(f"Parsing report {path}")
    return ReportExtractor().extract(read_lines(path))


def parse_report_methods(path: Union[str, Path]) -> List[Report]:
    """Read a listing file and extract one Report per estimation step."""
    return ReportExtractor().extract_methods(read_lines(path))
