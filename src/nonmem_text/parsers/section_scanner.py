"""
Section scanning over report lines.

A section is the run of lines between a start-pattern match and the next
end-pattern match. The scanner is an explicit two-state machine:

    Idle --(start matches)--> Capturing --(end matches)--> Idle

While Capturing, the numeric tokens of every line are collected. The start
line is a header and contributes nothing unless the rule sets
``include_start``; the end line never contributes.
"""

import logging
from enum import Enum
from typing import Iterable, List, Literal, Optional, Pattern

from pydantic import BaseModel, ConfigDict

from .tokenizer import extract_numbers

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    """States of the section scanner."""

    IDLE = 'Idle'
    CAPTURING = 'Capturing'


class BoundaryRule(BaseModel):
    """
    Start/end pair that delimits one report section.

    Patterns are regular expressions matched with ``re.search`` against a
    single line. Pydantic compiles them from strings, so rules can be
    declared in YAML.

    Attributes:
        start: Opens capture (capture begins on the following line)
        end: Closes capture; None means capture runs to end of input
        include_start: Also capture tokens from the start line
        hold_until_data: Ignore end matches until a token was captured
        skip: Lines matching this pattern contribute no tokens
        occurrence: Which capture region scan() returns ('first' or 'last')
        block: Part of the report the rule applies to
    """

    model_config = ConfigDict(frozen=True)

    start: Pattern[str]
    end: Optional[Pattern[str]] = None
    include_start: bool = False
    hold_until_data: bool = False
    skip: Optional[Pattern[str]] = None
    occurrence: Literal['first', 'last'] = 'first'
    block: Literal['report', 'estimates', 'standard_errors'] = 'report'


class SectionScanner:
    """
    Extract numeric tokens from the capture regions of a BoundaryRule.

    The scanner keeps no state between calls; each call walks the lines
    from Idle.

    Example:
        >>> rule = BoundaryRule(start=r'^THETA', end=r'^OMEGA')
        >>> SectionScanner().scan(["THETA", "   1.0   2.0", "OMEGA"], rule)
        [1.0, 2.0]
    """

    def scan(self, lines: Iterable[str], rule: BoundaryRule) -> List[float]:
        """
        Tokens of the single capture region selected by rule.occurrence.

        Returns an empty list when the start pattern never matches; an
        absent section is not an error.
        """
        if rule.occurrence == 'first':
            regions = self._regions(lines, rule, stop_after_first=True)
        else:
            regions = self._regions(lines, rule)

        if not regions:
            logger.debug(f"Section start {rule.start.pattern!r} not found")
            return []

        return regions[0] if rule.occurrence == 'first' else regions[-1]

    def scan_all(self, lines: Iterable[str], rule: BoundaryRule) -> List[List[float]]:
        """Tokens of every capture region, in document order."""
        return self._regions(lines, rule)

    def _regions(
        self,
        lines: Iterable[str],
        rule: BoundaryRule,
        stop_after_first: bool = False
    ) -> List[List[float]]:
        regions: List[List[float]] = []
        state = ScanState.IDLE
        current: List[float] = []

        for line in lines:
            if state is ScanState.CAPTURING:
                if self._ends(line, rule, current):
                    regions.append(current)
                    current = []
                    state = ScanState.IDLE
                    if stop_after_first:
                        return regions
                    # The closing line may open the next region
                else:
                    if not (rule.skip and rule.skip.search(line)):
                        current.extend(extract_numbers(line))
                    continue

            if rule.start.search(line):
                state = ScanState.CAPTURING
                current = []
                if rule.include_start:
                    current.extend(extract_numbers(line))

        # No end marker: capture runs to end of input
        if state is ScanState.CAPTURING:
            regions.append(current)

        return regions

    @staticmethod
    def _ends(line: str, rule: BoundaryRule, captured: List[float]) -> bool:
        if rule.end is None:
            return False
        if rule.hold_until_data and not captured:
            return False
        return rule.end.search(line) is not None
