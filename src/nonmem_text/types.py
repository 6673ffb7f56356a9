"""
Discovery helper for the report sections nonmem-text knows about.

Provides a user-facing API over the rules in sections.yaml.
"""

from typing import Dict, List

from nonmem_text.config import get_section_rules
from nonmem_text.parsers.section_scanner import BoundaryRule


class ReportSections:
    """
    Helper class for discovering available report sections.

    Example:
        >>> ReportSections.list_available()
        ['theta', 'omega', 'sigma', 'theta_se', ...]

        >>> ReportSections.describe('eigenvalues')
        {'start': 'EIGENVALUES', 'end': '^\\\\s*$', ...}

        >>> ReportSections.is_valid('theta')
        True
    """

    @staticmethod
    def list_available() -> List[str]:
        """List all section names in definition order."""
        return get_section_rules().names()

    @staticmethod
    def list_by_block(block: str) -> List[str]:
        """
        List section names scanned within one part of the report.

        Args:
            block: 'estimates', 'standard_errors' or 'report'
        """
        return get_section_rules().names(block=block)

    @staticmethod
    def get_rule(name: str) -> BoundaryRule:
        """
        Get the boundary rule for a section.

        Raises:
            UnknownSectionError: If the section is not defined
        """
        return get_section_rules().rule(name)

    @staticmethod
    def describe(name: str) -> Dict[str, object]:
        """Rule for a section with patterns shown as plain strings."""
        rule = ReportSections.get_rule(name)
        return {
            'start': rule.start.pattern,
            'end': rule.end.pattern if rule.end else None,
            'include_start': rule.include_start,
            'hold_until_data': rule.hold_until_data,
            'skip': rule.skip.pattern if rule.skip else None,
            'occurrence': rule.occurrence,
            'block': rule.block,
        }

    @staticmethod
    def is_valid(name: str) -> bool:
        """Check whether a section name is defined."""
        return get_section_rules().is_valid_section(name)
