"""
Configuration management using Pydantic Settings.

Provides type-safe access to:
- Report section boundary rules (loaded from the packaged sections.yaml)
- Runtime parser settings (environment variables / .env)
"""

from pathlib import Path
from typing import Dict, List, Optional
import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nonmem_text.exceptions import UnknownSectionError
from nonmem_text.parsers.section_scanner import BoundaryRule


SECTIONS_FILE = Path(__file__).parent / 'sections.yaml'


class SectionRulesConfig(BaseSettings):
    """
    Report section boundary rules automatically loaded from sections.yaml.

    Each rule pairs a start pattern with an end pattern (plus optional
    capture flags) and is consumed by SectionScanner. The rule set is a
    fixed property of the NONMEM report format; tests may pass explicit
    rules to construct an isolated configuration.

    Attributes:
        rules: Mapping of section name to BoundaryRule

    Example:
        >>> config = SectionRulesConfig()
        >>> config.is_valid_section('theta')
        True
        >>> config.rule('eigenvalues').hold_until_data
        True
    """

    rules: Dict[str, BoundaryRule] = Field(
        default_factory=dict,
        description="Section name to boundary rule"
    )

    model_config = SettingsConfigDict(
        env_prefix='NONMEM_TEXT_SECTIONS_',
        extra='ignore'
    )

    @model_validator(mode='before')
    @classmethod
    def load_yaml_config(cls, data: dict) -> dict:
        """
        Load rules from sections.yaml if not already provided.

        This validator runs before field validation and loads the YAML file
        if the data dict is empty (i.e., no values were provided).
        """
        # If data already has values (e.g., from tests), don't override
        if data:
            return data

        if not SECTIONS_FILE.exists():
            raise FileNotFoundError(
                f"Section rules not found at {SECTIONS_FILE}. "
                f"The package data file sections.yaml is missing."
            )

        with open(SECTIONS_FILE, 'r', encoding='utf-8') as f:
            yaml_data = yaml.safe_load(f)

        return {'rules': yaml_data or {}}

    def is_valid_section(self, name: Optional[str]) -> bool:
        """Check whether a section name has a boundary rule."""
        if name is None:
            return False
        return name in self.rules

    def rule(self, name: str) -> BoundaryRule:
        """
        Get the boundary rule for a section.

        Args:
            name: Section name (e.g., 'theta', 'gradients')

        Returns:
            BoundaryRule for the section

        Raises:
            UnknownSectionError: If the name is not defined
        """
        if name not in self.rules:
            raise UnknownSectionError(
                f"Unknown report section: '{name}'. "
                f"Available sections: {sorted(self.rules)}"
            )
        return self.rules[name]

    def names(self, block: Optional[str] = None) -> List[str]:
        """List section names, optionally restricted to one scan block."""
        return [
            name for name, rule in self.rules.items()
            if block is None or rule.block == block
        ]


# Singleton pattern - loaded once, cached forever
_section_rules: Optional[SectionRulesConfig] = None


def get_section_rules() -> SectionRulesConfig:
    """
    Get global section rule set (lazy-loaded singleton).

    Returns:
        Singleton SectionRulesConfig instance

    Example:
        >>> rules = get_section_rules()
        >>> rules is get_section_rules()
        True
    """
    global _section_rules
    if _section_rules is None:
        _section_rules = SectionRulesConfig()
    return _section_rules


class ParserSettings(BaseSettings):
    """
    Runtime parser settings loaded from environment variables.

    Environment Variables (from .env):
        NONMEM_TEXT_ENCODING: Text encoding of input files (default "utf-8")
        NONMEM_TEXT_ENCODING_ERRORS: Decoding error policy (default "replace")
        NONMEM_TEXT_TABLE_MARKER: Line prefix that opens a table section
        NONMEM_TEXT_HEADER_TOKEN: First column name of a segmented table header

    Note:
        The extended-row threshold of segmented tables is a constant of the
        NONMEM output format and intentionally not a setting.

    Example:
        >>> settings = get_settings()
        >>> settings.table_marker
        'TABLE NO'
    """

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to decode input files"
    )

    encoding_errors: str = Field(
        default="replace",
        description="Error handler passed to bytes.decode()"
    )

    table_marker: str = Field(
        default="TABLE NO",
        description="Prefix of the line that starts a new table section"
    )

    header_token: str = Field(
        default="ITERATION",
        description="Name of the first header column in segmented tables"
    )

    model_config = SettingsConfigDict(
        env_prefix='NONMEM_TEXT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton pattern - loaded once, cached forever
_settings: Optional[ParserSettings] = None


def get_settings() -> ParserSettings:
    """
    Get global parser settings instance (lazy-loaded singleton).

    Returns:
        Singleton ParserSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ParserSettings()
    return _settings
