"""
Exception types for nonmem-text.

Only unreadable input is an error. Missing report sections, short table
rows and sections without iteration rows are represented in the returned
models instead of being raised.
"""


class NonmemTextError(Exception):
    """Base exception for nonmem-text errors."""

    pass


class SourceUnavailableError(NonmemTextError, OSError):
    """Raised when an input file does not exist or cannot be read."""

    pass


class UnknownSectionError(NonmemTextError, KeyError):
    """Raised when a report section name is not defined in sections.yaml."""

    pass
