"""
Line source shared by every parser.

Normalizes raw report/table text into an ordered list of lines. The report
extractor keeps blank lines because they terminate several sections; the
table readers drop them.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from nonmem_text.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


def split_lines(text: str, drop_blank: bool = False) -> List[str]:
    """
    Split text into lines on any line-ending convention.

    Args:
        text: Raw text
        drop_blank: Remove empty and whitespace-only lines

    Returns:
        Lines without their line terminators

    Example:
        >>> split_lines("a\\r\\nb\\n\\nc")
        ['a', 'b', '', 'c']
        >>> split_lines("a\\r\\nb\\n\\nc", drop_blank=True)
        ['a', 'b', 'c']
    """
    normalized = text.replace('\r\n', '\n')
    lines = normalized.split('\n')

    # A trailing newline is a terminator, not an extra empty line
    if lines and lines[-1] == '':
        lines.pop()

    if drop_blank:
        lines = [line for line in lines if line.strip()]

    return lines


def read_text(
    path: Union[str, Path],
    encoding: Optional[str] = None,
    errors: Optional[str] = None
) -> str:
    """
    Read a whole text file.

    This is the only I/O performed per parse call; everything downstream
    works on the returned string.

    Args:
        path: File to read
        encoding: Text encoding (default from ParserSettings)
        errors: Decoding error policy (default from ParserSettings)

    Returns:
        File contents

    Raises:
        SourceUnavailableError: If the file does not exist, is not a regular
            file, or cannot be read
    """
    from nonmem_text.config import get_settings

    settings = get_settings()
    path = Path(path)

    if not path.exists():
        raise SourceUnavailableError(f"File not found: {path}")
    if not path.is_file():
        raise SourceUnavailableError(f"Path is not a file: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SourceUnavailableError(f"Cannot read {path}: {e}") from e

    logger.debug(f"Read {len(raw):,} bytes from {path}")
    return raw.decode(
        encoding or settings.encoding,
        errors or settings.encoding_errors
    )


def read_lines(path: Union[str, Path], drop_blank: bool = False) -> List[str]:
    """Read a file and split it with split_lines()."""
    return split_lines(read_text(path), drop_blank=drop_blank)
