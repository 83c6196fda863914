"""Expansion of requested source patterns into file paths."""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable


logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset('*?[')


def is_glob(pattern: str) -> bool:
    """Return True if pattern contains glob metacharacters."""
    return any(char in _GLOB_CHARS for char in pattern)


def expand_patterns(base: str | os.PathLike[str], patterns: Iterable[str]) -> list[str]:
    """Expand patterns relative to base, keeping pattern order.

    Matches of one glob are sorted. A plain path matches itself when it
    exists. A pattern that matches nothing is logged and contributes nothing.

    Args:
        base: Directory relative patterns are joined to.
        patterns: Paths or glob patterns.

    Returns:
        File paths in request order. Duplicates are kept.
    """
    base_path = Path(base)
    filenames: list[str] = []
    for pattern in patterns:
        joined = os.fspath(base_path / pattern)
        if is_glob(pattern):
            matches = sorted(glob.glob(joined))  # noqa: PTH207
        else:
            matches = [joined] if os.path.lexists(joined) else []
        if not matches:
            logger.warning('Pattern %s did not match any files (base directory %s)', joined, base_path.resolve())
        filenames.extend(matches)
    return filenames


def parse_name_list(text: str) -> list[str]:
    """Split a comma-separated list of names, dropping blanks.

    Example:
        >>> parse_name_list(' a.js, ,b.js,')
        ['a.js', 'b.js']
    """
    return [name.strip() for name in text.split(',') if name.strip()]
