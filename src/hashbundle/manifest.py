"""Ordered fingerprint map and manifest hashing.

The manifest records, per distinct source path, the SHA-1 of the bytes that
source contributed to a bundle. Entries keep the order in which each path was
first seen, so the manifest digest depends on which files were used, in what
order, and what they contained.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterator


_HTML_ESCAPES = str.maketrans({
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
})


@dataclass
class FingerprintEntry:
    """One manifest line.

    Attributes:
        key: Source path as requested.
        value: Hex SHA-1 of the source's bundled bytes, or '' while pending.
    """

    key: str
    value: str = ''


class FingerprintMap:
    """Insertion-ordered mapping of source path to content hash.

    There is no deletion. Setting an existing key updates its value in place
    and keeps the position it was first inserted at.

    Example:
        >>> fingerprints = FingerprintMap()
        >>> fingerprints.set('a.js', '')
        >>> fingerprints.set('b.js', 'bb')
        >>> fingerprints.set('a.js', 'aa')
        >>> [(e.key, e.value) for e in fingerprints]
        [('a.js', 'aa'), ('b.js', 'bb')]
    """

    def __init__(self) -> None:
        self._entries: list[FingerprintEntry] = []
        self._positions: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FingerprintEntry]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def exists(self, key: str) -> bool:
        """Return True if key has been set."""
        return key in self._positions

    def index_of(self, key: str) -> tuple[int, bool]:
        """Return the position of key and whether it was found.

        A missing key reports position 0 with found set to False.
        """
        if key not in self._positions:
            return 0, False
        return self._positions[key], True

    def get(self, key: str) -> str | None:
        """Return the value stored for key, or None."""
        index, found = self.index_of(key)
        if not found:
            return None
        return self._entries[index].value

    def set(self, key: str, value: str) -> None:
        """Set key to value, appending key if it is new."""
        index, found = self.index_of(key)
        if found:
            self._entries[index].value = value
            return
        self._positions[key] = len(self._entries)
        self._entries.append(FingerprintEntry(key, value))

    def keys(self) -> list[str]:
        """Return the keys in first-seen order."""
        return [entry.key for entry in self._entries]

    def serialize(self) -> bytes:
        """Serialize the entries as a compact, order-preserving JSON array.

        An empty map serializes as ``null``. ``<``, ``>``, ``&``, U+2028 and
        U+2029 are written as ``\\u`` escapes. Paths holding undecodable bytes
        keep those bytes.

        Returns:
            UTF-8 bytes of ``[{"Key": ..., "Value": ...}, ...]``.

        Example:
            >>> FingerprintMap().serialize()
            b'null'
            >>> fingerprints = FingerprintMap()
            >>> fingerprints.set('a&b.js', 'x')
            >>> fingerprints.serialize()
            b'[{"Key":"a\\\\u0026b.js","Value":"x"}]'
        """
        if not self._entries:
            return b'null'
        payload = [{'Key': entry.key, 'Value': entry.value} for entry in self._entries]
        text = json.dumps(payload, separators=(',', ':'), ensure_ascii=False).translate(_HTML_ESCAPES)
        return text.encode('utf-8', 'surrogateescape')

    def digest(self) -> str:
        """Return the hex SHA-1 of the serialized manifest."""
        return hashlib.sha1(self.serialize()).hexdigest()  # noqa: S324


def dedupe(sources: list[str]) -> list[str]:
    """Return sources with later duplicates removed, first occurrence kept.

    Example:
        >>> dedupe(['a.js', 'b.js', 'a.js'])
        ['a.js', 'b.js']
    """
    seen = FingerprintMap()
    for source in sources:
        if not seen.exists(source):
            seen.set(source, '')
    return seen.keys()
