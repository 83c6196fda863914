"""In-memory reuse cache of artifact names per request.

A request is identified by its exact list of requested paths, before
duplicates are removed. The cache remembers the last artifact name built for
each request so that the builder can skip straight to its existence check.
Entries live for the lifetime of the cache. An optional bound evicts the
least recently used request.
"""

from __future__ import annotations

from collections import OrderedDict
import hashlib
import logging
import os
import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence


logger = logging.getLogger(__name__)


def make_request_key(sources: Sequence[str | os.PathLike[str]]) -> str:
    """Return the request key for a list of requested paths.

    The paths are concatenated as given, duplicates and order included, and
    hashed.

    Example:
        >>> make_request_key(['a.js', 'b.js']) == make_request_key(['a.jsb.js'])
        True
        >>> make_request_key(['a.js', 'b.js']) == make_request_key(['b.js', 'a.js'])
        False
    """
    joined = ''.join(os.fspath(source) for source in sources)
    return hashlib.sha1(joined.encode('utf-8', 'surrogateescape')).hexdigest()  # noqa: S324


class ReuseCache:
    """Thread-safe map of request key to last artifact name.

    Every operation holds the lock only for a single map access.

    Example:
        >>> cache = ReuseCache()
        >>> cache.lookup('k')
        (None, False)
        >>> cache.record('k', 'jsbuild-abc.js')
        >>> cache.lookup('k')
        ('jsbuild-abc.js', True)
    """

    def __init__(self, max_entries: int | None = None) -> None:
        """Initialize an empty cache.

        Args:
            max_entries: Evict the least recently used request beyond this
                         many entries. None keeps every entry.
        """
        if max_entries is not None and max_entries <= 0:
            msg = f'max_entries must be positive, got {max_entries}'
            raise ValueError(msg)
        self._max_entries = max_entries
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def lookup(self, request_key: str) -> tuple[str | None, bool]:
        """Return the last artifact name recorded for request_key.

        Returns:
            (artifact name, True) on a hit, (None, False) otherwise.
        """
        with self._lock:
            name = self._entries.get(request_key)
            if name is None:
                self._misses += 1
                return None, False
            self._hits += 1
            if self._max_entries is not None:
                self._entries.move_to_end(request_key)
            return name, True

    def record(self, request_key: str, artifact_name: str) -> None:
        """Remember artifact_name as the current artifact for request_key."""
        with self._lock:
            self._entries[request_key] = artifact_name
            self._entries.move_to_end(request_key)
            evicted = None
            if self._max_entries is not None and len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
        if evicted is not None:
            logger.debug('Evicted request %s from reuse cache', evicted)

    def clear(self) -> None:
        """Remove all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, and total_entries counts.
        """
        with self._lock:
            return {
                'hits': self._hits,
                'misses': self._misses,
                'total_entries': len(self._entries),
            }
