"""Exceptions raised while building bundles.

Read failures are collected per file by ErrorAggregator so that one missing
source does not hide the others; the whole build then fails with a single
BuildError. Transform and publish failures abort the build immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading


class HashbundleError(Exception):
    """Base class for all hashbundle errors."""


class ConfigError(HashbundleError, ValueError):
    """Invalid configuration value."""


@dataclass(frozen=True)
class FileError:
    """A source that could not be read.

    Attributes:
        path: The source path as requested.
        error: The underlying exception.
    """

    path: str
    error: BaseException

    def __str__(self) -> str:
        return f'{self.path}: {self.error}'


class BuildError(HashbundleError):
    """One or more sources could not be read; nothing was published."""

    def __init__(self, failures: list[FileError]) -> None:
        self.failures = list(failures)
        details = '; '.join(str(failure) for failure in self.failures)
        super().__init__(f'failed to read {len(self.failures)} source file(s): {details}')

    @property
    def paths(self) -> list[str]:
        """Return the failing source paths in the order they were attempted."""
        return [failure.path for failure in self.failures]


class TransformError(HashbundleError):
    """A transform failed on a source; the build was abandoned."""

    def __init__(self, path: str, mimetype: str, error: BaseException) -> None:
        self.path = path
        self.mimetype = mimetype
        self.error = error
        super().__init__(f'transform for {mimetype} failed on {path}: {error}')


class PublishError(HashbundleError):
    """The bundle could not be moved into the destination directory."""

    def __init__(self, target: str, error: BaseException) -> None:
        self.target = target
        self.error = error
        super().__init__(f'failed to publish {target}: {error}')


class ErrorAggregator:
    """Collects per-file read failures during a build.

    Thread-safe, though a single build only ever adds from one thread.

    Example:
        >>> errors = ErrorAggregator()
        >>> errors.add('missing.js', FileNotFoundError('missing.js'))
        >>> bool(errors)
        True
        >>> errors.paths
        ['missing.js']
    """

    def __init__(self) -> None:
        self._failures: list[FileError] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)

    def __bool__(self) -> bool:
        return len(self) > 0

    @property
    def paths(self) -> list[str]:
        """Return the failing paths recorded so far."""
        with self._lock:
            return [failure.path for failure in self._failures]

    def add(self, path: str, error: BaseException) -> None:
        """Record a failure for path."""
        with self._lock:
            self._failures.append(FileError(path, error))

    def raise_if_any(self) -> None:
        """Raise BuildError if any failure was recorded.

        Raises:
            BuildError: Listing every recorded failure.
        """
        with self._lock:
            failures = list(self._failures)
        if failures:
            raise BuildError(failures)
