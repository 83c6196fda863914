"""Shared pytest configuration and fixtures for hashbundle tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Iterator


# Register markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line('markers', 'small: Fast, isolated unit tests (< 100ms)')
    config.addinivalue_line('markers', 'medium: Integration tests with real resources (< 10s)')
    config.addinivalue_line('markers', 'large: End-to-end system tests (< 60s)')


class SourceTree:
    """Source files written under a base directory for a test."""

    def __init__(self, base: Path) -> None:
        self.base = base

    def write(self, name: str, content: str | bytes) -> str:
        """Write a source file and return its path as a string."""
        path = self.base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding='utf-8')
        return str(path)

    def path(self, name: str) -> str:
        """Return the path a source would have, whether or not it exists."""
        return str(self.base / name)


@pytest.fixture
def sources(tmp_path: Path) -> SourceTree:
    """Provide a SourceTree rooted in a fresh directory."""
    return SourceTree(tmp_path / 'src')


@pytest.fixture
def dist(tmp_path: Path) -> Path:
    """Provide a destination directory path that does not exist yet."""
    return tmp_path / 'dist'


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide an isolated directory for build temporary files."""
    path = tmp_path / 'tmp'
    path.mkdir()
    return path


@pytest.fixture
def umask_022() -> Iterator[int]:
    """Run the test under umask 022, restoring the previous mask afterwards."""
    previous = os.umask(0o022)
    try:
        yield 0o022
    finally:
        os.umask(previous)
