"""Size markers for hashbundle's suites.

Lives at the repository root so that the doctests collected from
``src/hashbundle`` are marked as well as ``tests/``. Fixtures such as the
source tree and destination directory are in tests/conftest.py.
"""

from __future__ import annotations

from pathlib import Path

import pytest


SIZE_MARKERS = ('small', 'medium', 'large')


def _size_for(parts: tuple[str, ...]) -> str | None:
    for size in SIZE_MARKERS:
        if size in parts:
            return size
    # Module examples under src/ only touch memory or tmp files.
    if 'src' in parts:
        return 'small'
    return None


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config,  # noqa: ARG001
    items: list[pytest.Item],
) -> None:
    """Mark each unmarked item by the suite directory it was collected from.

    tests/small holds single-threaded tests on tmp_path trees, tests/medium
    the threaded publish and coalescing tests.
    """
    for item in items:
        if any(marker.name in SIZE_MARKERS for marker in item.iter_markers()):
            continue
        size = _size_for(Path(str(item.path)).parts)
        if size is not None:
            item.add_marker(getattr(pytest.mark, size))
