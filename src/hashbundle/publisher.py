"""Atomic publishing of finished bundles.

The finished bundle is made visible under its final name with a single
``os.replace`` from a file in the same directory, so a reader sees either no
file or the complete file. When the build's temporary file lives on another
filesystem its bytes are first copied into a hidden staging file next to the
target and synced to disk.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
import shutil
import tempfile

from hashbundle.errors import PublishError


logger = logging.getLogger(__name__)

STAGING_PREFIX = '.hashbundle-'


def current_umask() -> int:
    """Return the process umask.

    Read from /proc where available; otherwise set and restore it.
    """
    with contextlib.suppress(OSError, ValueError, IndexError):
        with open('/proc/self/status', encoding='ascii') as status:  # noqa: PTH123
            for line in status:
                if line.startswith('Umask:'):
                    return int(line.split()[1], 8)
    mask = os.umask(0o022)
    os.umask(mask)
    return mask


def set_artifact_mode(fd: int) -> None:
    """Give an open artifact file 0666 less the umask, as a plainly created file gets."""
    if hasattr(os, 'fchmod'):
        os.fchmod(fd, 0o666 & ~current_umask())


def _same_filesystem(source: Path, directory: Path) -> bool:
    return source.stat().st_dev == directory.stat().st_dev


def _stage_copy(source: Path, directory: Path) -> Path:
    """Copy source into a synced hidden file inside directory."""
    fd, name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix='.tmp', dir=directory)
    staged = Path(name)
    try:
        with os.fdopen(fd, 'wb') as out, source.open('rb') as src:
            shutil.copyfileobj(src, out)
            set_artifact_mode(out.fileno())
            out.flush()
            os.fsync(out.fileno())
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    return staged


def publish(temp_path: Path, target: Path) -> None:
    """Move a finished temporary file to target atomically.

    Parent directories of target are created when missing. temp_path no
    longer exists when this returns or raises.

    Args:
        temp_path: The fully written temporary file.
        target: Final artifact path.

    Raises:
        PublishError: If the directory cannot be created or the move fails.
    """
    staged: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if _same_filesystem(temp_path, target.parent):
            staged = temp_path
        else:
            staged = _stage_copy(temp_path, target.parent)
        os.replace(staged, target)
        staged = None
    except OSError as exc:
        raise PublishError(str(target), exc) from exc
    finally:
        if staged is not None and staged != temp_path:
            staged.unlink(missing_ok=True)
        with contextlib.suppress(FileNotFoundError):
            temp_path.unlink()
    logger.debug('Published %s', target)
