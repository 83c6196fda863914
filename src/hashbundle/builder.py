"""Bundle building.

``build_file`` concatenates the distinct sources of a request, in first-seen
order, into a temporary file while hashing each source's contribution. The
ordered (path, hash) manifest is then hashed to name the artifact, and the
temporary file is published under that name.
"""

from __future__ import annotations

import hashlib
import io
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import TYPE_CHECKING, BinaryIO

from hashbundle.errors import ErrorAggregator, TransformError
from hashbundle.kinds import resolve_kind
from hashbundle.manifest import FingerprintMap
from hashbundle.publisher import publish, set_artifact_mode


if TYPE_CHECKING:
    from collections.abc import Sequence

    from hashbundle.transform import Transform


logger = logging.getLogger(__name__)


class HashingWriter(io.RawIOBase):
    """Write-through stream that hashes everything written to it.

    Example:
        >>> sink = io.BytesIO()
        >>> writer = HashingWriter(sink)
        >>> writer.write(b'alert(1);')
        9
        >>> sink.getvalue() == b'alert(1);'
        True
        >>> writer.hexdigest() == hashlib.sha1(b'alert(1);').hexdigest()
        True
    """

    def __init__(self, output: BinaryIO) -> None:
        super().__init__()
        self._output = output
        self._hash = hashlib.sha1()  # noqa: S324

    def writable(self) -> bool:
        return True

    def write(self, data: bytes | bytearray | memoryview) -> int:  # type: ignore[override]
        chunk = bytes(data)
        self._hash.update(chunk)
        self._output.write(chunk)
        return len(chunk)

    def hexdigest(self) -> str:
        """Return the hex SHA-1 of everything written so far."""
        return self._hash.hexdigest()


def prior_artifact_exists(destination: Path, prior_name: str | None) -> bool:
    """Return True if a previously published artifact is still on disk.

    Existence alone is taken as proof the artifact is current; its content is
    not compared with the sources.
    """
    if not prior_name:
        return False
    return (destination / prior_name).exists()


def _append_source(
    output: BinaryIO,
    source: str,
    transform: Transform | None,
    mimetype: str,
    errors: ErrorAggregator,
) -> str | None:
    """Append one source to output and return the hash of what it contributed.

    Read failures are recorded in errors and return None. Transform failures
    raise TransformError.
    """
    writer = HashingWriter(output)
    try:
        src = open(source, 'rb')  # noqa: PTH123, SIM115
    except OSError as exc:
        logger.warning('Unable to open %s: %s', source, exc)
        errors.add(source, exc)
        return None
    with src:
        if transform is None:
            try:
                shutil.copyfileobj(src, writer)
            except OSError as exc:
                logger.warning('Unable to read %s: %s', source, exc)
                errors.add(source, exc)
                return None
        else:
            try:
                transform.transform(mimetype, writer, src)
            except Exception as exc:
                raise TransformError(source, mimetype, exc) from exc
    digest = writer.hexdigest()
    logger.debug('Bundled %s (sha1 %s)', source, digest)
    return digest


def build_file(
    destination: str | os.PathLike[str],
    transform: Transform | None,
    content_kind: str | None,
    prior_name: str | None,
    sources: Sequence[str | os.PathLike[str]],
    *,
    always_rebuild: bool = False,
    temp_dir: str | os.PathLike[str] | None = None,
) -> str:
    """Build and publish the bundle for sources.

    The order of sources matters and is kept. A source listed more than once
    is only included at its first position.

    Args:
        destination: Directory artifacts are published into. Created when
                     missing.
        transform: Applied to every source, or None to copy sources verbatim.
        content_kind: Short kind name ('script', 'stylesheet', ...) or MIME
                      type. Selects the artifact prefix and extension.
        prior_name: Artifact name previously produced for this request. When
                    it still exists in destination it is returned untouched
                    and no source is read.
        sources: Source file paths in bundle order.
        always_rebuild: Ignore prior_name and always rebuild.
        temp_dir: Directory for the build's temporary file. Defaults to the
                  system temporary directory.

    Returns:
        The artifact file name, relative to destination.

    Raises:
        BuildError: If any source could not be read. Nothing is published.
        TransformError: If the transform failed on a source.
        PublishError: If the artifact could not be moved into destination.
    """
    destination = Path(destination)
    if not always_rebuild and prior_artifact_exists(destination, prior_name):
        logger.debug('Reusing %s in %s', prior_name, destination)
        return prior_name  # type: ignore[return-value]

    kind = resolve_kind(content_kind)
    fingerprints = FingerprintMap()
    errors = ErrorAggregator()

    fd, name = tempfile.mkstemp(prefix=kind.prefix, dir=temp_dir)
    temp_path = Path(name)
    try:
        with os.fdopen(fd, 'wb') as output:
            for raw_source in sources:
                source = os.fspath(raw_source)
                if fingerprints.exists(source):
                    continue
                fingerprints.set(source, '')
                digest = _append_source(output, source, transform, kind.mimetype, errors)
                if digest is not None:
                    fingerprints.set(source, digest)
            errors.raise_if_any()
            set_artifact_mode(output.fileno())
            output.flush()
            os.fsync(output.fileno())

        artifact = kind.artifact_name(fingerprints.digest())
        publish(temp_path, destination / artifact)
    finally:
        temp_path.unlink(missing_ok=True)

    logger.info('Built %s from %d source(s)', artifact, len(fingerprints))
    return artifact
