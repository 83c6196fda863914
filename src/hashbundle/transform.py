"""Per-file transforms applied before bundling.

A transform reads one source stream and writes its replacement to the bundle
output, typically a minifier. When no transform is registered for a MIME type
the source bytes are copied through unchanged.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    BinaryIO,
    Protocol,
    runtime_checkable,
)


if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Transform(Protocol):
    """Protocol for source transforms."""

    def transform(self, mimetype: str, output: BinaryIO, source: BinaryIO) -> None:
        """Write the transformed content of source to output.

        Args:
            mimetype: MIME type of the bundle being built.
            output: Writable binary stream. Everything written here is both
                    bundled and hashed.
            source: Readable binary stream of one source file.

        Raises:
            Exception: Any exception aborts the whole build.
        """
        ...


class LineStripTransform:
    """Strip surrounding whitespace from every line and drop blank lines.

    Not a minifier; it is safe for stylesheets and for scripts that terminate
    statements explicitly.

    Example:
        >>> import io
        >>> out = io.BytesIO()
        >>> LineStripTransform().transform('text/css', out, io.BytesIO(b'  a { }\\n\\n  b { }\\n'))
        >>> out.getvalue()
        b'a { }\\nb { }\\n'
    """

    def transform(self, mimetype: str, output: BinaryIO, source: BinaryIO) -> None:  # noqa: ARG002
        for raw in source:
            line = raw.strip()
            if line:
                output.write(line + b'\n')


class TransformRegistry:
    """Transforms indexed by MIME type, at most one per type.

    Example:
        >>> registry = TransformRegistry()
        >>> registry.register('text/css', LineStripTransform())
        >>> registry.available()
        ['text/css']
        >>> registry.get('text/javascript') is None
        True
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._transforms: dict[str, Transform] = {}

    def register(self, mimetype: str, transform: Transform) -> None:
        """Register the transform for a MIME type.

        Args:
            mimetype: The MIME type the transform handles.
            transform: Object implementing the Transform protocol.

        Raises:
            ValueError: If a transform is already registered for mimetype,
                        or transform does not implement the protocol.
        """
        if not isinstance(transform, Transform):
            msg = f'{transform!r} does not implement Transform'
            raise ValueError(msg)
        if mimetype in self._transforms:
            msg = f"Transform for '{mimetype}' already registered"
            raise ValueError(msg)
        self._transforms[mimetype] = transform

    def register_decorator(self, mimetype: str) -> Callable[[type[Transform]], type[Transform]]:
        """Decorator registering an instance of the decorated class.

        Example:
            >>> registry = TransformRegistry()
            >>> @registry.register_decorator('text/plain')
            ... class Upper:
            ...     def transform(self, mimetype, output, source):
            ...         output.write(source.read().upper())
            >>> 'text/plain' in registry.available()
            True
        """

        def decorator(transform_class: type[Transform]) -> type[Transform]:
            self.register(mimetype, transform_class())
            return transform_class

        return decorator

    def get(self, mimetype: str) -> Transform | None:
        """Return the transform for mimetype, or None for pass-through."""
        return self._transforms.get(mimetype)

    def available(self) -> list[str]:
        """List the MIME types that have a transform."""
        return list(self._transforms.keys())
