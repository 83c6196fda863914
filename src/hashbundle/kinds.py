"""Content kinds and artifact naming.

A content kind decides the MIME type handed to transforms and the prefix and
extension of the artifact file name. Kinds are looked up in a small fixed
table first; other MIME types are resolved through the ``mimetypes`` registry.
An unknown MIME type keeps its name for transform lookup but is written with
the plain text extension, and anything else is plain text.
"""

from __future__ import annotations

from dataclasses import dataclass
import mimetypes


@dataclass(frozen=True)
class ContentKind:
    """Resolved content kind.

    Attributes:
        mimetype: MIME type passed to the transform for this kind.
        extension: File extension of the artifact, with the leading period.
    """

    mimetype: str
    extension: str

    @property
    def prefix(self) -> str:
        """Return the artifact name prefix (the extension without its period)."""
        return self.extension[1:] + 'build'

    def artifact_name(self, digest: str) -> str:
        """Return the artifact file name for a manifest digest.

        Example:
            >>> SCRIPT.artifact_name('0' * 40)
            'jsbuild-0000000000000000000000000000000000000000.js'
        """
        return f'{self.prefix}-{digest}{self.extension}'


SCRIPT = ContentKind('text/javascript', '.js')
STYLESHEET = ContentKind('text/css', '.css')
TEXT = ContentKind('text/plain', '.txt')
JSON = ContentKind('application/json', '.json')
HTML = ContentKind('text/html', '.html')

KIND_TABLE: dict[str, ContentKind] = {
    'script': SCRIPT,
    'js': SCRIPT,
    'text/javascript': SCRIPT,
    'application/javascript': SCRIPT,
    'stylesheet': STYLESHEET,
    'css': STYLESHEET,
    'text/css': STYLESHEET,
    'text': TEXT,
    'txt': TEXT,
    'text/plain': TEXT,
    'json': JSON,
    'application/json': JSON,
    'html': HTML,
    'text/html': HTML,
}


def resolve_kind(kind: str | None) -> ContentKind:
    """Resolve a declared content kind.

    Args:
        kind: A short name from ``KIND_TABLE`` or a MIME type. Empty or None
              selects plain text.

    Returns:
        The ContentKind to name and transform the bundle with.
    """
    if not kind:
        return TEXT
    normalized = kind.strip().lower()
    if normalized in KIND_TABLE:
        return KIND_TABLE[normalized]
    if '/' not in normalized:
        return TEXT
    extension = mimetypes.guess_extension(normalized, strict=False)
    return ContentKind(normalized, extension or TEXT.extension)
