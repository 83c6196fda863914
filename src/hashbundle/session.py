"""Bundle sessions: the request interface used by page rendering.

A BundleSession owns the configuration, the transforms and the reuse cache
shared by every request issued through it. Rendering code asks for a bundle on
every page render; the session answers from the reuse cache and the
destination directory whenever the sources are unchanged.
"""

from __future__ import annotations

from concurrent.futures import Future
import html
import logging
import os
import threading
from typing import TYPE_CHECKING

from hashbundle.builder import build_file
from hashbundle.config import BundleConfig
from hashbundle.kinds import resolve_kind
from hashbundle.patterns import expand_patterns, parse_name_list
from hashbundle.reuse import ReuseCache, make_request_key
from hashbundle.transform import TransformRegistry


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


logger = logging.getLogger(__name__)


class BundleSession:
    """Builds bundles for one configuration and remembers what it built.

    Safe to share between threads. Only reuse cache accesses are serialized;
    builds for different requests run concurrently. With ``coalesce`` enabled
    concurrent identical requests wait for one build instead of each building.

    Example:
        >>> session = BundleSession(BundleConfig(destination='dist', url_base='/assets'))
        >>> session.url_for('jsbuild-abc.js')
        '/assets/jsbuild-abc.js'
    """

    def __init__(
        self,
        config: BundleConfig | None = None,
        transforms: TransformRegistry | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Session configuration. Defaults to BundleConfig().
            transforms: Transforms by MIME type. Defaults to none, meaning
                        every source is copied verbatim.
        """
        self.config = config if config is not None else BundleConfig()
        self.transforms = transforms if transforms is not None else TransformRegistry()
        self._cache = ReuseCache(self.config.cache_max_entries)
        self._inflight: dict[str, Future[str]] = {}
        self._inflight_lock = threading.Lock()

    @property
    def cache(self) -> ReuseCache:
        """Return the reuse cache shared by this session's requests."""
        return self._cache

    def artifact_path(self, artifact_name: str) -> Path:
        """Return the path of a published artifact."""
        return self.config.destination / artifact_name

    def url_for(self, artifact_name: str) -> str:
        """Return the URL of an artifact under the configured url_base."""
        if not self.config.url_base:
            return artifact_name
        return f'{self.config.url_base.rstrip("/")}/{artifact_name}'

    def build_bundle(self, kind: str, sources: Sequence[str | os.PathLike[str]]) -> str:
        """Return the current artifact name for sources, building if needed.

        Args:
            kind: Content kind or MIME type of the bundle.
            sources: Source paths in bundle order, duplicates allowed.

        Returns:
            The artifact file name inside the destination directory.

        Raises:
            BuildError: If any source could not be read.
            TransformError: If a transform failed.
            PublishError: If the artifact could not be published.
        """
        paths = [os.fspath(source) for source in sources]
        mimetype = resolve_kind(kind).mimetype
        request_key = f'{mimetype}:{make_request_key(paths)}'
        if self.config.coalesce:
            return self._build_coalesced(request_key, kind, mimetype, paths)
        return self._build(request_key, kind, mimetype, paths)

    def _build(self, request_key: str, kind: str, mimetype: str, paths: list[str]) -> str:
        prior_name, found = self._cache.lookup(request_key)
        logger.debug('Reuse cache %s for %s', 'hit' if found else 'miss', request_key)

        artifact_name = build_file(
            self.config.destination,
            self.transforms.get(mimetype),
            kind,
            prior_name,
            paths,
            always_rebuild=self.config.always_rebuild,
            temp_dir=self.config.temp_dir,
        )
        if artifact_name != prior_name:
            self._cache.record(request_key, artifact_name)
        return artifact_name

    def _claim(self, request_key: str) -> tuple[Future[str], bool]:
        """Return the in-flight future for request_key and whether the caller owns it."""
        with self._inflight_lock:
            existing = self._inflight.get(request_key)
            if existing is not None:
                return existing, False
            future: Future[str] = Future()
            self._inflight[request_key] = future
            return future, True

    def _build_coalesced(self, request_key: str, kind: str, mimetype: str, paths: list[str]) -> str:
        future, owner = self._claim(request_key)
        if not owner:
            logger.debug('Waiting for in-flight build of %s', request_key)
            return future.result()

        try:
            artifact_name = self._build(request_key, kind, mimetype, paths)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(artifact_name)
            return artifact_name
        finally:
            with self._inflight_lock:
                self._inflight.pop(request_key, None)

    def build_js(self, *patterns: str) -> str:
        """Build a script bundle from patterns under source_root."""
        return self.build_bundle('script', expand_patterns(self.config.source_root, patterns))

    def build_css(self, *patterns: str) -> str:
        """Build a stylesheet bundle from patterns under source_root."""
        return self.build_bundle('stylesheet', expand_patterns(self.config.source_root, patterns))

    def script_tag(self, names: str) -> str:
        """Build a script bundle from a comma-separated list and return its tag.

        Example:
            >>> session.script_tag('js/app.js, js/util.js')  # doctest: +SKIP
            '<script type="text/javascript" src="/assets/jsbuild-....js"></script>'
        """
        artifact_name = self.build_js(*parse_name_list(names))
        src = html.escape(self.url_for(artifact_name))
        return f'<script type="text/javascript" src="{src}"></script>'

    def stylesheet_tag(self, names: str) -> str:
        """Build a stylesheet bundle from a comma-separated list and return its link tag."""
        artifact_name = self.build_css(*parse_name_list(names))
        href = html.escape(self.url_for(artifact_name))
        return f'<link rel="stylesheet" type="text/css" href="{href}" />'

    def stats(self) -> dict[str, int]:
        """Return reuse cache statistics for this session."""
        return self._cache.get_stats()
