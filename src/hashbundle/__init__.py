"""hashbundle: content-addressed asset bundles.

Concatenate an ordered list of source files into one artifact whose name is
derived from the content it was built from. Unchanged sources never trigger a
rebuild, and a half-written artifact is never visible.

Example:
    Build a script bundle into ``dist/``::

        >>> from hashbundle import BundleConfig, BundleSession
        >>> session = BundleSession(BundleConfig(destination='dist'))
        >>> session.build_bundle('script', ['js/app.js', 'js/util.js'])  # doctest: +SKIP
        'jsbuild-3f0c...e1.js'

    Or from the shell::

        $ hashbundle --dest dist --kind script js/app.js js/util.js
"""

from __future__ import annotations

from hashbundle.builder import build_file
from hashbundle.config import BundleConfig, load_config
from hashbundle.errors import BuildError, HashbundleError, PublishError, TransformError
from hashbundle.session import BundleSession


__version__ = '0.3.0'
__all__ = [
    'BuildError',
    'BundleConfig',
    'BundleSession',
    'HashbundleError',
    'PublishError',
    'TransformError',
    '__version__',
    'build_file',
    'load_config',
]
