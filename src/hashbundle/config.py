"""Configuration loading for hashbundle.

This module reads configuration from the pyproject.toml [tool.hashbundle]
section and provides sensible defaults when configuration is absent.
Relative paths in the file are resolved against the directory holding it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib
from typing import Any

from hashbundle.errors import ConfigError


@dataclass(frozen=True)
class BundleConfig:
    """Configuration for a BundleSession.

    Attributes:
        destination: Directory artifacts are published into.
        source_root: Directory source patterns are resolved against.
        url_base: Prefix joined to artifact names in generated markup.
        always_rebuild: Rebuild on every request, ignoring existing artifacts.
        temp_dir: Directory for build temporary files. None uses the system
                  temporary directory.
        cache_max_entries: Bound on remembered requests. None is unbounded.
        coalesce: Let concurrent identical requests share one build.

    Example:
        >>> config = BundleConfig(destination='static/dist', url_base='/static/dist')
        >>> config.destination
        PosixPath('static/dist')
    """

    destination: Path = Path('dist')
    source_root: Path = Path()
    url_base: str = ''
    always_rebuild: bool = False
    temp_dir: Path | None = None
    cache_max_entries: int | None = None
    coalesce: bool = False

    def __post_init__(self) -> None:
        """Normalize paths and validate values.

        Raises:
            ConfigError: If any configuration value is invalid.
        """
        object.__setattr__(self, 'destination', Path(self.destination))
        object.__setattr__(self, 'source_root', Path(self.source_root))
        if self.temp_dir is not None:
            object.__setattr__(self, 'temp_dir', Path(self.temp_dir))

        for flag in ('always_rebuild', 'coalesce'):
            if not isinstance(getattr(self, flag), bool):
                msg = f'{flag} must be a boolean, got {getattr(self, flag)!r}'
                raise ConfigError(msg)

        if self.cache_max_entries is not None and (
            isinstance(self.cache_max_entries, bool)
            or not isinstance(self.cache_max_entries, int)
            or self.cache_max_entries <= 0
        ):
            msg = f'cache_max_entries must be a positive integer, got {self.cache_max_entries!r}'
            raise ConfigError(msg)

        if not isinstance(self.url_base, str):
            msg = f'url_base must be a string, got {self.url_base!r}'
            raise ConfigError(msg)


_PATH_FIELDS = ('destination', 'source_root', 'temp_dir')


def _resolve(rootdir: Path, value: Any) -> Path:
    path = Path(value)
    return path if path.is_absolute() else rootdir / path


def load_config(rootdir: Path) -> BundleConfig:
    """Load configuration from pyproject.toml.

    Reads the [tool.hashbundle] section from pyproject.toml in the given
    directory. Returns default configuration, anchored at rootdir, if the file
    or section does not exist.

    Args:
        rootdir: Directory containing pyproject.toml.

    Returns:
        BundleConfig with values from pyproject.toml or defaults.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values.
    """
    rootdir = Path(rootdir)
    pyproject_path = rootdir / 'pyproject.toml'

    tool_config: dict[str, Any] = {}
    if pyproject_path.exists():
        with pyproject_path.open('rb') as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                msg = f'Invalid TOML in {pyproject_path}: {exc}'
                raise ConfigError(msg) from exc
        tool_config = data.get('tool', {}).get('hashbundle', {})

    known = {f.name for f in fields(BundleConfig)}
    values = {key: value for key, value in tool_config.items() if key in known}
    values.setdefault('destination', 'dist')
    values.setdefault('source_root', '.')
    for name in _PATH_FIELDS:
        if values.get(name) is not None:
            values[name] = _resolve(rootdir, values[name])

    return BundleConfig(**values)


def merge_configs(file_config: BundleConfig, **overrides: Any) -> BundleConfig:
    """Merge explicit values (usually from the CLI) over file configuration.

    Overrides that are None are treated as not provided.

    Args:
        file_config: Configuration loaded from pyproject.toml.
        **overrides: BundleConfig field values that take precedence.

    Returns:
        BundleConfig with overrides applied where provided.

    Raises:
        ConfigError: If an override names an unknown field.
    """
    known = {f.name for f in fields(BundleConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        msg = f'Unknown configuration option(s): {", ".join(unknown)}'
        raise ConfigError(msg)
    provided = {key: value for key, value in overrides.items() if value is not None}
    return replace(file_config, **provided)
