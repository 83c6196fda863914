"""Command line entry point: build one bundle and print its artifact name."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from hashbundle.config import load_config, merge_configs
from hashbundle.errors import HashbundleError
from hashbundle.kinds import resolve_kind
from hashbundle.patterns import expand_patterns
from hashbundle.session import BundleSession
from hashbundle.transform import LineStripTransform, TransformRegistry


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the hashbundle command."""
    parser = argparse.ArgumentParser(
        prog='hashbundle',
        description='Concatenate source files into a content-named bundle.',
    )
    parser.add_argument(
        'sources',
        nargs='*',
        help='Source files or glob patterns, relative to the source root, in bundle order',
    )
    parser.add_argument(
        '--config-dir',
        type=Path,
        default=Path(),
        help='Directory holding pyproject.toml with a [tool.hashbundle] section (default: .)',
    )
    parser.add_argument(
        '--dest',
        type=Path,
        default=None,
        help='Destination directory for artifacts (overrides configuration)',
    )
    parser.add_argument(
        '--kind',
        default='script',
        help='Content kind or MIME type, e.g. script, stylesheet, text/css (default: script)',
    )
    parser.add_argument(
        '--always-rebuild',
        action='store_true',
        default=None,
        help='Rebuild even if a matching artifact already exists',
    )
    parser.add_argument(
        '--strip-lines',
        action='store_true',
        help='Strip whitespace from every source line before bundling',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        help='Increase log output (-v info, -vv debug)',
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the hashbundle command.

    Returns:
        Exit code (0 = success, 1 = build failed, 2 = configuration error).
    """
    args = build_parser().parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        config = merge_configs(
            load_config(args.config_dir),
            destination=args.dest,
            always_rebuild=args.always_rebuild,
        )
    except HashbundleError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 2

    transforms = TransformRegistry()
    if args.strip_lines:
        transforms.register(resolve_kind(args.kind).mimetype, LineStripTransform())
    session = BundleSession(config, transforms)

    try:
        artifact_name = session.build_bundle(args.kind, expand_patterns(config.source_root, args.sources))
    except HashbundleError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    print(artifact_name)
    return 0


if __name__ == '__main__':
    sys.exit(main())
