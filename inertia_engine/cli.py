"""CLI for inertia-engine."""

import argparse
import logging
import sys

from inertia_engine.domain.constants import PROTOCOL_HEADERS
from inertia_engine.version import manifest_version


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='inertia-engine', description='Inertia page protocol tools')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    # version command
    version_parser = subparsers.add_parser('version', help='Print the asset version of a build manifest')
    version_parser.add_argument('manifest', help='Path to the build manifest')

    # headers command
    subparsers.add_parser('headers', help='List protocol headers')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    if args.command == 'version':
        try:
            print(manifest_version(args.manifest))
        except OSError as e:
            print(f"Error: cannot read {args.manifest}: {e.strerror or e}", file=sys.stderr)
            return 1

    elif args.command == 'headers':
        width = max(len(name) for name in PROTOCOL_HEADERS)
        for name, description in PROTOCOL_HEADERS.items():
            print(f"  {name:<{width}}  {description}")

    else:
        parser.print_help()

    return 0


if __name__ == '__main__':
    sys.exit(main())
