"""Main CLI entry point for makinilya."""

import argparse
import logging
import sys
from typing import Optional

from makinilya import __version__
from .commands import build_manuscript, check_manuscript, new_project


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    """Logging flags shared by every sub-command."""
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='info',
        help='Set log level'
    )


def configure_logging(args: argparse.Namespace) -> None:
    """Configure root logging from the parsed flags."""
    level_name = 'warning' if args.log_level == 'warn' else args.log_level
    log_level = getattr(logging, level_name.upper())
    if args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger('makinilya').setLevel(log_level)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the makinilya CLI."""
    parser = argparse.ArgumentParser(
        prog='makinilya',
        description='An austere manuscript generator'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Build command
    build_parser = subparsers.add_parser('build', help='Build the manuscript')
    build_parser.add_argument(
        'path',
        nargs='?',
        default='.',
        help='Project directory containing Config.yaml (default: current directory)'
    )
    build_parser.add_argument(
        '--output',
        type=str,
        metavar='FILE',
        help='Override the configured output path'
    )
    build_parser.add_argument(
        '--best-effort',
        action='store_true',
        help='Write the manuscript even if some placeholders failed'
    )
    build_parser.add_argument(
        '--jobs',
        type=int,
        default=1,
        metavar='N',
        help='Number of worker threads for scene assembly'
    )
    add_logging_arguments(build_parser)

    # Check command
    check_parser = subparsers.add_parser('check', help='Validate scenes without writing output')
    check_parser.add_argument(
        'path',
        nargs='?',
        default='.',
        help='Project directory containing Config.yaml (default: current directory)'
    )
    check_parser.add_argument(
        '--jobs',
        type=int,
        default=1,
        metavar='N',
        help='Number of worker threads for scene assembly'
    )
    add_logging_arguments(check_parser)

    # New command
    new_parser = subparsers.add_parser('new', help='Create a new project skeleton')
    new_parser.add_argument(
        'path',
        type=str,
        help='Directory to create the project in'
    )
    add_logging_arguments(new_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    configure_logging(parsed_args)

    if parsed_args.command == 'build':
        return build_manuscript(parsed_args)
    elif parsed_args.command == 'check':
        return check_manuscript(parsed_args)
    elif parsed_args.command == 'new':
        return new_project(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
