"""Main CLI entry point for neuroconn."""

import argparse
import logging
import sys
from pathlib import Path

from .connectivity import connectivity_command


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="neuroconn - spectral estimation and connectivity networks for MEG/EEG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sensor level correlation network
  neuroconn connectivity --config settings.yaml

  # Save the network to a file
  neuroconn connectivity --config settings.yaml --output-dir results/
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    conn_parser = subparsers.add_parser(
        'connectivity',
        help='Compute a connectivity network',
        description='Compute a sensor or source level connectivity network from a settings file'
    )
    conn_parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Connectivity settings YAML file'
    )
    conn_parser.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help='Directory for the network .npz file'
    )
    conn_parser.add_argument(
        '--method',
        type=str,
        default=None,
        help='Override the connectivity method from the settings file'
    )
    conn_parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'connectivity':
        from ..utils.logging import setup_logging
        setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
        return connectivity_command(args)

    return 1


if __name__ == '__main__':
    sys.exit(main())
