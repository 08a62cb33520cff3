#!/usr/bin/env python3
"""
cli.py - Command-line interface for Telex/VNI diacritic restoration
Giao diện dòng lệnh

================================================================================
USAGE
================================================================================

    # Restore diacritics in a string
    vi-transform transform "tieengs vieetj"              → tiếng việt

    # VNI, old accent style, text from stdin
    echo "hoa2 bi2nh" | vi-transform transform -m vni -s old

    # Show what the IME preedit would display after every key
    vi-transform trace "vieetj"

================================================================================
"""

import argparse
import logging
import os
import sys

# Add src directory to path if needed
src_dir = os.path.dirname(os.path.abspath(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from accent import AccentStyle
from grammar import InputMethod
from session import IncrementalSession
import transformer

logger = logging.getLogger(__name__)


def setup_logging(verbose=False):
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s %(message)s',
        datefmt='%H:%M:%S'
    )


def cmd_transform(args):
    """Print the transformed text (argument, or stdin when omitted)."""
    text = args.text if args.text is not None else sys.stdin.read()
    try:
        result = transformer.transform(text, args.method, args.style)
    except transformer.TransformError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    sys.stdout.write(result)
    if args.text is not None:
        sys.stdout.write('\n')
    return 0


def cmd_trace(args):
    """Print the session view after each key of the text."""
    with IncrementalSession(args.method, args.style) as session:
        for key in args.text:
            session.push(key)
            print(f"{key!r:>6}  {session.view()}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='vi-transform',
        description='Restore Vietnamese diacritics from Telex/VNI keystrokes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vi-transform transform "tieengs vieetj"
  vi-transform transform -m vni "tie61ng vie65t"
  vi-transform trace "chuwowngf"
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_common_options(subparser):
        subparser.add_argument('-m', '--method', default=InputMethod.TELEX.value,
                               choices=[m.value for m in InputMethod],
                               help='Input method (default: telex)')
        subparser.add_argument('-s', '--style', default=AccentStyle.NEW.value,
                               choices=[s.value for s in AccentStyle],
                               help='Accent style (default: new)')

    transform_parser = subparsers.add_parser('transform', help='Transform text')
    transform_parser.add_argument('text', nargs='?', help='Text to transform (default: read stdin)')
    add_common_options(transform_parser)

    trace_parser = subparsers.add_parser('trace', help='Show the view after each keystroke')
    trace_parser.add_argument('text', help='Keys to type')
    add_common_options(trace_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    if args.command == 'transform':
        return cmd_transform(args)
    elif args.command == 'trace':
        return cmd_trace(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
