#!/usr/bin/env python3
"""
gen_cpp.py - C++ binding generator entry point

Generates the C++ interface for a C library from its extracted class table.

Usage:
    python scripts/gen_cpp.py CLASSES.json [-o OUTPUT] [--noexceptions] [--no-extensions]
"""

import argparse
import os
import sys

# Get paths
script_dir = os.path.dirname(os.path.abspath(__file__))

# Add scripts directory to path
sys.path.insert(0, script_dir)

from cpp_bindgen import Generator, GenerationError
from bindings import isl


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate C++ bindings')
    parser.add_argument('input',
                        help='Class table (JSON) produced by the extractor')
    parser.add_argument('-o', '--output', default=None,
                        help='Output file (default: stdout)')
    parser.add_argument('--noexceptions', action='store_true',
                        help='Generate bindings that do not throw exceptions')
    parser.add_argument('--no-extensions', dest='extensions', action='store_false',
                        help='Leave out enum classes, operators and to_str')
    parser.add_argument('--namespace', default=None,
                        help='C++ namespace (default: from the class table)')
    parser.add_argument('--prefix', default=None,
                        help='C identifier prefix (default: from the class table)')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    gen = Generator(
        exceptions=not args.noexceptions,
        extensions=args.extensions,
        namespace=args.namespace,
        prefix=args.prefix,
    )

    # Apply isl-specific configuration
    isl.configure(gen)

    try:
        gen.generate_file(args.input, args.output)
    except (GenerationError, OSError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
