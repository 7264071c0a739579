#!/usr/bin/env python3
"""
Command-line interface for pyjclass - Java class file reader.
"""

import argparse
import sys

from .classreader import read_class_file
from .errors import ClassFileError


def main(argv=None):
    """Main entry point for pyjclass CLI."""
    parser = argparse.ArgumentParser(
        prog="pyjclass",
        description="Read a Java .class file, validate its constant pool and print it as JSON",
    )
    parser.add_argument(
        "file",
        help="Java class file to read",
    )

    args = parser.parse_args(argv)

    try:
        class_file = read_class_file(args.file)
    except ClassFileError as e:
        print(f"Error reading {args.file}: {e}", file=sys.stderr)
        sys.exit(1)

    print(class_file.to_json())


if __name__ == "__main__":
    main()
