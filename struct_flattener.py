#!/usr/bin/env python3
"""
StructFlattener

This script reads Rust-syntax declarations whose field types contain inline, nested struct/enum/
union/type declarations, and rewrites them into a flat sequence of top-level declarations. Each
nested declaration is replaced by a reference to its (given or synthesized) name.

Usage:
    python struct_flattener.py --input <input_file> [--output <output_file>] [--make-pub] [--marker-crate <name>] [--verbose]

Arguments:
    --input, -i       : Path to the input file, or - to read standard input
    --output, -o      : Path of the output file (default: standard output)
    --make-pub        : Make every outermost declaration public
    --marker-crate    : Namespace of the configuration attributes (default: structflat)
                        e.g. #[structflat::long_names], #[structflat::each[derive(Debug)]]
    --verbose, -v     : Print debug information to stderr
    --help, -h        : Show this help message

Environment variables SF_INPUT_FILE, SF_OUTPUT_FILE, SF_MARKER_CRATE and SF_VERBOSE override the
corresponding arguments.

Example:
    python struct_flattener.py --input nested.rs --output flat.rs
    cat nested.rs | python struct_flattener.py -i - --make-pub
"""

import argparse
import os
import sys
from typing import Optional

from errors import FlattenError
from flattener import FlattenOptions, FlattenResult, flatten_source


class StructFlattenerRunner:
    """
    Reads the input, runs the flattener and writes the result.
    """

    def __init__(self, input_file: str, output_file: Optional[str] = None, options: Optional[FlattenOptions] = None):
        """
        Initialize the runner.

        Args:
            input_file: Path to the input file, or - for standard input
            output_file: Path of the output file (default: standard output)
            options: Flattener options
        """
        self.input_file = input_file
        self.output_file = output_file
        self.options = options or FlattenOptions()
        self.result: Optional[FlattenResult] = None

    def debug_print(self, message: str) -> None:
        if self.options.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def read_input(self) -> str:
        if self.input_file == '-':
            return sys.stdin.read()
        with open(self.input_file, 'r', encoding='utf-8') as f:
            return f.read()

    def run(self) -> bool:
        """
        Flatten the input.

        Returns:
            bool: True if flattening produced no errors, False otherwise
        """
        text = self.read_input()
        self.debug_print(f"Read {len(text)} characters from {self.input_file}")
        try:
            self.result = flatten_source(text, self.options)
        except FlattenError as e:
            print(f"Error: {e}", file=sys.stderr)
            return False
        for diagnostic in self.result.diagnostics:
            print(str(diagnostic), file=sys.stderr)
        return self.result.ok

    def write_output(self) -> None:
        if self.result is None:
            return
        text = self.result.render() + "\n"
        if self.output_file:
            with open(self.output_file, 'w', encoding='utf-8') as f:
                f.write(text)
        else:
            sys.stdout.write(text)


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Flatten nested Rust struct/enum/union declarations into top-level declarations",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--input', '-i', required=True, help='Path to the input file, or - for standard input')
    parser.add_argument('--output', '-o', help='Path of the output file (default: standard output)')
    parser.add_argument('--make-pub', action='store_true', help='Make every outermost declaration public')
    parser.add_argument('--marker-crate', default='structflat', help='Namespace of the configuration attributes')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)

    # Override with environment variables if set
    input_file = os.environ.get('SF_INPUT_FILE', args.input)
    output_file = os.environ.get('SF_OUTPUT_FILE', args.output)
    marker_crate = os.environ.get('SF_MARKER_CRATE', args.marker_crate)
    verbose = os.environ.get('SF_VERBOSE', '').lower() in ('1', 'true', 'yes') or args.verbose

    options = FlattenOptions(marker_crate=marker_crate, make_pub=args.make_pub, verbose=verbose)
    runner = StructFlattenerRunner(input_file, output_file, options)
    success = runner.run()
    runner.write_output()

    if success:
        print("Flattening completed successfully.", file=sys.stderr)
    else:
        print("Flattening completed with errors.", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
