"""Command-line interface for dirwalk.

This module provides the command-line interface for dirwalk, which prints every path
a FileTraversal visits, one per line.

Exit Codes:
    0: Successful completion
    1: Runtime or configuration error (e.g. an invalid exclusion pattern)
    2: Command-line syntax error
    141: Broken pipe (output closed early, e.g. when piping to `head`)

Example:
    # List Python files, skipping build output
    $ dirwalk -x .py -i "build/**" /path/to/dir

    # Display version information
    $ dirwalk --version
"""

import logging
import os
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Optional, Sequence, TextIO

from dirwalk.cli.argparser import create_parser, validate_args
from dirwalk.exclusion_rules.glob_rules import GlobExclusionRules
from dirwalk.file_traversal import FileTraversal


class PathPrinter:
    """Visitor that writes each visited path to a text stream, one per line."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def visit(self, path: Path) -> None:
        self.stream.write(f"{path}\n")


def configure_logging(verbose: bool) -> None:
    """Send library log records to stderr, at DEBUG when verbose and WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the dirwalk command-line interface.

    Args:
        argv: Arguments to parse instead of sys.argv[1:].

    Exit codes:
        0: Successful completion
        1: Runtime or configuration error
        2: Command-line syntax error
        141: Broken pipe
    """
    try:
        # Populated by the -i/--ignore action while arguments are parsed
        exclusion_rules = GlobExclusionRules()

        parser = create_parser(exclusion_rules)
        args = parser.parse_args(argv)

        validate_args(args)
        configure_logging(args.verbose)

        with open(args.output, "w", encoding="utf-8") if args.output else nullcontext(sys.stdout) as stream:
            printer = PathPrinter(stream)
            traversal = FileTraversal(
                printer.visit,
                visit_directories=args.directories,
                visit_files=not args.no_files,
                exclusion_rules=exclusion_rules,
                detect_symlink_loops=args.detect_symlink_loops,
            )
            traversal.add_extension_filters(args.extensions)
            try:
                traversal.traverse(args.directory)
                stream.flush()
            except BrokenPipeError:
                # Stop writing to the closed pipe during interpreter shutdown
                devnull = os.open(os.devnull, os.O_WRONLY)
                os.dup2(devnull, sys.stdout.fileno())
                sys.exit(141)

    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
