"""Command-line argument parsing for dirwalk.

This module defines the command-line interface for dirwalk,
handling argument parsing and validation.
"""

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dirwalk import __version__
from dirwalk.exclusion_rules.base_rules import BaseExclusionRules


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class for handling exclusion patterns.

    This factory function creates an action class that registers each pattern with the
    provided exclusion rules object as arguments are processed, so an invalid pattern is
    reported as soon as it is parsed and patterns keep their command-line order.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to register exclusion patterns as arguments are processed."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            exclusion_rules.add_rule(str(values))

            if getattr(namespace, self.dest, None) is None:
                setattr(namespace, self.dest, [])
            getattr(namespace, self.dest).append(str(values))

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with dirwalk's options.
    """
    description = """
    dirwalk: List the files (and optionally directories) beneath a directory.

    The directory is walked depth-first. Files can be restricted to a set of
    case-insensitive suffixes, and whole subtrees can be cut with glob exclusion
    patterns. Directories are printed after their contents.

    Exclusion Patterns:
    Patterns are globs matched against absolute paths: '*' stays within one path
    component, '**' crosses components, '?', '[a-z]', '[!a-z]' and '{a,b}' work
    as in a shell. A relative pattern also matches at any depth, and a pattern
    ending in '/**' excludes the directory itself as well as everything in it.

    Duplicate Suffixes:
    A file matching two registered suffixes (e.g. -x .gz -x .tar.gz) is printed
    once per matching suffix.
    """

    epilog = """
    Examples:
      # List every file
      dirwalk /path/to/project

      # List Python sources only
      dirwalk -x .py -x .pyi /path/to/project

      # Skip build output and VCS metadata wherever they occur
      dirwalk -i "build/**" -i "**/.git/**" /path/to/project

      # List directories only
      dirwalk -d -F /path/to/project

      # Guard against symbolic link cycles and write the listing to a file
      dirwalk -L -o files.txt /path/to/project

      # Show which directories were skipped and why
      dirwalk -v /path/to/project

      # Display version information and exit
      dirwalk -V
    """

    parser = argparse.ArgumentParser(
        prog="dirwalk",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dirwalk {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "directory",
        type=Path,
        help="The directory to walk. Printed paths are relative to it if it is relative.",
    )
    parser.add_argument(
        "-x",
        "--extension",
        dest="extensions",
        metavar="SUFFIX",
        action="append",
        default=[],
        help="Only list files whose path ends with SUFFIX, ignoring case (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Glob pattern excluding matching files and directories; an excluded directory is not "
            "descended into. Can be specified multiple times."
        ),
    )
    parser.add_argument(
        "-d",
        "--directories",
        action="store_true",
        help="Also list directories, each after its contents.",
    )
    parser.add_argument(
        "-F",
        "--no-files",
        action="store_true",
        help="Do not list files.",
    )
    parser.add_argument(
        "-L",
        "--detect-symlink-loops",
        action="store_true",
        help="Do not descend into a directory that is already being walked (symbolic link cycles).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped directories and registered patterns to stderr.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.no_files and not args.directories:
        raise ValueError("-F/--no-files without -d/--directories would list nothing")
