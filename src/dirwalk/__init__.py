"""Recursive directory traversal with extension and exclusion filtering.

This package walks a directory tree depth-first and hands every file (and,
optionally, every directory) to a caller-supplied visitor, skipping anything
matched by glob exclusion patterns and anything outside an extension allow-list.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dirwalk")
except PackageNotFoundError:
    __version__ = "unknown"
