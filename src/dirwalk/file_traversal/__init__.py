"""Depth-first directory traversal with a caller-supplied visitor.

This module provides the FileTraversal walker, which applies exclusion rules and an
extension allow-list while walking a directory tree and reports every accepted file
and, optionally, directory to a visitor.
"""

from .file_traversal import FileTraversal

__all__ = ["FileTraversal"]
