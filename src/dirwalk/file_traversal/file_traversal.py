"""Depth-first directory traversal with exclusion and extension filtering.

This module provides the FileTraversal class, which walks a directory tree and reports
accepted files and directories to a caller-supplied visitor.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.exclusion_rules.glob_rules import GlobExclusionRules
from dirwalk.extension_filter import ExtensionFilter
from dirwalk.file_traversal.file_identifier import FileIdentifier
from dirwalk.types import PathType, Visitor

logger = logging.getLogger(__name__)

# An open directory: its path, its remaining children and its loop-tracking identity
_Frame = Tuple[Path, Iterator[Path], Optional[FileIdentifier]]


class FileTraversal:
    """Recursively visit files (and optionally directories) beneath a root path.

    The traversal is a plain depth-first walk. For each child of a directory, in the order
    the operating system lists them:

    - An excluded directory is skipped entirely: it is neither descended into nor visited.
    - Any other directory is descended into first; afterwards, if ``visit_directories`` is
      set, the directory itself is visited (post-order). Directories are never subject to
      the extension filter.
    - A file is considered only if ``visit_files`` is set. An excluded file is skipped.
      With no extension filter the file is visited once; otherwise it is visited once for
      EACH registered suffix it ends with, so a file matching two suffixes is visited twice.

    Exclusion rules and extension filters are configured before the first traversal and
    kept across repeated traverse() calls. Each instance owns its own configuration.

    Error Handling:
        Directories that cannot be listed (missing, not a directory, permission denied,
        removed mid-walk) are treated as empty and the walk continues elsewhere; traverse()
        never raises for such problems. Exceptions raised by the visitor are not caught:
        they abort the traversal and propagate to the caller, and visits already made stand.

    Symbolic Link Behavior:
        Symbolic links to directories are followed. Without ``detect_symlink_loops`` a link
        cycle is walked until the operating system refuses the path; with it, a directory
        already on the current descent path is skipped.

    Attributes:
        visitor (Visitor): Callable invoked with each visited path.
        visit_directories (bool): Whether directories are reported to the visitor.
        visit_files (bool): Whether files are reported to the visitor.
        exclusion_rules (BaseExclusionRules): Rules deciding which paths are skipped.
        extension_filter (ExtensionFilter): Suffix allow-list applied to files.
        detect_symlink_loops (bool): Whether to skip directories already being walked.

    Example:
        >>> visited = []
        >>> traversal = FileTraversal(visited.append)  # doctest: +SKIP
        >>> traversal.add_extension_filter(".txt").add_exclude_patterns(["build/**"])  # doctest: +SKIP
        >>> traversal.traverse("/r")  # doctest: +SKIP
        >>> sorted(str(p) for p in visited)  # doctest: +SKIP
        ['/r/a.txt', '/r/sub/c.txt']
    """

    def __init__(
        self,
        visitor: Visitor,
        visit_directories: bool = False,
        visit_files: bool = True,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        detect_symlink_loops: bool = False,
    ) -> None:
        """Initialize a FileTraversal.

        Args:
            visitor: Callable invoked with the Path of each visited file or directory.
                Objects exposing a ``visit`` method can be passed as ``obj.visit``.
            visit_directories: Whether to visit directories (after their contents).
                Defaults to False.
            visit_files: Whether to visit files. Defaults to True.
            exclusion_rules: Rules for excluding files and directories. Defaults to a new,
                empty GlobExclusionRules owned by this traversal.
            detect_symlink_loops: Whether to skip directories already on the current
                descent path. Defaults to False.
        """
        self.visitor = visitor
        self.visit_directories = visit_directories
        self.visit_files = visit_files
        self.exclusion_rules = exclusion_rules if exclusion_rules is not None else GlobExclusionRules()
        self.extension_filter = ExtensionFilter()
        self.detect_symlink_loops = detect_symlink_loops

    def add_extension_filter(self, suffix: str) -> "FileTraversal":
        """Register a case-insensitive file suffix such as ".py".

        Args:
            suffix: Suffix the absolute file path must end with.

        Returns:
            This traversal, for chaining.
        """
        self.extension_filter.add(suffix)
        return self

    def add_extension_filters(self, suffixes: Sequence[str]) -> "FileTraversal":
        """Register several case-insensitive file suffixes.

        Args:
            suffixes: Suffixes to register, in order.

        Returns:
            This traversal, for chaining.
        """
        self.extension_filter.add_all(suffixes)
        return self

    def add_exclude_patterns(self, patterns: Sequence[str]) -> "FileTraversal":
        """Register exclusion patterns with the traversal's exclusion rules.

        With the default GlobExclusionRules each pattern excludes matching paths, and a
        ``name/**`` pattern also excludes every directory called ``name`` at any depth
        together with its subtree. The batch is all-or-nothing: if any pattern is invalid,
        none of them is registered.

        Args:
            patterns: Raw glob patterns.

        Returns:
            This traversal, for chaining.

        Raises:
            InvalidPatternError: If any pattern is not a valid glob.
            NotImplementedError: If custom exclusion rules don't support adding rules.
        """
        self.exclusion_rules.add_rules(patterns)
        return self

    def traverse(self, root: PathType) -> None:
        """Walk the tree beneath root, invoking the visitor for each accepted path.

        The root itself is never visited. A root that does not exist, is not a directory or
        cannot be listed produces no visits and no error. The walk keeps its own stack of
        open directories, so tree depth is limited only by the file system.

        Args:
            root: Directory to walk. Visited paths are built by joining names onto root as
                given, so a relative root yields relative paths.

        Raises:
            Exception: Whatever the visitor raises, unchanged.
        """
        root_path = Path(root)
        active: Optional[Set[FileIdentifier]] = None
        root_id: Optional[FileIdentifier] = None
        if self.detect_symlink_loops:
            active = set()
            root_id = FileIdentifier.of(root_path)
            if root_id is not None:
                active.add(root_id)

        stack: List[_Frame] = [(root_path, iter(self._list_children(root_path)), root_id)]
        while stack:
            directory, children, file_id = stack[-1]
            child = next(children, None)

            if child is None:
                # Directory exhausted: leave it, then visit it after its contents
                stack.pop()
                if active is not None and file_id is not None:
                    active.discard(file_id)
                if stack:
                    self._visit_directory(directory)
                continue

            if os.path.isdir(child):
                if self._is_excluded(child):
                    continue
                frame = self._enter(child, active)
                if frame is None:
                    self._visit_directory(child)
                else:
                    stack.append(frame)
            elif self.visit_files:
                self._visit_file(child)

    def _enter(self, directory: Path, active: Optional[Set[FileIdentifier]]) -> Optional[_Frame]:
        """Open a child directory for walking, or return None if it is already being walked."""
        file_id: Optional[FileIdentifier] = None
        if active is not None:
            file_id = FileIdentifier.of(directory)
            if file_id is not None:
                if file_id in active:
                    logger.debug("Skipping %s: directory is already being traversed (symlink loop)", directory)
                    return None
                active.add(file_id)
        return directory, iter(self._list_children(directory)), file_id

    def _visit_directory(self, path: Path) -> None:
        if self.visit_directories and not self._is_excluded(path):
            self.visitor(path)

    def _visit_file(self, path: Path) -> None:
        """Visit a file once, or once per matching suffix when extension filters are set."""
        if self._is_excluded(path):
            return

        if not self.extension_filter:
            self.visitor(path)
            return

        # One visit per matching registration, duplicates included
        for _ in self.extension_filter.matching(self._absolute(path)):
            self.visitor(path)

    def _is_excluded(self, path: Path) -> bool:
        if not self.exclusion_rules.has_rules():
            return False
        return self.exclusion_rules.exclude(self._absolute(path))

    @staticmethod
    def _absolute(path: Path) -> str:
        """Absolute, non-normalized form of a path with '/' separators."""
        return path.absolute().as_posix()

    @staticmethod
    def _list_children(directory: Path) -> List[Path]:
        """List a directory, treating any listing failure as an empty directory."""
        try:
            names = os.listdir(directory)
        except OSError as e:
            logger.debug("Skipping %s: %s", directory, e)
            return []
        return [directory / name for name in names]
