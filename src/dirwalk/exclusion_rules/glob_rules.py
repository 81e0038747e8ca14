"""Implementation of exclusion rules using glob patterns with subtree semantics."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from dirwalk.exceptions import InvalidPatternError

from .base_rules import BaseExclusionRules
from .glob_pattern import GlobPattern

logger = logging.getLogger(__name__)

RECURSIVE_WILDCARD = "**"
SUBTREE_SUFFIX = "/**"
# Optional syntax prefix accepted on raw patterns, stripped once
GLOB_SYNTAX_PREFIX = "glob:"


class GlobExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using glob patterns matched against absolute paths.

    Every raw pattern is compiled into one to three GlobPattern matchers:

    1. The pattern itself, for callers that wrote a fully qualified glob.
    2. ``**/`` + pattern, unless the pattern already starts with ``**``, so that a
       relative subpath such as ``build/output`` also matches when it occurs at any
       depth (``/abs/root/sub/build/output``).
    3. For a pattern ending in ``/**``, the pattern without that suffix (prefixed with
       ``**/`` unless it already starts with ``**`` or ``/``), so that the directory itself is
       excluded and not only its contents. Without it a traversal would still descend
       into the directory.

    A path is excluded if ANY matcher of ANY pattern matches it.

    Attributes:
        matchers (Dict[str, List[GlobPattern]]): Compiled matchers keyed by raw pattern,
            in registration order.

    Example:
        >>> rules = GlobExclusionRules(["build/**"])
        >>> rules.exclude("/work/project/build")
        True
        >>> rules.exclude("/work/project/sub/build/out.o")
        True
        >>> rules.exclude("/work/project/rebuild/out.o")
        False
        >>> [m.pattern for m in rules.get_matchers("build/**")]
        ['build/**', '**/build/**', '**/build']

    Note:
        The paths provided to exclude() should use forward slashes (/) as path separators,
        even on Windows systems.
    """

    def __init__(self, patterns: Optional[Sequence[str]] = None):
        """Initialize GlobExclusionRules, optionally registering an initial batch of patterns.

        Args:
            patterns: Raw glob patterns to register immediately.

        Raises:
            InvalidPatternError: If any of the patterns is not a valid glob.
        """
        self.matchers: Dict[str, List[GlobPattern]] = {}

        if patterns is not None:
            self.add_rules(patterns)

    @staticmethod
    def compile_rule(rule: str) -> List[GlobPattern]:
        """Compile one raw pattern into its one to three matchers.

        Args:
            rule: The raw glob pattern, optionally carrying a ``glob:`` prefix.

        Returns:
            The compiled matchers, literal pattern first.

        Raises:
            InvalidPatternError: If the pattern, or a matcher derived from it, is not a
                valid glob. The error names the raw pattern.

        Example:
            >>> [m.pattern for m in GlobExclusionRules.compile_rule("*.log")]
            ['*.log', '**/*.log']
            >>> [m.pattern for m in GlobExclusionRules.compile_rule("**/cache/**")]
            ['**/cache/**', '**/cache']
        """
        glob = rule[len(GLOB_SYNTAX_PREFIX) :] if rule.startswith(GLOB_SYNTAX_PREFIX) else rule
        recursive = glob.startswith(RECURSIVE_WILDCARD)

        globs = [glob]
        if not recursive:
            globs.append(f"{RECURSIVE_WILDCARD}/{glob}")
        if glob.endswith(SUBTREE_SUFFIX):
            directory = glob[: -len(SUBTREE_SUFFIX)]
            anchored = recursive or directory.startswith("/")
            globs.append(directory if anchored else f"{RECURSIVE_WILDCARD}/{directory}")

        try:
            return [GlobPattern(g) for g in globs]
        except InvalidPatternError as e:
            raise InvalidPatternError(rule, e.reason) from e

    def exclude(self, path: str) -> bool:
        """Check if a path matches any compiled matcher.

        Args:
            path: The absolute path to check, with '/' separators. It is matched exactly
                as provided; no normalization is performed.

        Returns:
            bool: True if any matcher of any registered pattern matches the path.

        Example:
            >>> rules = GlobExclusionRules(["*.tmp", "/work/{dist,out}/**"])
            >>> rules.exclude("/work/src/scratch.tmp")
            True
            >>> rules.exclude("/work/out")
            True
            >>> rules.exclude("/work/src/main.py")
            False
        """
        return any(
            matcher.match_file(path) is not None for matchers in self.matchers.values() for matcher in matchers
        )

    def add_rule(self, rule: str) -> None:
        """Register a single raw glob pattern.

        Args:
            rule: A raw glob pattern (e.g., "build/**", "*.pyc", "**/.git/**").

        Raises:
            InvalidPatternError: If the pattern is not a valid glob.
        """
        self.add_rules([rule])

    def add_rules(self, rules: Sequence[str]) -> None:
        """Register a batch of raw glob patterns.

        The batch is compiled completely before any pattern is registered: the first
        invalid pattern raises InvalidPatternError and leaves the existing rules
        untouched, so a traversal never runs with part of a rejected batch.

        Args:
            rules: Raw glob patterns, in order.

        Raises:
            InvalidPatternError: For the first pattern in the batch that is not a valid glob.

        Example:
            >>> rules = GlobExclusionRules(["*.log"])
            >>> try:
            ...     rules.add_rules(["dist/**", "src/[abc"])
            ... except InvalidPatternError as e:
            ...     print(e.pattern)
            src/[abc
            >>> rules.patterns
            ['*.log']
        """
        compiled: List[Tuple[str, List[GlobPattern]]] = [(rule, self.compile_rule(rule)) for rule in rules]
        for rule, matchers in compiled:
            self.matchers[rule] = matchers
            logger.debug("Registered exclude pattern %r as %s", rule, [m.pattern for m in matchers])

    def get_matchers(self, rule: str) -> List[GlobPattern]:
        """Get a copy of the matchers compiled for a registered raw pattern.

        Args:
            rule: A raw pattern previously passed to add_rule() or add_rules().

        Returns:
            A new list of the pattern's matchers.

        Raises:
            KeyError: If the pattern was never registered.
        """
        return list(self.matchers[rule])

    @property
    def patterns(self) -> List[str]:
        """The registered raw patterns, in registration order."""
        return list(self.matchers)

    def has_rules(self) -> bool:
        """Check whether any pattern is registered.

        Returns:
            True if at least one pattern is registered.
        """
        return bool(self.matchers)
