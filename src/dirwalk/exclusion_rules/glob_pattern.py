"""Glob pattern matcher built on the pathspec regular expression pattern type."""

import re
from typing import List, Tuple

from pathspec.pattern import RegexPattern

from dirwalk.exceptions import InvalidPatternError


class GlobPattern(RegexPattern):
    """A single compiled glob matcher for absolute, slash-separated paths.

    Unlike gitignore patterns, a glob is matched against the whole path string exactly
    as given: it is neither anchored to a root directory nor allowed to float to any
    depth unless it says so with ``**``.

    Supported syntax:
    - ``*`` matches any run of characters within one path component
    - ``**`` matches any run of characters, crossing ``/`` separators
    - ``?`` matches exactly one character other than ``/``
    - ``[abc]``, ``[a-z]`` and ``[!abc]`` character classes, which never match ``/``
    - ``{src,lib}`` alternation groups, which cannot be nested
    - ``\\`` escapes the following character

    Example:
        >>> GlobPattern("**/build/**").match_file("/work/project/build/out.o") is not None
        True
        >>> GlobPattern("*.txt").match_file("docs/readme.txt") is None
        True
        >>> GlobPattern("/work/{src,lib}/*.py").match_file("/work/lib/util.py") is not None
        True

    Raises:
        InvalidPatternError: If the glob is syntactically invalid.
    """

    def __init__(self, pattern: str) -> None:
        try:
            super().__init__(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> Tuple[str, bool]:  # type: ignore[override]
        """Translate a glob into an anchored regular expression.

        Args:
            pattern: The glob to translate.

        Returns:
            A tuple of the uncompiled regular expression and ``True``, since every glob
            is an exclusion (there is no negation syntax).

        Raises:
            InvalidPatternError: If the glob is syntactically invalid.

        Example:
            >>> GlobPattern.pattern_to_regex("src/*.py")
            ('(?s)^src/[^/]*\\\\.py$', True)
        """
        regex: List[str] = ["(?s)^"]
        in_group = False
        i = 0
        n = len(pattern)

        while i < n:
            c = pattern[i]
            i += 1
            if c == "\\":
                if i == n:
                    raise InvalidPatternError(pattern, "no character to escape")
                regex.append(re.escape(pattern[i]))
                i += 1
            elif c == "/":
                regex.append("/")
            elif c == "[":
                i = cls._translate_class(pattern, i, regex)
            elif c == "{":
                if in_group:
                    raise InvalidPatternError(pattern, "cannot nest groups")
                regex.append("(?:(?:")
                in_group = True
            elif c == "}" and in_group:
                regex.append("))")
                in_group = False
            elif c == "," and in_group:
                regex.append(")|(?:")
            elif c == "*":
                if i < n and pattern[i] == "*":
                    regex.append(".*")
                    i += 1
                else:
                    regex.append("[^/]*")
            elif c == "?":
                regex.append("[^/]")
            else:
                regex.append(re.escape(c))

        if in_group:
            raise InvalidPatternError(pattern, "missing '}'")

        regex.append("$")
        return "".join(regex), True

    @staticmethod
    def _translate_class(pattern: str, i: int, regex: List[str]) -> int:
        """Translate a character class starting just after its opening bracket.

        Returns the index just past the closing bracket.
        """
        n = len(pattern)
        # A class never matches the separator, whatever its contents
        regex.append("(?!/)[")
        if i < n and pattern[i] == "^":
            regex.append("\\^")
            i += 1
        else:
            if i < n and pattern[i] == "!":
                regex.append("^")
                i += 1
            if i < n and pattern[i] == "-":
                regex.append("\\-")
                i += 1

        range_start = None
        while i < n:
            c = pattern[i]
            i += 1
            if c == "]":
                regex.append("]")
                return i
            if c == "/":
                raise InvalidPatternError(pattern, "explicit path separator in character class")
            if c == "-":
                if range_start is None:
                    raise InvalidPatternError(pattern, "invalid range")
                if i == n:
                    break
                end = pattern[i]
                i += 1
                if end == "]":
                    # trailing '-' is a literal
                    regex.append("\\-]")
                    return i
                if end == "/":
                    raise InvalidPatternError(pattern, "explicit path separator in character class")
                if end < range_start:
                    raise InvalidPatternError(pattern, "invalid range")
                regex.append("-" + re.escape(end))
                range_start = None
            else:
                regex.append(re.escape(c))
                range_start = c

        raise InvalidPatternError(pattern, "missing ']'")
