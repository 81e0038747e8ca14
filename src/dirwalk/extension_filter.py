"""Case-insensitive file suffix allow-list."""

from typing import Iterator, List, Sequence


class ExtensionFilter:
    """An ordered, case-insensitive allow-list of path suffixes.

    An empty filter accepts every path. A non-empty filter accepts a path that ends
    with at least one registered suffix, ignoring case. Suffixes are compared against
    the end of the whole path string, so they need not be dotted extensions
    (``"_test.py"`` or ``"Makefile"`` work as well).

    Suffixes are kept in registration order and duplicates are kept too: matching()
    reports one entry per registered suffix that matches, which is how a traversal
    decides how many times to visit a file.

    Example:
        >>> filters = ExtensionFilter([".txt", ".TAR.GZ"])
        >>> filters.matching("/data/Notes.TXT")
        ['.txt']
        >>> filters.accepts("/data/backup.tar.gz")
        True
        >>> filters.accepts("/data/photo.png")
        False
        >>> ExtensionFilter().accepts("/data/photo.png")
        True
    """

    def __init__(self, suffixes: Sequence[str] = ()) -> None:
        self._suffixes: List[str] = []
        self.add_all(suffixes)

    def add(self, suffix: str) -> None:
        """Register one suffix; it is stored lower-cased."""
        self._suffixes.append(suffix.lower())

    def add_all(self, suffixes: Sequence[str]) -> None:
        """Register several suffixes, in order."""
        for suffix in suffixes:
            self.add(suffix)

    def matching(self, path: str) -> List[str]:
        """Return every registered suffix the path ends with, one entry per registration.

        Args:
            path: The path string to test.

        Returns:
            The matching suffixes in registration order. Empty when nothing matches, and
            also empty when the filter itself is empty; use accepts() to tell the two apart.
        """
        lowered = path.lower()
        return [suffix for suffix in self._suffixes if lowered.endswith(suffix)]

    def accepts(self, path: str) -> bool:
        """Check whether the filter lets a path through."""
        return not self._suffixes or bool(self.matching(path))

    @property
    def suffixes(self) -> List[str]:
        """A copy of the registered (lower-cased) suffixes."""
        return list(self._suffixes)

    def __len__(self) -> int:
        return len(self._suffixes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._suffixes)

    def __repr__(self) -> str:
        return f"ExtensionFilter({self._suffixes!r})"
