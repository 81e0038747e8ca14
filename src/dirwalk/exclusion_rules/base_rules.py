from abc import ABC, abstractmethod
from typing import Sequence


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for file/directory exclusion rules.

    This class serves as a contract for implementing rule sets that decide which files
    and directories a traversal must skip. A traversal asks the rules about every
    directory before descending into it and about every file before visiting it, so a
    directory that is excluded takes its whole subtree with it. Adding rules is an
    optional capability; rule sets that are fixed at construction use the default
    implementations, which raise NotImplementedError.

    Example:
        >>> from dirwalk.exclusion_rules.glob_rules import GlobExclusionRules
        >>> rules = GlobExclusionRules()
        >>> rules.add_rule("build/**")
        >>> rules.exclude("/work/project/build")
        True
        >>> rules.exclude("/work/project/src/main.py")
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded based on the configured rules.

        Args:
            path (str): The absolute path to check, using '/' as the separator.

        Returns:
            bool: True if the path should be excluded, False if it should be included.

        Example:
            >>> class TmpExclusionRules(BaseExclusionRules):
            ...     def exclude(self, path: str) -> bool:
            ...         return path.endswith('.tmp')
            >>> rules = TmpExclusionRules()
            >>> rules.exclude("/work/build/temp.tmp")
            True
            >>> rules.exclude("/work/main.py")
            False
            >>> rules.has_rules()
            True
        """
        pass

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule.

        Args:
            rule (str): The exclusion rule to add. The format depends on the specific
                implementation (e.g., a glob such as "build/**").

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")

    def add_rules(self, rules: Sequence[str]) -> None:
        """
        Add several exclusion rules.

        The default implementation adds the rules one at a time through add_rule().

        Args:
            rules: The exclusion rules to add, in order.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        for rule in rules:
            self.add_rule(rule)

    def has_rules(self) -> bool:
        """
        Check whether this rule set can exclude anything at all.

        Traversals use this to skip exclusion checks entirely when nothing is configured.
        Subclasses that start out empty should override it; the default assumes rules exist.

        Returns:
            bool: True if any rule is configured.
        """
        return True
