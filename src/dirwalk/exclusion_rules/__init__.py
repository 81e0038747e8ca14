"""Exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .glob_pattern import GlobPattern
from .glob_rules import GlobExclusionRules

__all__ = [
    "BaseExclusionRules",
    "GlobExclusionRules",
    "GlobPattern",
]
