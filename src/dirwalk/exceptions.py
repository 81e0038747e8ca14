class ConfigurationError(ValueError):
    """
    Base class for errors raised while configuring a traversal.

    Configuration errors are always raised synchronously by the call that registers the
    offending setting, never later during traversal.

    Example:
        >>> error = ConfigurationError("bad setting")
        >>> isinstance(error, ValueError)
        True
    """

    pass


class InvalidPatternError(ConfigurationError):
    """
    Exception raised when an exclusion pattern is not a valid glob.

    The error always names the raw pattern as the caller supplied it, even when the
    failure was detected while compiling one of the matchers derived from it.

    Attributes:
        pattern (str): The raw exclusion pattern that failed to compile.
        reason (str): Short description of the syntax problem.

    Example:
        >>> error = InvalidPatternError("src/[abc", "missing ']'")
        >>> str(error)
        "Invalid exclude pattern 'src/[abc': missing ']'"
        >>> error.pattern
        'src/[abc'
    """

    def __init__(self, pattern: str, reason: str) -> None:
        """
        Initialize the exception with the offending pattern and the reason it was rejected.

        Args:
            pattern (str): The raw exclusion pattern.
            reason (str): Short description of the syntax problem.
        """
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid exclude pattern {pattern!r}: {reason}")
