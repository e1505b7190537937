"""Exceptions raised while configuring and solving a keyboard layout."""


class KeyboardError(Exception):
    """Base class for all keyboard layout errors."""


class ConfigurationError(KeyboardError, ValueError):
    """Invalid keyboard configuration, reported before any solving."""


class SolverInvariantError(KeyboardError, RuntimeError):
    """
    Internal solver invariant violated.

    Indicates a logic defect rather than bad input: every configuration
    that passes validation is expected to be solvable.
    """
