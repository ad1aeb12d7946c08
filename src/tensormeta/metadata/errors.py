"""Exceptions raised by fixed-capacity stack arrays."""


class StackArrayError(Exception):
    """Base class for stack array contract violations."""


class BoundsError(StackArrayError, IndexError):
    """Raised when a resolved index falls outside the live range."""


class CapacityExceeded(StackArrayError, ValueError):
    """Raised when an operation would grow an array past its capacity."""
