"""
Index arguments for stack arrays.

A position is either a plain offset from the start or a distance counted
back from the end of the live range. Both forms resolve to a plain offset
before any bounds check is made.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np


@dataclass(frozen=True)
class FromStart:
    """Offset counted from the first element."""
    offset: int

    def resolve(self, length: int) -> int:
        return self.offset


@dataclass(frozen=True)
class FromEnd:
    """Distance counted back from the end: FromEnd(1) is the last element."""
    distance: int

    def resolve(self, length: int) -> int:
        return length - self.distance


Index = Union[int, FromStart, FromEnd]


def resolve_index(index: Index, length: int) -> int:
    """
    Turn an index argument into a plain offset.

    Args:
        index: int, numpy integer, FromStart or FromEnd
        length: Current number of live elements

    Returns:
        Offset from the start of the storage

    Raises:
        TypeError: If index is not one of the accepted forms
    """
    if isinstance(index, (FromStart, FromEnd)):
        return index.resolve(length)
    # bool is an int subclass but never a meaningful position
    if isinstance(index, (int, np.integer)) and not isinstance(index, (bool, np.bool_)):
        return int(index)
    raise TypeError(f"Index must be int, FromStart or FromEnd, got {type(index).__name__}")
