"""
Fixed-capacity stack arrays for tensor shape and stride metadata.
"""

from .array import (
    MAX_RANK,
    DynamicStackArray,
    ElementRef,
    Metadata,
    concat,
    init_metadata,
    to_metadata,
    zip_arrays,
)
from .errors import BoundsError, CapacityExceeded, StackArrayError
from .index import FromEnd, FromStart, Index, resolve_index

__all__ = [
    "MAX_RANK",
    "DynamicStackArray",
    "ElementRef",
    "Metadata",
    "concat",
    "init_metadata",
    "to_metadata",
    "zip_arrays",
    "BoundsError",
    "CapacityExceeded",
    "StackArrayError",
    "FromEnd",
    "FromStart",
    "Index",
    "resolve_index",
]
