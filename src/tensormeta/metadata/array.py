"""
Fixed-capacity arrays for tensor shape and stride metadata.

A DynamicStackArray owns one numpy buffer of exactly ``capacity`` slots,
allocated once at construction and never grown. Only the first ``len(a)``
slots are live; the rest carry no meaning. Code that reshapes or slices
tensors in tight loops can rewrite these buffers in place instead of
building fresh lists for every step.

Bounds and capacity checks are controlled per instance by ``checked``
(default from ``settings.bounds_checks``). Unchecked instances trust the
caller: an out-of-range index reads or writes a stale slot, or fails inside
numpy with a plain IndexError.
"""

import math
from typing import Any, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..config import settings
from ..logging import get_logger
from .errors import BoundsError, CapacityExceeded
from .index import Index, resolve_index

logger = get_logger(__name__)

MAX_RANK = settings.max_rank


def _convert(dtype: np.dtype, value: Any) -> Any:
    """
    Cast ``value`` to ``dtype``.

    Raises:
        ValueError: If an integer dtype would truncate or alter the value
    """
    converted = dtype.type(value)
    if dtype.kind in "iu" and converted != value:
        raise ValueError(f"{value!r} is not an integral value for dtype {dtype}")
    return converted


class ElementRef:
    """Mutable reference to one storage slot of a stack array."""

    __slots__ = ("_data", "_offset")

    def __init__(self, data: np.ndarray, offset: int):
        self._data = data
        self._offset = offset

    @property
    def index(self) -> int:
        return self._offset

    @property
    def value(self) -> Any:
        return self._data[self._offset].item()

    @value.setter
    def value(self, new_value: Any) -> None:
        self._data[self._offset] = _convert(self._data.dtype, new_value)

    def __repr__(self) -> str:
        return f"ElementRef(index={self._offset}, value={self.value!r})"


class DynamicStackArray:
    """
    Variable-length sequence stored in a fixed-capacity buffer.

    Behaves like a small list whose length can never exceed ``capacity``.
    Instances are mutable values: use ``copy()`` for an independent one.
    """

    __slots__ = ("_data", "_len", "checked")

    default_dtype = np.int64

    def __init__(
        self,
        values: Iterable[Any] = (),
        *,
        dtype: Any = None,
        checked: Optional[bool] = None,
    ):
        self._data = np.zeros(MAX_RANK, dtype=self.default_dtype if dtype is None else dtype)
        self._len = 0
        self.checked = settings.bounds_checks if checked is None else checked
        self.copy_from(values)

    @classmethod
    def with_length(
        cls,
        length: int,
        *,
        dtype: Any = None,
        checked: Optional[bool] = None,
    ) -> "DynamicStackArray":
        """Create an array with ``length`` live slots (all zero)."""
        result = cls(dtype=dtype, checked=checked)
        result.set_len(length)
        return result

    # -- capacity and length ------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def storage(self) -> np.ndarray:
        """Read-only view of all ``capacity`` slots, live or not."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return self._len

    def low(self) -> int:
        return 0

    def high(self) -> int:
        return self._len - 1

    def set_len(self, length: int) -> None:
        """Set the live length without touching the storage."""
        length = int(length)
        if self.checked:
            if length < 0:
                raise BoundsError(f"Length must be non-negative, got {length}")
            self._check_capacity(length, "set_len")
        self._len = length

    def copy_from(self, source: Iterable[Any]) -> None:
        """
        Overwrite this array with the contents of ``source``.

        Args:
            source: Another stack array or any iterable of values

        Raises:
            CapacityExceeded: If source holds more than ``capacity`` values
            ValueError: If a value would be truncated by an integer dtype
        """
        if isinstance(source, DynamicStackArray):
            source = source.to_list()
        values = [_convert(self._data.dtype, value) for value in source]
        # Always validated: sources are arbitrary caller-supplied iterables.
        self._check_capacity(len(values), "copy_from")
        self._data[:len(values)] = values
        self._len = len(values)

    def copy(self) -> "DynamicStackArray":
        result = self._empty_like()
        result._data[:] = self._data
        result._len = self._len
        return result

    def __copy__(self) -> "DynamicStackArray":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "DynamicStackArray":
        return self.copy()

    # -- element access -----------------------------------------------------

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return self._python_slice(index)
        return self._data[self._offset(index)].item()

    def __setitem__(self, index: Index, value: Any) -> None:
        if isinstance(index, slice):
            raise TypeError("Slice assignment is not supported; use copy_from()")
        self._data[self._offset(index)] = _convert(self._data.dtype, value)

    def ref(self, index: Index) -> ElementRef:
        """Mutable reference to the element at ``index``."""
        return ElementRef(self._data, self._offset(index))

    def _python_slice(self, span: slice) -> "DynamicStackArray":
        # a[start:stop] is the exclusive-stop spelling of slice(start, stop - 1)
        if span.step is not None:
            raise TypeError("Stack array slices do not support a step")
        first = 0 if span.start is None else resolve_index(span.start, self._len)
        stop = self._len if span.stop is None else resolve_index(span.stop, self._len)
        return self.slice(first, stop - 1)

    def slice(self, start: Index, end: Index) -> "DynamicStackArray":
        """
        Copy of the elements from ``start`` to ``end``, both inclusive.

        An end that resolves before the start yields an empty array.
        """
        first = resolve_index(start, self._len)
        last = resolve_index(end, self._len)
        result = self._empty_like()
        if last >= first:
            if self.checked and (first < 0 or last >= self._len):
                raise BoundsError(
                    f"Slice {first}..{last} outside [0, {self._len})"
                )
            count = last - first + 1
            result._data[:count] = self._data[first:last + 1]
            result._len = count
        return result

    # -- iteration ----------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        return self.items()

    def items(self) -> Iterator[Any]:
        """Values of the live elements."""
        return _values(self._data, self._len)

    def mitems(self) -> Iterator[ElementRef]:
        """Mutable references to the live elements."""
        return _refs(self._data, self._len)

    def pairs(self) -> Iterator[Tuple[int, Any]]:
        return enumerate(_values(self._data, self._len))

    def mpairs(self) -> Iterator[Tuple[int, ElementRef]]:
        return ((ref.index, ref) for ref in _refs(self._data, self._len))

    # -- structural mutation ------------------------------------------------

    def insert(self, value: Any, index: Index = 0) -> None:
        """Insert ``value`` before ``index``, shifting the tail right."""
        offset = resolve_index(index, self._len)
        if self.checked:
            self._check_capacity(self._len + 1, "insert")
            if not 0 <= offset <= self._len:
                raise BoundsError(f"Insert position {offset} outside [0, {self._len}]")
        value = _convert(self._data.dtype, value)
        self._data[offset + 1:self._len + 1] = self._data[offset:self._len].copy()
        self._data[offset] = value
        self._len += 1

    def delete(self, index: Index) -> None:
        """Remove the element at ``index`` and zero the vacated last slot."""
        offset = resolve_index(index, self._len)
        if self.checked:
            if self._len == 0:
                raise BoundsError("Cannot delete from an empty array")
            if not 0 <= offset < self._len:
                raise BoundsError(f"Delete position {offset} outside [0, {self._len})")
        self._len -= 1
        self._data[offset:self._len] = self._data[offset + 1:self._len + 1].copy()
        self._data[self._len] = 0

    def append(self, value: Any) -> None:
        if self.checked:
            self._check_capacity(self._len + 1, "append")
        self._data[self._len] = _convert(self._data.dtype, value)
        self._len += 1

    add = append

    def appended(self, value: Any) -> "DynamicStackArray":
        """Copy of this array with ``value`` appended."""
        result = self.copy()
        result.append(value)
        return result

    def concat(self, other: "DynamicStackArray") -> "DynamicStackArray":
        """New array holding this array's elements followed by ``other``'s."""
        total = self._len + other._len
        if self.checked:
            self._check_capacity(total, "concat")
        result = self.copy()
        result._data[self._len:total] = other._data[:other._len]
        result._len = total
        return result

    def __add__(self, other: Any) -> "DynamicStackArray":
        if not isinstance(other, DynamicStackArray):
            return NotImplemented
        return self.concat(other)

    # -- derived views and reductions ---------------------------------------

    def reversed(self) -> "DynamicStackArray":
        result = self._empty_like()
        result._data[:self._len] = self._data[:self._len][::-1]
        result._len = self._len
        return result

    def reversed_into(self, dest: "DynamicStackArray") -> None:
        """
        Write the reverse of this array into ``dest``.

        Slots of ``dest`` between this array's length and the length ``dest``
        had before the call are zeroed, so a shorter result leaves no stale
        tail from the previous occupant.
        """
        count = self._len
        previous = dest._len
        dest._data[:count] = self._data[:count][::-1].copy()
        if previous > count:
            dest._data[count:previous] = 0
        dest._len = count

    def to_list(self) -> List[Any]:
        return self._data[:self._len].tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data[:self._len].copy()

    def __array__(self, dtype: Any = None, copy: Optional[bool] = None) -> np.ndarray:
        return np.array(self._data[:self._len], dtype=dtype)

    def product(self) -> Any:
        """Product of the live elements; 1 for an empty array."""
        # Python integers, so large shapes cannot wrap around like int64 would
        return math.prod(self.to_list(), start=self._data.dtype.type(1).item())

    def max(self) -> Any:
        """Largest live element; the dtype's zero for an empty array."""
        if self._len == 0:
            return self._data.dtype.type(0).item()
        return self._data[:self._len].max().item()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DynamicStackArray):
            return self.to_list() == other.to_list()
        if isinstance(other, (list, tuple)):
            return self.to_list() == list(other)
        return NotImplemented

    def __str__(self) -> str:
        return "[" + ", ".join(str(value) for value in self.to_list()) + "]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_list()})"

    # -- helpers ------------------------------------------------------------

    def _empty_like(self) -> "DynamicStackArray":
        return type(self)(dtype=self._data.dtype, checked=self.checked)

    def _offset(self, index: Index) -> int:
        offset = resolve_index(index, self._len)
        if self.checked and not 0 <= offset < self._len:
            raise BoundsError(f"Index {index!r} resolves to {offset}, outside [0, {self._len})")
        return offset

    def _check_capacity(self, length: int, operation: str) -> None:
        if length > self.capacity:
            logger.debug(f"{operation} rejected: length {length} > capacity {self.capacity}")
            raise CapacityExceeded(
                f"{operation}: length {length} exceeds capacity {self.capacity}"
            )


class Metadata(DynamicStackArray):
    """Stack array of int64 holding one tensor's shape or strides."""

    __slots__ = ()


def _values(data: np.ndarray, length: int) -> Iterator[Any]:
    for i in range(length):
        yield data[i].item()


def _refs(data: np.ndarray, length: int) -> Iterator[ElementRef]:
    for i in range(length):
        yield ElementRef(data, i)


def _zip_values(
    a: np.ndarray, b: np.ndarray, length: int
) -> Iterator[Tuple[Any, Any]]:
    for i in range(length):
        yield a[i].item(), b[i].item()


def zip_arrays(
    a: DynamicStackArray, b: DynamicStackArray
) -> Iterator[Tuple[Any, Any]]:
    """
    Pairs of corresponding elements of ``a`` and ``b``.

    Stops at the shorter array without error; reshaping code relies on this.
    """
    return _zip_values(a._data, b._data, min(len(a), len(b)))


def concat(*arrays: DynamicStackArray) -> DynamicStackArray:
    """
    Concatenate any number of stack arrays into a new one.

    The total length is validated even for unchecked arrays.

    Raises:
        CapacityExceeded: If the combined length exceeds the capacity
    """
    if not arrays:
        return Metadata()

    first = arrays[0]
    total = sum(len(array) for array in arrays)
    if total > first.capacity:
        logger.debug(f"concat rejected: {len(arrays)} arrays totalling {total} elements")
        raise CapacityExceeded(
            f"concat: total length {total} exceeds capacity {first.capacity}"
        )

    result = first._empty_like()
    offset = 0
    for array in arrays:
        count = len(array)
        result._data[offset:offset + count] = array._data[:count]
        offset += count
    result._len = total
    return result


def init_metadata(length: int, checked: Optional[bool] = None) -> Metadata:
    """Metadata with ``length`` zeroed live slots."""
    return Metadata.with_length(length, checked=checked)


def to_metadata(*values: Any, checked: Optional[bool] = None) -> Metadata:
    """
    Build Metadata from values.

    Accepts either the values themselves (``to_metadata(2, 3, 4)``) or one
    list/tuple/array of them. A Metadata argument is returned unchanged, so
    call sites can take either form, unless ``checked`` asks for a different
    mode; then a copy in that mode is returned. Other stack arrays are copied
    keeping their own mode unless ``checked`` is given.
    """
    if len(values) == 1:
        only = values[0]
        if isinstance(only, DynamicStackArray):
            if checked is None or checked == only.checked:
                if isinstance(only, Metadata):
                    return only
                checked = only.checked
            return Metadata(only, checked=checked)
        if isinstance(only, (list, tuple, np.ndarray)):
            return Metadata(only, checked=checked)
    return Metadata(values, checked=checked)
