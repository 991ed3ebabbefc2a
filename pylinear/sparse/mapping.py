"""
Ordered int -> float mapping backed by two parallel numpy arrays.

OrderedIntDoubleMapping is the storage engine of SequentialSparseDoubleVector.
Keys live in an int32 array kept strictly ascending, values in a float64
array at the same offsets; only the first `count` slots are live, the rest
is spare capacity.

Invariants:
    - indices[0:count] is strictly ascending (no duplicate keys)
    - no live value equals DEFAULT_VALUE: writing 0.0 deletes the key

Complexity:
    get / find          O(log n) binary search
    set (append)        O(1) amortized when keys arrive in increasing order
    set (insert/delete) O(n) shift of the tail
    merge               O(n1 + n2) merge-join into fresh arrays
"""

from __future__ import annotations

from typing import Callable, Iterator
import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import ConcurrentModificationError
from pylinear.core.protocols import VectorEntry


DEFAULT_VALUE: float = 0.0

DEFAULT_CAPACITY: int = 11

# Keys are stored as int32
MAX_KEY: int = int(np.iinfo(np.int32).max)

# Reallocation factor applied to the live count when the arrays are full
GROWTH_FACTOR: float = 1.2


def _grown_capacity(count: int) -> int:
    return max(int(GROWTH_FACTOR * count), count + 1)


class OrderedIntDoubleMapping:
    """
    Sparse map from non-negative int keys to non-zero float values.
    
    Usage:
        m = OrderedIntDoubleMapping()
        m.set(3, 1.5)
        m.increment(3, -1.5)   # back to 0.0, key removed
        m.get(3)               # 0.0
    """
    
    __slots__ = ('_indices', '_values', '_count', '_mod_count')
    
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Create an empty mapping.
        
        Args:
            capacity: Initial size of the backing arrays (a hint, not a limit)
        """
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._indices = np.zeros(capacity, dtype=np.int32)
        self._values = np.zeros(capacity, dtype=np.float64)
        self._count = 0
        # bumped on every structural change (insert, delete, reallocation)
        self._mod_count = 0
    
    @classmethod
    def _from_arrays(
        cls,
        indices: NDArray[np.int32],
        values: NDArray[np.float64],
        count: int,
    ) -> OrderedIntDoubleMapping:
        mapping = cls(0)
        mapping._indices = indices
        mapping._values = values
        mapping._count = count
        return mapping
    
    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    
    @property
    def count(self) -> int:
        """Number of live entries."""
        return self._count
    
    @property
    def capacity(self) -> int:
        """Length of the backing arrays (>= count)."""
        return len(self._indices)
    
    @property
    def mod_count(self) -> int:
        """Structural modification counter."""
        return self._mod_count
    
    @property
    def indices(self) -> NDArray[np.int32]:
        """Read-only view of the live keys, ascending."""
        view = self._indices[:self._count]
        view.flags.writeable = False
        return view
    
    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only view of the live values, aligned with indices."""
        view = self._values[:self._count]
        view.flags.writeable = False
        return view
    
    def index_at(self, offset: int) -> int:
        return int(self._indices[offset])
    
    def value_at(self, offset: int) -> float:
        return float(self._values[offset])
    
    def __len__(self) -> int:
        return self._count
    
    def __contains__(self, key: int) -> bool:
        return self.find(key) >= 0
    
    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    
    def find(self, key: int) -> int:
        """
        Binary search for key among the live entries.
        
        Returns:
            The offset of key when present, otherwise -(insertion_point + 1),
            so a single search tells set/increment both whether the key
            exists and where it would go.
        """
        low = int(np.searchsorted(self._indices[:self._count], key, side='left'))
        if low < self._count and self._indices[low] == key:
            return low
        return -(low + 1)
    
    def get(self, key: int) -> float:
        """Stored value for key, or DEFAULT_VALUE when absent."""
        offset = self.find(key)
        return float(self._values[offset]) if offset >= 0 else DEFAULT_VALUE
    
    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    
    def set(self, key: int, value: float) -> None:
        """
        Store value under key; storing DEFAULT_VALUE deletes the key.
        
        Keys larger than every live key take the append path without a
        search, so building a mapping in ascending key order is O(1)
        amortized per entry.
        """
        count = self._count
        if count == 0 or key > self._indices[count - 1]:
            if value != DEFAULT_VALUE:
                if count >= len(self._indices):
                    self._grow_to(_grown_capacity(count))
                self._indices[count] = key
                self._values[count] = value
                self._count = count + 1
                self._mod_count += 1
            return
        
        offset = self.find(key)
        if offset >= 0:
            self._update_or_remove(offset, value)
        else:
            self._insert_if_not_default(key, offset, value)
    
    def increment(self, key: int, delta: float) -> None:
        """Add delta to the value under key with a single search."""
        offset = self.find(key)
        if offset >= 0:
            self._update_or_remove(offset, float(self._values[offset]) + delta)
        else:
            self._insert_if_not_default(key, offset, delta)
    
    def merge(
        self,
        other: OrderedIntDoubleMapping,
        combine: Callable[[float, float], float],
    ) -> None:
        """
        Merge other into this mapping in linear time.
        
        Walks both sorted key sequences with two cursors, always emitting
        the smaller key:
            key only in self   -> combine(value, 0.0)
            key only in other  -> combine(0.0, value)
            key in both        -> combine(left, right)
        Results equal to DEFAULT_VALUE are dropped, so afterwards every key
        k of the union satisfies get(k) == combine(old_get(k), other.get(k)).
        
        Args:
            other: Mapping whose entries are merged in (left unchanged)
            combine: Binary function applied per key
        """
        left_keys = self._indices[:self._count].tolist()
        left_values = self._values[:self._count].tolist()
        right_keys = other._indices[:other._count].tolist()
        right_values = other._values[:other._count].tolist()
        n_left = len(left_keys)
        n_right = len(right_keys)
        
        merged_keys: list[int] = []
        merged_values: list[float] = []
        
        i = j = 0
        while i < n_left and j < n_right:
            if left_keys[i] < right_keys[j]:
                key = left_keys[i]
                value = combine(left_values[i], DEFAULT_VALUE)
                i += 1
            elif left_keys[i] > right_keys[j]:
                key = right_keys[j]
                value = combine(DEFAULT_VALUE, right_values[j])
                j += 1
            else:
                key = left_keys[i]
                value = combine(left_values[i], right_values[j])
                i += 1
                j += 1
            if value != DEFAULT_VALUE:
                merged_keys.append(key)
                merged_values.append(value)
        
        for i in range(i, n_left):
            value = combine(left_values[i], DEFAULT_VALUE)
            if value != DEFAULT_VALUE:
                merged_keys.append(left_keys[i])
                merged_values.append(value)
        
        for j in range(j, n_right):
            value = combine(DEFAULT_VALUE, right_values[j])
            if value != DEFAULT_VALUE:
                merged_keys.append(right_keys[j])
                merged_values.append(value)
        
        count = len(merged_keys)
        capacity = _grown_capacity(n_left + n_right)
        self._indices = np.zeros(capacity, dtype=np.int32)
        self._values = np.zeros(capacity, dtype=np.float64)
        self._indices[:count] = merged_keys
        self._values[:count] = merged_values
        self._count = count
        self._mod_count += 1
    
    def transform(self, func: Callable[[NDArray[np.float64]], NDArray[np.float64]]) -> None:
        """
        Replace every live value v by func(v), then drop new zeros.
        
        Args:
            func: Vectorized function over the live values array (e.g. np.sqrt)
        """
        live = self._values[:self._count]
        with np.errstate(all='ignore'):
            live[:] = func(live)
        keep = live != DEFAULT_VALUE
        if not np.all(keep):
            kept = int(np.count_nonzero(keep))
            self._indices[:kept] = self._indices[:self._count][keep]
            self._values[:kept] = live[keep]
            self._count = kept
            self._mod_count += 1
    
    def copy_internal_state(self, other: OrderedIntDoubleMapping) -> None:
        """Replace this mapping's arrays by copies of other's."""
        self._indices = other._indices.copy()
        self._values = other._values.copy()
        self._count = other._count
        self._mod_count += 1
    
    def clone(self) -> OrderedIntDoubleMapping:
        """Independent deep copy of both arrays and the count."""
        return OrderedIntDoubleMapping._from_arrays(
            self._indices.copy(), self._values.copy(), self._count
        )
    
    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------
    
    def items(self) -> Iterator[VectorEntry]:
        """
        Live (index, value) pairs in ascending index order.
        
        Raises:
            ConcurrentModificationError: If the mapping is structurally
                modified while the iterator is being consumed
        """
        expected = self._mod_count
        offset = 0
        while offset < self._count:
            yield VectorEntry(int(self._indices[offset]), float(self._values[offset]))
            if self._mod_count != expected:
                raise ConcurrentModificationError(
                    "OrderedIntDoubleMapping modified during iteration"
                )
            offset += 1
    
    def __iter__(self) -> Iterator[VectorEntry]:
        return self.items()
    
    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    
    def _grow_to(self, capacity: int) -> None:
        if capacity > len(self._indices):
            indices = np.zeros(capacity, dtype=np.int32)
            values = np.zeros(capacity, dtype=np.float64)
            indices[:self._count] = self._indices[:self._count]
            values[:self._count] = self._values[:self._count]
            self._indices = indices
            self._values = values
            self._mod_count += 1
    
    def _insert_if_not_default(self, key: int, offset: int, value: float) -> None:
        if value == DEFAULT_VALUE:
            return
        count = self._count
        if count >= len(self._indices):
            self._grow_to(_grown_capacity(count))
        at = -offset - 1
        if count > at:
            # numpy buffers overlapping slice assignment
            self._indices[at + 1:count + 1] = self._indices[at:count]
            self._values[at + 1:count + 1] = self._values[at:count]
        self._indices[at] = key
        self._values[at] = value
        self._count = count + 1
        self._mod_count += 1
    
    def _update_or_remove(self, offset: int, value: float) -> None:
        if value == DEFAULT_VALUE:
            count = self._count
            self._indices[offset:count - 1] = self._indices[offset + 1:count]
            self._values[offset:count - 1] = self._values[offset + 1:count]
            self._count = count - 1
            self._mod_count += 1
        else:
            self._values[offset] = value
    
    # ------------------------------------------------------------------
    # Structural equality
    # ------------------------------------------------------------------
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedIntDoubleMapping):
            return NotImplemented
        return (
            self._count == other._count
            and np.array_equal(self._indices[:self._count], other._indices[:other._count])
            and np.array_equal(self._values[:self._count], other._values[:other._count])
        )
    
    def __hash__(self) -> int:
        return hash((
            tuple(self._indices[:self._count].tolist()),
            tuple(self._values[:self._count].tolist()),
        ))
    
    def __repr__(self) -> str:
        pairs = ", ".join(
            f"({k},{v})" for k, v in zip(
                self._indices[:self._count].tolist(),
                self._values[:self._count].tolist(),
            )
        )
        return f"OrderedIntDoubleMapping([{pairs}])"
