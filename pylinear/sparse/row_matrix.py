"""
Sparse matrix stored as a map of sparse row vectors.

SparseDoubleRowMatrix keeps one SparseDoubleVector per row that holds at
least one non-zero; absent rows read as all-zero. Products and element-wise
operations walk the stored entries only, so their cost follows the number
of non-zeros rather than rows * columns.

Operations that turn implicit zeros into non-zeros (adding or subtracting a
scalar, subtracting a vector) are evaluated over every cell and may produce
a fully populated result.
"""

from __future__ import annotations

from numbers import Real
from typing import Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import DoubleMatrix, DoubleVector
from pylinear.core.validation import (
    check_array,
    check_index,
    check_ndim,
    check_non_negative,
    check_same_dimension,
    check_same_shape,
    check_inner_dimensions,
    check_slice_bounds,
)
from pylinear.sparse.hashed import SparseDoubleVector
from pylinear.vector import ieee_divide, ieee_pow


class SparseDoubleRowMatrix:
    """
    Row-oriented sparse matrix.
    
    Usage:
        m = SparseDoubleRowMatrix.from_array([[0, 2, 3], [3, 0, 6]])
        m.multiply(m.transpose()).to_array()   # [[13, 18], [18, 45]]
    """
    
    def __init__(self, rows: int, columns: int):
        check_non_negative(rows, 'rows')
        check_non_negative(columns, 'columns')
        self._num_rows = rows
        self._num_columns = columns
        self._rows: dict[int, SparseDoubleVector] = {}
    
    @classmethod
    def from_array(cls, array: ArrayLike) -> SparseDoubleRowMatrix:
        """Build from a 2-D array, storing only its non-zeros."""
        values = check_array(array, 'array')
        check_ndim(values, 2, 'array')
        matrix = cls(*values.shape)
        for row in np.flatnonzero(np.any(values != 0.0, axis=1)).tolist():
            matrix._rows[row] = SparseDoubleVector.from_array(values[row])
        return matrix
    
    @classmethod
    def from_rows(cls, vectors: Sequence[DoubleVector]) -> SparseDoubleRowMatrix:
        """Stack equally sized vectors as rows."""
        if len(vectors) == 0:
            raise ValidationError("vectors: need at least one row vector")
        columns = vectors[0].dimension
        matrix = cls(len(vectors), columns)
        for row, vector in enumerate(vectors):
            matrix.set_row_vector(row, vector)
        return matrix
    
    @classmethod
    def from_matrix(cls, other: DoubleMatrix) -> SparseDoubleRowMatrix:
        matrix = cls(other.row_count, other.column_count)
        for row in other.row_indices():
            matrix.set_row_vector(row, other.get_row_vector(row))
        return matrix
    
    @classmethod
    def with_bias_column(
        cls,
        first: DoubleVector,
        other: DoubleMatrix,
    ) -> SparseDoubleRowMatrix:
        """Matrix [first | other]: first becomes column 0, other shifts right."""
        check_same_dimension(other.row_count, first.dimension, 'with_bias_column')
        matrix = cls(other.row_count, other.column_count + 1)
        matrix.set_column_vector(0, first)
        for col in range(other.column_count):
            matrix.set_column_vector(col + 1, other.get_column_vector(col))
        return matrix
    
    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------
    
    @property
    def row_count(self) -> int:
        return self._num_rows
    
    @property
    def column_count(self) -> int:
        return self._num_columns
    
    @property
    def shape(self) -> tuple[int, int]:
        return (self._num_rows, self._num_columns)
    
    @property
    def is_sparse(self) -> bool:
        return True
    
    def get(self, row: int, col: int) -> float:
        check_index(row, self._num_rows, 'row')
        check_index(col, self._num_columns, 'col')
        vector = self._rows.get(row)
        return 0.0 if vector is None else vector.get(col)
    
    def set(self, row: int, col: int, value: float) -> None:
        row = check_index(row, self._num_rows, 'row')
        col = check_index(col, self._num_columns, 'col')
        self._store(row, col, float(value))
    
    def _store(self, row: int, col: int, value: float) -> None:
        vector = self._rows.get(row)
        if vector is None:
            if value == 0.0:
                return
            vector = self._rows[row] = SparseDoubleVector(self._num_columns)
        vector._put(col, value)
        if vector.length == 0:
            del self._rows[row]
    
    def iterate_non_zero(self) -> Iterator[tuple[int, int, float]]:
        """Stored (row, col, value) triples, rows ascending."""
        for row in sorted(self._rows):
            for col, value in self._rows[row].iterate_non_zero():
                yield row, col, value
    
    # ------------------------------------------------------------------
    # Row and column vectors
    # ------------------------------------------------------------------
    
    def get_row_vector(self, row: int) -> SparseDoubleVector:
        """Copy of a row as a SparseDoubleVector of dimension column_count."""
        check_index(row, self._num_rows, 'row')
        vector = self._rows.get(row)
        if vector is None:
            return SparseDoubleVector(self._num_columns)
        return vector.deep_copy()
    
    def get_column_vector(self, col: int) -> SparseDoubleVector:
        """Copy of a column as a SparseDoubleVector of dimension row_count."""
        check_index(col, self._num_columns, 'col')
        vector = SparseDoubleVector(self._num_rows)
        for row, row_vector in self._rows.items():
            vector._put(row, row_vector.get(col))
        return vector
    
    def set_row_vector(self, row: int, vector: DoubleVector) -> None:
        check_index(row, self._num_rows, 'row')
        check_same_dimension(self._num_columns, vector.dimension, 'set_row_vector')
        stored = SparseDoubleVector.from_vector(vector)
        if stored.length:
            self._rows[row] = stored
        else:
            self._rows.pop(row, None)
    
    def set_column_vector(self, col: int, vector: DoubleVector) -> None:
        check_index(col, self._num_columns, 'col')
        check_same_dimension(self._num_rows, vector.dimension, 'set_column_vector')
        for row in list(self._rows):
            self._store(row, col, 0.0)
        for row, value in vector.iterate_non_zero():
            self._store(row, col, value)
    
    def remove_row(self, row: int) -> None:
        """Drop every stored entry of a row."""
        check_index(row, self._num_rows, 'row')
        self._rows.pop(row, None)
    
    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    
    def multiply(self, other: DoubleMatrix | float) -> SparseDoubleRowMatrix:
        """
        Scalar multiple or matrix product.
        
        The product walks each stored row's non-zeros (k, a) and adds
        a * other[k, :] into the result row; only other's non-zeros in row
        k are touched.
        
        Raises:
            DimensionMismatchError: If column_count != other.row_count
            ValidationError: If other is a vector
        """
        if isinstance(other, Real):
            return self._map_stored(lambda value: value * other)
        if isinstance(other, DoubleVector):
            raise ValidationError(
                "multiply: operand is a vector, use multiply_vector_row(v) "
                "for M·v or multiply_vector_column(v) for vᵀ·M"
            )
        check_inner_dimensions(self.shape, (other.row_count, other.column_count))
        result = SparseDoubleRowMatrix(self._num_rows, other.column_count)
        other_rows: dict[int, DoubleVector] = {}
        for row in sorted(self._rows):
            accumulated: dict[int, float] = {}
            for k, left in self._rows[row].iterate_non_zero():
                right_row = other_rows.get(k)
                if right_row is None:
                    right_row = other_rows[k] = other.get_row_vector(k)
                for col, right in right_row.iterate_non_zero():
                    accumulated[col] = accumulated.get(col, 0.0) + left * right
            for col, value in accumulated.items():
                result._store(row, col, value)
        return result
    
    def multiply_element_wise(self, other: DoubleMatrix) -> SparseDoubleRowMatrix:
        check_same_shape(self.shape, (other.row_count, other.column_count), 'multiply_element_wise')
        result = SparseDoubleRowMatrix(*self.shape)
        for row, col, value in self.iterate_non_zero():
            result._store(row, col, value * other.get(row, col))
        return result
    
    def multiply_vector_row(self, v: DoubleVector) -> SparseDoubleVector:
        """M . v, a vector of dimension row_count."""
        check_same_dimension(self._num_columns, v.dimension, 'multiply_vector_row')
        result = SparseDoubleVector(self._num_rows)
        for row, row_vector in self._rows.items():
            result._put(row, row_vector.dot(v))
        return result
    
    def multiply_vector_column(self, v: DoubleVector) -> SparseDoubleVector:
        """v^T . M, a vector of dimension column_count."""
        check_same_dimension(self._num_rows, v.dimension, 'multiply_vector_column')
        accumulated: dict[int, float] = {}
        for row, coefficient in v.iterate_non_zero():
            row_vector = self._rows.get(row)
            if row_vector is None:
                continue
            for col, value in row_vector.iterate_non_zero():
                accumulated[col] = accumulated.get(col, 0.0) + value * coefficient
        result = SparseDoubleVector(self._num_columns)
        for col, value in accumulated.items():
            result._put(col, value)
        return result
    
    def transpose(self) -> SparseDoubleRowMatrix:
        result = SparseDoubleRowMatrix(self._num_columns, self._num_rows)
        for row, col, value in self.iterate_non_zero():
            result._store(col, row, value)
        return result
    
    # ------------------------------------------------------------------
    # Element-wise arithmetic
    # ------------------------------------------------------------------
    
    def _map_stored(self, func) -> SparseDoubleRowMatrix:
        result = SparseDoubleRowMatrix(*self.shape)
        for row, col, value in self.iterate_non_zero():
            result._store(row, col, func(value))
        return result
    
    def _map_all(self, func) -> SparseDoubleRowMatrix:
        result = SparseDoubleRowMatrix(*self.shape)
        for row in range(self._num_rows):
            vector = self._rows.get(row)
            for col in range(self._num_columns):
                value = 0.0 if vector is None else vector.get(col)
                result._store(row, col, func(row, value))
        return result
    
    def _combine_stored(self, other: DoubleMatrix, sign: float, operation: str) -> SparseDoubleRowMatrix:
        check_same_shape(self.shape, (other.row_count, other.column_count), operation)
        result = self.deep_copy()
        for row in other.row_indices():
            for col, value in other.get_row_vector(row).iterate_non_zero():
                result._store(row, col, result.get(row, col) + sign * value)
        return result
    
    def add(self, other: DoubleMatrix | float) -> SparseDoubleRowMatrix:
        if isinstance(other, Real):
            return self._map_all(lambda row, value: value + other)
        return self._combine_stored(other, 1.0, 'add')
    
    def subtract(self, other: DoubleMatrix | DoubleVector | float) -> SparseDoubleRowMatrix:
        """
        Subtract a scalar, a matrix of the same shape, or a vector of
        dimension row_count from every column.
        """
        if isinstance(other, Real):
            return self._map_all(lambda row, value: value - other)
        if isinstance(other, DoubleVector):
            check_same_dimension(self._num_rows, other.dimension, 'subtract')
            offsets = other.to_array()
            return self._map_all(lambda row, value: value - offsets[row])
        return self._combine_stored(other, -1.0, 'subtract')
    
    def subtract_by(self, amount: float) -> SparseDoubleRowMatrix:
        """amount - self, element-wise."""
        return self._map_all(lambda row, value: amount - value)
    
    def divide(self, other: DoubleMatrix | DoubleVector | float) -> SparseDoubleRowMatrix:
        """
        Divide the stored entries by a scalar, by the matching entries of a
        matrix, or row-wise by a vector of dimension row_count.
        
        Absent entries are never divided, so 0/0 does not surface there.
        """
        if isinstance(other, Real):
            return self._map_stored(lambda value: ieee_divide(value, other))
        result = SparseDoubleRowMatrix(*self.shape)
        if isinstance(other, DoubleVector):
            check_same_dimension(self._num_rows, other.dimension, 'divide')
            for row, col, value in self.iterate_non_zero():
                result._store(row, col, ieee_divide(value, other.get(row)))
            return result
        check_same_shape(self.shape, (other.row_count, other.column_count), 'divide')
        for row, col, value in self.iterate_non_zero():
            result._store(row, col, ieee_divide(value, other.get(row, col)))
        return result
    
    def pow(self, x: float) -> SparseDoubleRowMatrix:
        if x == 2.0:
            return self._map_stored(lambda value: value * value)
        return self._map_stored(lambda value: ieee_pow(value, x))
    
    # ------------------------------------------------------------------
    # Reductions and views
    # ------------------------------------------------------------------
    
    def max(self, column: int) -> float:
        """Largest value in a column, implicit zeros included."""
        return self.get_column_vector(column).max()
    
    def min(self, column: int) -> float:
        """Smallest value in a column, implicit zeros included."""
        return self.get_column_vector(column).min()
    
    def sum(self) -> float:
        return float(sum(vector.sum() for vector in self._rows.values()))
    
    def slice(
        self,
        row_start: int,
        row_end: int,
        col_start: int | None = None,
        col_end: int | None = None,
    ) -> SparseDoubleRowMatrix:
        """
        Sub-matrix [row_start:row_end, col_start:col_end].
        
        slice(rows, cols) is shorthand for slice(0, rows, 0, cols).
        """
        if col_start is None and col_end is None:
            row_start, row_end, col_start, col_end = 0, row_start, 0, row_end
        elif col_start is None or col_end is None:
            raise ValidationError("slice: pass (rows, cols) or all four bounds")
        check_slice_bounds(row_start, row_end, self._num_rows)
        check_slice_bounds(col_start, col_end, self._num_columns)
        result = SparseDoubleRowMatrix(row_end - row_start, col_end - col_start)
        for row, vector in self._rows.items():
            if row_start <= row < row_end:
                for col, value in vector.iterate_non_zero():
                    if col_start <= col < col_end:
                        result._store(row - row_start, col - col_start, value)
        return result
    
    def row_indices(self) -> list[int]:
        """Rows holding at least one stored entry, ascending."""
        return sorted(self._rows)
    
    def column_indices(self) -> list[int]:
        return list(range(self._num_columns))
    
    def to_array(self) -> NDArray[np.float64]:
        result = np.zeros(self.shape, dtype=np.float64)
        for row, vector in self._rows.items():
            result[row] = vector.to_array()
        return result
    
    def deep_copy(self) -> SparseDoubleRowMatrix:
        result = SparseDoubleRowMatrix(*self.shape)
        result._rows = {row: vector.deep_copy() for row, vector in self._rows.items()}
        return result
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseDoubleRowMatrix):
            return NotImplemented
        return self.shape == other.shape and self._rows == other._rows
    
    __hash__ = None
    
    def __repr__(self) -> str:
        if self._num_rows * self._num_columns < 50:
            rows = ", ".join(
                f"{row}: {self._rows[row]._format_entries()}" for row in sorted(self._rows)
            )
            return f"SparseDoubleRowMatrix({self._num_rows}x{self._num_columns}, {{{rows}}})"
        return f"SparseDoubleRowMatrix({self._num_rows}x{self._num_columns})"
