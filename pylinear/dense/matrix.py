"""
Dense column-major matrix and the multiply dispatcher.

DenseDoubleMatrix stores rows * columns float64 values in one flat buffer,
column-major: element (r, c) lives at offset r + c*rows. Element-wise
operations run as numpy expressions over a 2-D Fortran-ordered view of
that buffer.

Matrix products are dispatched per call:
    - sparse right operand: walk its stored entries (gemm_sparse_right)
    - otherwise select_kernel() decides between the naive k-i-j loop and
      BLAS dgemm, using the MultiplyPolicy passed in or the process default
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.compute.blas import MultiplyPolicy, select_kernel
from pylinear.core.compute.linalg import gemm_naive, gemm_native, gemm_sparse_right
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
from pylinear.dense.vector import DenseDoubleVector

logger = logging.getLogger(__name__)


def _column_major(array: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.asarray(array, dtype=np.float64).ravel(order='F')


class DenseDoubleMatrix:
    """
    Dense float64 matrix in column-major storage.
    
    Usage:
        a = DenseDoubleMatrix(101, 101, 6.0)
        b = DenseDoubleMatrix(101, 101, 3.0)
        c = a.multiply(b)                          # BLAS when available
        c = a.multiply(b, policy=MultiplyPolicy(prefer='naive'))
    """
    
    def __init__(self, rows: int, columns: int, value: float = 0.0):
        """
        Create a rows x columns matrix filled with value.
        
        Args:
            rows: Number of rows
            columns: Number of columns
            value: Initial value of every element
        """
        check_non_negative(rows, 'rows')
        check_non_negative(columns, 'columns')
        self._num_rows = rows
        self._num_columns = columns
        self._data = np.full(rows * columns, float(value), dtype=np.float64)
    
    @classmethod
    def _wrap(cls, data: NDArray[np.float64], rows: int, columns: int) -> DenseDoubleMatrix:
        # takes ownership of a column-major buffer without copying
        matrix = cls(0, 0)
        matrix._num_rows = rows
        matrix._num_columns = columns
        matrix._data = data
        return matrix
    
    @classmethod
    def from_array(cls, array: ArrayLike) -> DenseDoubleMatrix:
        """Build from a 2-D array (row-major nesting, as numpy prints it)."""
        values = check_array(array, 'array')
        check_ndim(values, 2, 'array')
        return cls._wrap(_column_major(values), *values.shape)
    
    @classmethod
    def from_column_major(
        cls,
        buffer: ArrayLike,
        rows: int,
        columns: int,
    ) -> DenseDoubleMatrix:
        """
        Build from a flat column-major buffer (copied).
        
        Raises:
            ValidationError: If the buffer does not hold rows * columns values
        """
        check_non_negative(rows, 'rows')
        check_non_negative(columns, 'columns')
        values = check_array(buffer, 'buffer')
        check_ndim(values, 1, 'buffer')
        if len(values) != rows * columns:
            raise ValidationError(
                f"buffer: expected {rows * columns} values for {rows}x{columns}, "
                f"got {len(values)}"
            )
        return cls._wrap(values, rows, columns)
    
    @classmethod
    def from_rows(cls, vectors: Sequence[DoubleVector]) -> DenseDoubleMatrix:
        """Stack equally sized vectors as rows."""
        if len(vectors) == 0:
            raise ValidationError("vectors: need at least one row vector")
        columns = vectors[0].dimension
        matrix = cls(len(vectors), columns)
        for row, vector in enumerate(vectors):
            matrix.set_row_vector(row, vector)
        return matrix
    
    @classmethod
    def with_bias_column(cls, first: DoubleVector, other: DoubleMatrix) -> DenseDoubleMatrix:
        """Matrix [first | other]: first becomes column 0, other shifts right."""
        check_same_dimension(other.row_count, first.dimension, 'with_bias_column')
        rows = other.row_count
        data = np.empty(rows * (other.column_count + 1), dtype=np.float64)
        data[:rows] = first.to_array()
        data[rows:] = _column_major(other.to_array())
        return cls._wrap(data, rows, other.column_count + 1)
    
    @classmethod
    def eye(cls, n: int) -> DenseDoubleMatrix:
        """n x n identity matrix."""
        check_non_negative(n, 'n')
        return cls._wrap(_column_major(np.eye(n)), n, n)
    
    @classmethod
    def random(
        cls,
        rows: int,
        columns: int,
        rng: np.random.Generator | None = None,
    ) -> DenseDoubleMatrix:
        """rows x columns matrix of uniform [0, 1) samples."""
        check_non_negative(rows, 'rows')
        check_non_negative(columns, 'columns')
        if rng is None:
            rng = np.random.default_rng()
        return cls._wrap(rng.random(rows * columns), rows, columns)
    
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
        return False
    
    @property
    def column_major(self) -> NDArray[np.float64]:
        """Read-only view of the flat column-major buffer."""
        view = self._data.view()
        view.flags.writeable = False
        return view
    
    def _view(self) -> NDArray[np.float64]:
        # 2-D Fortran-ordered view sharing the buffer
        return self._data.reshape(self.shape, order='F')
    
    def get(self, row: int, col: int) -> float:
        check_index(row, self._num_rows, 'row')
        check_index(col, self._num_columns, 'col')
        return float(self._data[row + col * self._num_rows])
    
    def set(self, row: int, col: int, value: float) -> None:
        check_index(row, self._num_rows, 'row')
        check_index(col, self._num_columns, 'col')
        self._data[row + col * self._num_rows] = value
    
    def get_row_vector(self, row: int) -> DenseDoubleVector:
        check_index(row, self._num_rows, 'row')
        return DenseDoubleVector.from_array(self._data[row::self._num_rows])
    
    def get_column_vector(self, col: int) -> DenseDoubleVector:
        check_index(col, self._num_columns, 'col')
        offset = col * self._num_rows
        return DenseDoubleVector.from_array(self._data[offset:offset + self._num_rows])
    
    def set_row_vector(self, row: int, vector: DoubleVector) -> None:
        check_index(row, self._num_rows, 'row')
        check_same_dimension(self._num_columns, vector.dimension, 'set_row_vector')
        self._data[row::self._num_rows] = vector.to_array()
    
    def set_column_vector(self, col: int, vector: DoubleVector) -> None:
        check_index(col, self._num_columns, 'col')
        check_same_dimension(self._num_rows, vector.dimension, 'set_column_vector')
        offset = col * self._num_rows
        self._data[offset:offset + self._num_rows] = vector.to_array()
    
    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    
    def multiply(
        self,
        other: DoubleMatrix | float,
        policy: MultiplyPolicy | None = None,
    ) -> DenseDoubleMatrix:
        """
        Scalar multiple or matrix product.
        
        Args:
            other: Scalar, or a matrix with row_count == self.column_count
            policy: Kernel policy for this call; the process default when None
            
        Returns:
            New (self.row_count x other.column_count) matrix
            
        Raises:
            ValidationError: If other is a vector
            DimensionMismatchError: If the inner dimensions differ
        """
        if isinstance(other, Real):
            return DenseDoubleMatrix._wrap(self._data * float(other), *self.shape)
        if isinstance(other, DoubleVector):
            raise ValidationError(
                "multiply: operand is a vector, use multiply_vector_row(v) "
                "for M·v or multiply_vector_column(v) for vᵀ·M"
            )
        
        check_inner_dimensions(self.shape, (other.row_count, other.column_count))
        m, n = self.shape
        p = other.column_count
        
        if other.is_sparse:
            logger.debug("multiply %dx%d by sparse %dx%d: stored entries", m, n, n, p)
            entries = (
                (k, col, value)
                for k in other.row_indices()
                for col, value in other.get_row_vector(k).iterate_non_zero()
            )
            return DenseDoubleMatrix._wrap(gemm_sparse_right(self._data, entries, m, p), m, p)
        
        kernel = select_kernel(m, n, other.is_sparse, policy)
        logger.debug("multiply %dx%d by %dx%d: %s kernel", m, n, n, p, kernel)
        
        if isinstance(other, DenseDoubleMatrix):
            right = other._data
        else:
            right = _column_major(other.to_array())
        
        if kernel == 'native':
            data = gemm_native(self._data, right, m, n, p)
        else:
            data = gemm_naive(self._data, right, m, n, p)
        return DenseDoubleMatrix._wrap(data, m, p)
    
    def multiply_element_wise(self, other: DoubleMatrix) -> DenseDoubleMatrix:
        check_same_shape(self.shape, (other.row_count, other.column_count), 'multiply_element_wise')
        return DenseDoubleMatrix._wrap(self._data * self._other_data(other), *self.shape)
    
    def multiply_vector_row(self, v: DoubleVector) -> DenseDoubleVector:
        """
        M . v, a vector of dimension row_count.
        
        A sparse v contributes only its stored entries, one column of M each.
        """
        check_same_dimension(self._num_columns, v.dimension, 'multiply_vector_row')
        view = self._view()
        if v.is_sparse:
            result = np.zeros(self._num_rows, dtype=np.float64)
            for col, value in v.iterate_non_zero():
                result += view[:, col] * value
            return DenseDoubleVector.from_array(result)
        return DenseDoubleVector.from_array(view @ v.to_array())
    
    def multiply_vector_column(self, v: DoubleVector) -> DenseDoubleVector:
        """v^T . M, a vector of dimension column_count."""
        check_same_dimension(self._num_rows, v.dimension, 'multiply_vector_column')
        return DenseDoubleVector.from_array(v.to_array() @ self._view())
    
    def transpose(self) -> DenseDoubleMatrix:
        return DenseDoubleMatrix._wrap(_column_major(self._view().T), self._num_columns, self._num_rows)
    
    # ------------------------------------------------------------------
    # Element-wise arithmetic
    # ------------------------------------------------------------------
    
    def _other_data(self, other: DoubleMatrix) -> NDArray[np.float64]:
        if isinstance(other, DenseDoubleMatrix):
            return other._data
        return _column_major(other.to_array())
    
    def _compute(self, func) -> DenseDoubleMatrix:
        with np.errstate(all='ignore'):
            return DenseDoubleMatrix._wrap(np.asarray(func(), dtype=np.float64), *self.shape)
    
    def _broadcast_column(self, vector: DoubleVector, operation: str) -> NDArray[np.float64]:
        # vector of dimension rows, repeated for every column
        check_same_dimension(self._num_rows, vector.dimension, operation)
        return np.tile(vector.to_array(), self._num_columns)
    
    def add(self, other: DoubleMatrix | float) -> DenseDoubleMatrix:
        if isinstance(other, Real):
            return self._compute(lambda: self._data + float(other))
        check_same_shape(self.shape, (other.row_count, other.column_count), 'add')
        right = self._other_data(other)
        return self._compute(lambda: self._data + right)
    
    def subtract(self, other: DoubleMatrix | DoubleVector | float) -> DenseDoubleMatrix:
        """
        Subtract a scalar, a matrix of the same shape, or a vector of
        dimension row_count from every column.
        """
        if isinstance(other, Real):
            return self._compute(lambda: self._data - float(other))
        if isinstance(other, DoubleVector):
            right = self._broadcast_column(other, 'subtract')
        else:
            check_same_shape(self.shape, (other.row_count, other.column_count), 'subtract')
            right = self._other_data(other)
        return self._compute(lambda: self._data - right)
    
    def subtract_by(self, amount: float) -> DenseDoubleMatrix:
        """amount - self, element-wise."""
        return self._compute(lambda: float(amount) - self._data)
    
    def divide(self, other: DoubleMatrix | DoubleVector | float) -> DenseDoubleMatrix:
        """
        Divide by a scalar, by a matrix of the same shape, or every column
        by a vector of dimension row_count. IEEE-754 semantics.
        """
        if isinstance(other, Real):
            return self._compute(lambda: self._data / float(other))
        if isinstance(other, DoubleVector):
            right = self._broadcast_column(other, 'divide')
        else:
            check_same_shape(self.shape, (other.row_count, other.column_count), 'divide')
            right = self._other_data(other)
        return self._compute(lambda: self._data / right)
    
    def pow(self, x: float) -> DenseDoubleMatrix:
        if x == 2.0:
            return self._compute(lambda: self._data * self._data)
        return self._compute(lambda: np.power(self._data, x))
    
    # ------------------------------------------------------------------
    # Reductions and views
    # ------------------------------------------------------------------
    
    def _column(self, column: int, operation: str) -> NDArray[np.float64]:
        check_index(column, self._num_columns, 'column')
        if self._num_rows == 0:
            raise ValidationError(f"{operation}: matrix has no rows")
        offset = column * self._num_rows
        return self._data[offset:offset + self._num_rows]
    
    def max(self, column: int) -> float:
        """Largest value in a column."""
        return float(np.max(self._column(column, 'max')))
    
    def min(self, column: int) -> float:
        """Smallest value in a column."""
        return float(np.min(self._column(column, 'min')))
    
    def sum(self) -> float:
        return float(np.sum(self._data))
    
    def slice(
        self,
        row_start: int,
        row_end: int,
        col_start: int | None = None,
        col_end: int | None = None,
    ) -> DenseDoubleMatrix:
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
        block = self._view()[row_start:row_end, col_start:col_end]
        return DenseDoubleMatrix._wrap(_column_major(block), row_end - row_start, col_end - col_start)
    
    def row_indices(self) -> list[int]:
        return list(range(self._num_rows))
    
    def column_indices(self) -> list[int]:
        return list(range(self._num_columns))
    
    def to_array(self) -> NDArray[np.float64]:
        """2-D copy, indexable as array[row, col]."""
        return np.array(self._view(), order='C')
    
    def deep_copy(self) -> DenseDoubleMatrix:
        return DenseDoubleMatrix._wrap(self._data.copy(), *self.shape)
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseDoubleMatrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._data, other._data)
    
    __hash__ = None
    
    def __repr__(self) -> str:
        if self._num_rows * self._num_columns < 100:
            rows = "\n".join(str(row) for row in self._view().tolist())
            return f"DenseDoubleMatrix({self._num_rows}x{self._num_columns})\n{rows}"
        return f"DenseDoubleMatrix({self._num_rows}x{self._num_columns})"
