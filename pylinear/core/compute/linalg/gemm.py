"""
Dense matrix-multiply kernels.

All kernels work on flat column-major float64 buffers, the storage layout
of DenseDoubleMatrix, and return a new flat column-major buffer:
    element (r, c) of an (m x p) result lives at offset r + c*m

    gemm_naive:        k-outer triple loop, no BLAS
    gemm_native:       BLAS dgemm via SciPy
    gemm_sparse_right: dense left operand times the stored entries of a
                       sparse right operand
"""

from __future__ import annotations

from typing import Iterable
import numpy as np
from numpy.typing import NDArray


def gemm_naive(
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    m: int,
    n: int,
    p: int,
) -> NDArray[np.float64]:
    """
    C = A x B with a plain triple loop.
    
    The loop order is k, then i, then j: A is read sequentially down each
    of its columns while C[i, :] accumulates A[i, k] * B[k, :]. The j loop
    is a numpy row update.
    
    Args:
        a: Left operand, column-major, length m*n
        b: Right operand, column-major, length n*p
        m: Rows of A
        n: Columns of A (= rows of B)
        p: Columns of B
        
    Returns:
        Column-major buffer of length m*p
    """
    A = a.reshape((m, n), order='F')
    B = b.reshape((n, p), order='F')
    C = np.zeros((m, p), dtype=np.float64, order='F')
    
    for k in range(n):
        b_row = B[k, :]
        for i in range(m):
            C[i, :] += A[i, k] * b_row
    
    return C.ravel(order='F')


def gemm_native(
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    m: int,
    n: int,
    p: int,
) -> NDArray[np.float64]:
    """
    C = A x B using BLAS dgemm (via SciPy).
    
    The buffers are handed to BLAS as Fortran-ordered views, so no
    transposition is needed.
    
    Args:
        a: Left operand, column-major, length m*n
        b: Right operand, column-major, length n*p
        m: Rows of A
        n: Columns of A (= rows of B)
        p: Columns of B
        
    Returns:
        Column-major buffer of length m*p
    """
    from scipy.linalg import blas
    
    if m == 0 or n == 0 or p == 0:
        return np.zeros(m * p, dtype=np.float64)
    
    A = np.asfortranarray(a.reshape((m, n), order='F'))
    B = np.asfortranarray(b.reshape((n, p), order='F'))
    C = blas.dgemm(alpha=1.0, a=A, b=B)
    
    return np.asarray(C, dtype=np.float64).ravel(order='F')


def gemm_sparse_right(
    a: NDArray[np.float64],
    entries: Iterable[tuple[int, int, float]],
    m: int,
    p: int,
) -> NDArray[np.float64]:
    """
    C = A x B where B is only known through its stored entries.
    
    Each stored B[k, j] = v contributes v * A[:, k] to column j of C, so
    the cost is proportional to m times the number of stored entries.
    
    Args:
        a: Left operand, column-major, m rows
        entries: (k, j, value) triples of the right operand's stored entries
        m: Rows of A
        p: Columns of B
        
    Returns:
        Column-major buffer of length m*p
    """
    c = np.zeros(m * p, dtype=np.float64)
    for k, j, value in entries:
        c[j * m:(j + 1) * m] += a[k * m:(k + 1) * m] * value
    return c
