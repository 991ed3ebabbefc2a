"""
Linear algebra kernels for PyLinear.

All functions follow these conventions:
    - Operands and results are flat column-major float64 buffers
    - The naive kernel is pure NumPy, the native kernel calls BLAS
    - Shape validation happens in the caller, before any kernel runs

Submodules:
    gemm: Dense matrix multiply (naive, native, sparse right operand)
"""

from pylinear.core.compute.linalg.gemm import (
    gemm_naive,
    gemm_native,
    gemm_sparse_right,
)

__all__ = [
    "gemm_naive",
    "gemm_native",
    "gemm_sparse_right",
]
