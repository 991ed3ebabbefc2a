"""
PyLinear: dense and sparse linear-algebra primitives for Python.

Vectors and matrices over float64 elements in dense and sparse
representations behind one shared capability contract, with a dense
matrix multiply that dispatches to native BLAS for large operands.

Submodules:
    sparse: Ordered mapping, sparse vectors and the sparse row matrix
    dense: Dense vector, single-entry vector and the dense matrix
    core: Exceptions, validation, protocols and compute kernels
"""

__version__ = "0.1.0"

from pylinear.core.exceptions import (
    LinearAlgebraError,
    ValidationError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    ImmutableOperationError,
    ConcurrentModificationError,
)
from pylinear.core.compute.blas import MultiplyPolicy, multiply_policy
from pylinear.sparse import (
    OrderedIntDoubleMapping,
    SequentialSparseDoubleVector,
    SparseDoubleVector,
    SparseBitVector,
    SparseDoubleRowMatrix,
)
from pylinear.dense import (
    DenseDoubleVector,
    SingleEntryDoubleVector,
    DenseDoubleMatrix,
)
from pylinear.named import NamedDoubleVector
from pylinear.functions import running_average

__all__ = [
    "__version__",
    # Vectors
    "SequentialSparseDoubleVector",
    "SparseDoubleVector",
    "SparseBitVector",
    "DenseDoubleVector",
    "SingleEntryDoubleVector",
    "NamedDoubleVector",
    # Matrices
    "DenseDoubleMatrix",
    "SparseDoubleRowMatrix",
    # Storage
    "OrderedIntDoubleMapping",
    # Multiply dispatch
    "MultiplyPolicy",
    "multiply_policy",
    # Element functions
    "running_average",
    # Exceptions
    "LinearAlgebraError",
    "ValidationError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "ImmutableOperationError",
    "ConcurrentModificationError",
]
