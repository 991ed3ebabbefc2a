"""
Dense representations.

    vector: DenseDoubleVector (numpy array)
    single: SingleEntryDoubleVector (immutable, dimension one)
    matrix: DenseDoubleMatrix (column-major) and the multiply dispatcher
"""

from pylinear.dense.vector import DenseDoubleVector
from pylinear.dense.single import SingleEntryDoubleVector
from pylinear.dense.matrix import DenseDoubleMatrix

__all__ = [
    "DenseDoubleVector",
    "SingleEntryDoubleVector",
    "DenseDoubleMatrix",
]
