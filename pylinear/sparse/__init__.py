"""
Sparse storage and sparse representations.

    mapping: OrderedIntDoubleMapping, the sorted parallel-array map
    sequential: SequentialSparseDoubleVector (ordered arrays)
    hashed: SparseDoubleVector (dict)
    bit: SparseBitVector (presence only, lossy)
    row_matrix: SparseDoubleRowMatrix (map of sparse rows)
"""

from pylinear.sparse.mapping import OrderedIntDoubleMapping
from pylinear.sparse.sequential import SequentialSparseDoubleVector
from pylinear.sparse.hashed import SparseDoubleVector
from pylinear.sparse.bit import SparseBitVector
from pylinear.sparse.row_matrix import SparseDoubleRowMatrix

__all__ = [
    "OrderedIntDoubleMapping",
    "SequentialSparseDoubleVector",
    "SparseDoubleVector",
    "SparseBitVector",
    "SparseDoubleRowMatrix",
]
