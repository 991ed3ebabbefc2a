"""
Capability string constants for PyLinear.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from pylinear.core.capabilities import (
        CAPABILITY_SPARSE,
        CAPABILITY_ORDERED,
    )
    
    if vec.supports(CAPABILITY_ORDERED):
        first_index = next(vec.iterate_non_zero()).index
"""

# Storage holds only non-default entries; length may be < dimension
CAPABILITY_SPARSE = 'sparse'

# Non-zero iteration yields entries in ascending index order
CAPABILITY_ORDERED = 'ordered'

# Addition/subtraction with a same-kind operand runs as a linear merge
CAPABILITY_LINEAR_MERGE = 'linear_merge'

# set() is permitted
CAPABILITY_MUTABLE = 'mutable'

# Stored magnitudes are not retained (presence only, reads back as 1.0)
CAPABILITY_LOSSY = 'lossy'

# Vector carries a human readable name
CAPABILITY_NAMED = 'named'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_SPARSE,
    CAPABILITY_ORDERED,
    CAPABILITY_LINEAR_MERGE,
    CAPABILITY_MUTABLE,
    CAPABILITY_LOSSY,
    CAPABILITY_NAMED,
})

__all__ = [
    'CAPABILITY_SPARSE',
    'CAPABILITY_ORDERED',
    'CAPABILITY_LINEAR_MERGE',
    'CAPABILITY_MUTABLE',
    'CAPABILITY_LOSSY',
    'CAPABILITY_NAMED',
    'ALL_CAPABILITIES',
]
