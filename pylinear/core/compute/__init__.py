"""
Shared compute infrastructure for PyLinear.

This module provides native BLAS detection, multiply-kernel selection and
the dense multiply kernels themselves.

Submodules:
    blas: BLAS detection, MultiplyPolicy and kernel selection
    tolerances: Tolerance tiers for comparing kernels
    linalg: Matrix multiply kernels
"""

from pylinear.core.compute.blas import (
    BlasInfo,
    MultiplyPolicy,
    detect_blas,
    get_default_policy,
    set_default_policy,
    multiply_policy,
    select_kernel,
)

__all__ = [
    "BlasInfo",
    "MultiplyPolicy",
    "detect_blas",
    "get_default_policy",
    "set_default_policy",
    "multiply_policy",
    "select_kernel",
]
