"""
Tolerance tiers for comparing multiply kernels.

Defines precision expectations for the two dense multiply paths:
- Naive FP64 (reference): straightforward accumulation in a fixed order
- Native FP64: BLAS may block and reorder the inner sums

Used by the test suite to assert that the kernel choice never changes a
product beyond floating-point rounding.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Naive loop: the reference accumulation order
NAIVE_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-12,
    name='naive_fp64',
    description='Naive triple loop, double precision',
)

# Native dgemm: blocked accumulation, rounding differs in the last bits
NATIVE_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-10,
    name='native_fp64',
    description='BLAS dgemm, double precision, reordered sums',
)


def select_tolerance(kernel_name: str) -> ToleranceTier:
    """Select the tolerance tier for a given kernel name."""
    if kernel_name == 'native':
        return NATIVE_FP64
    return NAIVE_FP64
