"""
Native BLAS detection and multiply kernel selection.

Provides a unified interface for detecting whether a native dense
matrix-multiply kernel (BLAS dgemm via SciPy) can be used in this process,
and for deciding per call whether the naive loop or the native kernel runs.

The probe runs once per process and is cached; it never raises. Any
failure during detection resolves to "unavailable", which permanently
selects the naive path.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Literal
import logging
import warnings

import numpy as np


logger = logging.getLogger(__name__)

KernelName = Literal['naive', 'native']
KernelPreference = Literal['auto', 'naive', 'native']

# Both A.rows and A.cols must exceed this before the native kernel pays off
DEFAULT_NATIVE_THRESHOLD: int = 100


@dataclass(frozen=True)
class BlasInfo:
    """
    Information about the native BLAS backend.
    
    Attributes:
        routine: Name of the resolved routine (e.g. 'dgemm')
        module: SciPy wrapper module exposing the routine
        library: Name of the BLAS library NumPy was built against, if known
    """
    routine: str
    module: str
    library: str
    
    def __str__(self) -> str:
        return f"BLAS {self.routine} ({self.library} via {self.module})"


@dataclass(frozen=True)
class MultiplyPolicy:
    """
    Immutable configuration of the dense multiply dispatcher.
    
    Attributes:
        threshold: A.rows and A.cols must both exceed this for the native
                   kernel to be chosen under prefer='auto'
        prefer: Kernel preference
            - 'auto': native when available and above threshold, else naive
            - 'naive': always the triple loop
            - 'native': native whenever available, regardless of size
    """
    threshold: int = DEFAULT_NATIVE_THRESHOLD
    prefer: KernelPreference = 'auto'
    
    def __post_init__(self):
        if self.prefer not in ('auto', 'naive', 'native'):
            raise ValueError(
                f"prefer must be 'auto', 'naive' or 'native', got {self.prefer!r}"
            )
        if self.threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {self.threshold}")


def _blas_library_name() -> str:
    """Best-effort name of the BLAS library NumPy links against."""
    try:
        config = np.show_config(mode='dicts')
        return str(config['Build Dependencies']['blas']['name'])
    except Exception:
        return 'unknown'


@lru_cache(maxsize=None)
def detect_blas() -> BlasInfo | None:
    """
    Detect the native BLAS dgemm kernel, if any.
    
    Returns:
        BlasInfo when a working dgemm is importable, otherwise None.
        
    Note:
        SciPy is imported lazily. The result is cached for the process
        lifetime; call detect_blas.cache_clear() to probe again.
    """
    try:
        from scipy.linalg import blas
        
        gemm = blas.get_blas_funcs('gemm', dtype=np.float64)
        # smoke test on a 1x1 product
        probe = gemm(1.0, np.ones((1, 1), order='F'), np.full((1, 1), 2.0, order='F'))
        if float(probe[0, 0]) != 2.0:
            logger.debug("BLAS probe returned %r, treating as unavailable", probe)
            return None
    except Exception as e:
        logger.debug("Native BLAS unavailable: %s", e)
        return None
    
    info = BlasInfo(
        routine=f"{getattr(gemm, 'typecode', 'd')}gemm",
        module=getattr(gemm, 'module_name', 'scipy.linalg.blas'),
        library=_blas_library_name(),
    )
    logger.debug("Native BLAS detected: %s", info)
    return info


_default_policy = MultiplyPolicy()


def get_default_policy() -> MultiplyPolicy:
    """Return the process-wide default multiply policy."""
    return _default_policy


def set_default_policy(policy: MultiplyPolicy) -> MultiplyPolicy:
    """
    Install a new process-wide default multiply policy.
    
    Returns:
        The previously installed policy
    """
    global _default_policy
    previous = _default_policy
    _default_policy = policy
    return previous


@contextmanager
def multiply_policy(
    prefer: KernelPreference = 'auto',
    threshold: int = DEFAULT_NATIVE_THRESHOLD,
) -> Iterator[MultiplyPolicy]:
    """
    Context manager that installs a default policy for its duration.
    
    Usage:
        with multiply_policy(prefer='naive'):
            c = a.multiply(b)
    """
    policy = MultiplyPolicy(threshold=threshold, prefer=prefer)
    previous = set_default_policy(policy)
    try:
        yield policy
    finally:
        set_default_policy(previous)


def select_kernel(
    rows: int,
    cols: int,
    other_is_sparse: bool,
    policy: MultiplyPolicy | None = None,
) -> KernelName:
    """
    Choose the multiply kernel for a (rows x cols) left operand.
    
    Args:
        rows: Row count of the left operand
        cols: Column count of the left operand
        other_is_sparse: True if the right operand is a sparse representation
        policy: Policy to apply; the process default when None
        
    Returns:
        'native' or 'naive'
    """
    if policy is None:
        policy = _default_policy
    
    if policy.prefer == 'naive' or other_is_sparse:
        return 'naive'
    
    blas = detect_blas()
    
    if policy.prefer == 'native':
        if blas is None:
            warnings.warn(
                "Native BLAS not available, using naive multiply",
                RuntimeWarning,
                stacklevel=3,
            )
            return 'naive'
        return 'native'
    
    # auto: native only above the size threshold
    if blas is not None and rows > policy.threshold and cols > policy.threshold:
        return 'native'
    return 'naive'
