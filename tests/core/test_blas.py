"""
Tests for BLAS detection, MultiplyPolicy and kernel selection.
"""

import logging
import warnings

import pytest

from pylinear.core.compute import blas
from pylinear.core.compute.blas import (
    DEFAULT_NATIVE_THRESHOLD,
    BlasInfo,
    MultiplyPolicy,
    detect_blas,
    get_default_policy,
    multiply_policy,
    select_kernel,
    set_default_policy,
)


FAKE_BLAS = BlasInfo(routine='dgemm', module='fake', library='fake')


@pytest.fixture
def with_blas(monkeypatch):
    monkeypatch.setattr(blas, 'detect_blas', lambda: FAKE_BLAS)


@pytest.fixture
def without_blas(monkeypatch):
    monkeypatch.setattr(blas, 'detect_blas', lambda: None)


# ═══════════════════════════════════════════════════════════════════════
# Detection
# ═══════════════════════════════════════════════════════════════════════


class TestDetectBlas:

    def test_never_raises(self):
        info = detect_blas()
        assert info is None or isinstance(info, BlasInfo)

    def test_cached(self):
        assert detect_blas() is detect_blas()

    def test_scipy_present_resolves_dgemm(self):
        pytest.importorskip("scipy.linalg.blas")
        detect_blas.cache_clear()
        info = detect_blas()
        assert info is not None
        assert info.routine == 'dgemm'

    def test_logs_outcome(self, caplog):
        detect_blas.cache_clear()
        with caplog.at_level(logging.DEBUG, logger='pylinear.core.compute.blas'):
            detect_blas()
        assert any('BLAS' in record.getMessage() for record in caplog.records)

    def test_str(self):
        assert str(FAKE_BLAS) == "BLAS dgemm (fake via fake)"


# ═══════════════════════════════════════════════════════════════════════
# Policy
# ═══════════════════════════════════════════════════════════════════════


class TestMultiplyPolicy:

    def test_defaults(self):
        policy = MultiplyPolicy()
        assert policy.threshold == DEFAULT_NATIVE_THRESHOLD == 100
        assert policy.prefer == 'auto'

    def test_frozen(self):
        policy = MultiplyPolicy()
        with pytest.raises(AttributeError):
            policy.threshold = 5

    def test_rejects_unknown_preference(self):
        with pytest.raises(ValueError, match="prefer"):
            MultiplyPolicy(prefer='gpu')

    def test_rejects_negative_threshold(self):
        with pytest.raises(ValueError, match="threshold"):
            MultiplyPolicy(threshold=-1)

    def test_set_default_returns_previous(self):
        naive = MultiplyPolicy(prefer='naive')
        previous = set_default_policy(naive)
        try:
            assert get_default_policy() is naive
        finally:
            set_default_policy(previous)
        assert get_default_policy() is previous

    def test_context_manager_restores(self):
        before = get_default_policy()
        with multiply_policy(prefer='naive', threshold=5) as policy:
            assert get_default_policy() is policy
            assert policy.threshold == 5
        assert get_default_policy() is before

    def test_context_manager_restores_on_error(self):
        before = get_default_policy()
        with pytest.raises(RuntimeError):
            with multiply_policy(prefer='naive'):
                raise RuntimeError("boom")
        assert get_default_policy() is before


# ═══════════════════════════════════════════════════════════════════════
# Kernel selection
# ═══════════════════════════════════════════════════════════════════════


class TestSelectKernel:

    def test_auto_above_threshold(self, with_blas):
        assert select_kernel(101, 101, False) == 'native'

    @pytest.mark.parametrize("rows,cols", [(100, 101), (101, 100), (50, 50)])
    def test_auto_needs_both_dimensions_above(self, with_blas, rows, cols):
        assert select_kernel(rows, cols, False) == 'naive'

    def test_sparse_operand_is_naive(self, with_blas):
        assert select_kernel(500, 500, True) == 'naive'

    def test_no_blas_is_naive(self, without_blas):
        assert select_kernel(500, 500, False) == 'naive'

    def test_custom_threshold(self, with_blas):
        policy = MultiplyPolicy(threshold=10)
        assert select_kernel(11, 11, False, policy) == 'native'
        assert select_kernel(10, 11, False, policy) == 'naive'

    def test_prefer_naive(self, with_blas):
        assert select_kernel(500, 500, False, MultiplyPolicy(prefer='naive')) == 'naive'

    def test_prefer_native_ignores_size(self, with_blas):
        assert select_kernel(2, 2, False, MultiplyPolicy(prefer='native')) == 'native'

    def test_prefer_native_without_blas_warns(self, without_blas):
        with pytest.warns(RuntimeWarning, match="Native BLAS not available"):
            kernel = select_kernel(2, 2, False, MultiplyPolicy(prefer='native'))
        assert kernel == 'naive'

    def test_auto_without_blas_is_silent(self, without_blas):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert select_kernel(500, 500, False) == 'naive'

    def test_uses_process_default(self, with_blas):
        with multiply_policy(prefer='naive'):
            assert select_kernel(500, 500, False) == 'naive'
