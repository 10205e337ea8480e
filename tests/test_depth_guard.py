"""Tests for core/depth_guard.py.

Tests DepthGuard context manager and depth_clamp().
"""

from __future__ import annotations

import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from icuflow.constants import MAX_DEPTH
from icuflow.core.depth_guard import DepthGuard, DepthLimitExceededError, depth_clamp
from icuflow.diagnostics import DiagnosticCode, PatternSyntaxError

# ============================================================================
# Construction
# ============================================================================


class TestDepthGuardConstruction:
    """Test DepthGuard construction and defaults."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_DEPTH by default."""
        guard = DepthGuard()

        assert guard.max_depth == depth_clamp(MAX_DEPTH)
        assert guard.current_depth == 0

    def test_custom_max_depth(self) -> None:
        guard = DepthGuard(max_depth=5)

        assert guard.max_depth == 5

    def test_post_init_clamps_max_depth(self) -> None:
        """__post_init__ clamps max_depth against recursion limit."""
        limit = sys.getrecursionlimit()
        guard = DepthGuard(max_depth=limit + 1000)

        assert guard.max_depth < limit


# ============================================================================
# Context Manager
# ============================================================================


class TestDepthGuardContext:
    def test_enter_and_exit(self) -> None:
        guard = DepthGuard(max_depth=3)

        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
        assert guard.depth == 0

    def test_limit_exceeded(self) -> None:
        guard = DepthGuard(max_depth=1)

        with guard, pytest.raises(DepthLimitExceededError) as exc_info:
            guard.__enter__()

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.PATTERN_DEPTH_EXCEEDED

    def test_failed_enter_does_not_leak_depth(self) -> None:
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.depth == 1
        assert guard.depth == 0

    def test_exception_inside_releases_depth(self) -> None:
        guard = DepthGuard(max_depth=2)

        with pytest.raises(RuntimeError), guard:
            raise RuntimeError

        assert guard.depth == 0

    def test_is_pattern_syntax_error(self) -> None:
        assert issubclass(DepthLimitExceededError, PatternSyntaxError)


# ============================================================================
# depth_clamp
# ============================================================================


class TestDepthClamp:
    def test_small_values_unchanged(self) -> None:
        assert depth_clamp(10) == 10

    @given(st.integers(min_value=1, max_value=100_000))
    def test_never_exceeds_recursion_budget(self, requested: int) -> None:
        clamped = depth_clamp(requested)

        assert 1 <= clamped <= requested
        assert clamped * 4 <= sys.getrecursionlimit()
