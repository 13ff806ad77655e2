"""Unit tests for intervals.

Tests cover:
- contains (inclusive) versus surrounds (exclusive)
- clamp saturation
- EMPTY and UNIVERSE semantics
"""

import math

import taichi as ti


class TestInterval:
    """Tests for interval queries."""

    def test_contains_is_inclusive(self):
        """Test contains accepts both bounds."""
        from rtweekend.core.interval import interval_contains, make_interval

        result = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            iv = make_interval(1.0, 2.0)
            result[0] = interval_contains(iv, 1.0)
            result[1] = interval_contains(iv, 2.0)
            result[2] = interval_contains(iv, 1.5)
            result[3] = interval_contains(iv, 2.5)

        test_kernel()
        assert result[0] == 1
        assert result[1] == 1
        assert result[2] == 1
        assert result[3] == 0

    def test_surrounds_is_exclusive(self):
        """Test surrounds rejects both bounds."""
        from rtweekend.core.interval import interval_surrounds, make_interval

        result = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = make_interval(1.0, 2.0)
            result[0] = interval_surrounds(iv, 1.0)
            result[1] = interval_surrounds(iv, 2.0)
            result[2] = interval_surrounds(iv, 1.5)

        test_kernel()
        assert result[0] == 0
        assert result[1] == 0
        assert result[2] == 1

    def test_clamp_and_size(self):
        """Test clamp saturates and size is max - min."""
        from rtweekend.core.interval import interval_clamp, interval_size, make_interval

        result = ti.field(dtype=ti.f64, shape=4)

        @ti.kernel
        def test_kernel():
            iv = make_interval(0.0, 0.999)
            result[0] = interval_clamp(iv, -1.0)
            result[1] = interval_clamp(iv, 0.5)
            result[2] = interval_clamp(iv, 2.0)
            result[3] = interval_size(iv)

        test_kernel()
        assert result[0] == 0.0
        assert result[1] == 0.5
        assert result[2] == 0.999
        assert abs(result[3] - 0.999) < 1e-12

    def test_empty_and_universe(self):
        """Test EMPTY contains nothing and UNIVERSE contains everything finite."""
        from rtweekend.core.interval import (
            EMPTY_BOUNDS,
            UNIVERSE_BOUNDS,
            interval_contains,
            interval_empty,
            interval_size,
            interval_universe,
        )

        result = ti.field(dtype=ti.i32, shape=4)
        sizes = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            empty = interval_empty()
            universe = interval_universe()
            result[0] = interval_contains(empty, 0.0)
            result[1] = interval_contains(empty, 1e300)
            result[2] = interval_contains(universe, 0.0)
            result[3] = interval_contains(universe, -1e300)
            sizes[0] = interval_size(empty)
            sizes[1] = interval_size(universe)

        test_kernel()
        assert result[0] == 0
        assert result[1] == 0
        assert result[2] == 1
        assert result[3] == 1
        assert sizes[0] == -math.inf
        assert sizes[1] == math.inf
        assert EMPTY_BOUNDS == (math.inf, -math.inf)
        assert UNIVERSE_BOUNDS == (-math.inf, math.inf)
