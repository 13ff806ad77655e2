"""Closed real intervals used as valid hit-distance ranges.

Intersection queries carry an Interval of acceptable ray parameters. Sphere
tests use the strict ``interval_surrounds`` check so the bounds themselves
are never reported as hits; the scene aggregate shrinks ``max`` as closer
hits are found.

The two named intervals are EMPTY (min=+inf, max=-inf), which contains
nothing, and UNIVERSE (min=-inf, max=+inf), which contains every finite
value.
"""

import math

import taichi as ti
import taichi.math as tm


@ti.dataclass
class Interval:
    """A range of real numbers.

    Attributes:
        min: Lower bound.
        max: Upper bound.
    """

    min: ti.f64
    max: ti.f64


# Python-side bounds of the named intervals
EMPTY_BOUNDS = (math.inf, -math.inf)
UNIVERSE_BOUNDS = (-math.inf, math.inf)


@ti.func
def make_interval(lo: ti.f64, hi: ti.f64) -> Interval:
    """Create an interval from its bounds."""
    return Interval(min=lo, max=hi)


@ti.func
def interval_empty() -> Interval:
    """The interval that contains nothing."""
    return Interval(min=tm.inf, max=-tm.inf)


@ti.func
def interval_universe() -> Interval:
    """The interval that contains every real number."""
    return Interval(min=-tm.inf, max=tm.inf)


@ti.func
def interval_size(iv: Interval) -> ti.f64:
    """Width of the interval (negative for EMPTY)."""
    return iv.max - iv.min


@ti.func
def interval_contains(iv: Interval, x: ti.f64) -> ti.i32:
    """Inclusive containment: min <= x <= max."""
    return iv.min <= x and x <= iv.max


@ti.func
def interval_surrounds(iv: Interval, x: ti.f64) -> ti.i32:
    """Exclusive containment: min < x < max."""
    return iv.min < x and x < iv.max


@ti.func
def interval_clamp(iv: Interval, x: ti.f64) -> ti.f64:
    """Saturate x to the interval bounds."""
    result = x
    if x < iv.min:
        result = iv.min
    elif x > iv.max:
        result = iv.max
    return result
