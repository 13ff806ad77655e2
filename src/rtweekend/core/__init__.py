"""Core rendering module.

Components:
    vec3: Vector type, vector math and random sampling helpers
    ray: Ray data structure
    interval: Ranges of acceptable ray parameters
    integrator: Path integration, render kernels and the render target
    progressive: Sample-pass accumulation with progress reporting

All compute-intensive operations use Taichi kernels.
"""

from .interval import (
    EMPTY_BOUNDS,
    UNIVERSE_BOUNDS,
    Interval,
    interval_clamp,
    interval_contains,
    interval_empty,
    interval_size,
    interval_surrounds,
    interval_universe,
    make_interval,
)
from .ray import Ray, make_ray, ray_at
from .vec3 import (
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    normalize,
    random_double,
    random_double_in_range,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_on_hemisphere,
    random_unit_vector,
    random_vec3,
    random_vec3_in_range,
    reflect,
    reflectance,
    refract,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import them directly:
#   from rtweekend.core.integrator import render
#   from rtweekend.core.progressive import ProgressiveRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "Interval",
    "make_interval",
    "interval_empty",
    "interval_universe",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "EMPTY_BOUNDS",
    "UNIVERSE_BOUNDS",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "reflectance",
    "near_zero",
    "random_double",
    "random_double_in_range",
    "random_vec3",
    "random_vec3_in_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_on_hemisphere",
    "random_in_unit_disk",
]
