"""Ray data structure.

A ray is an origin plus a direction; every intersection test and every bounce
of the path integrator passes rays around. The direction is not required to
be unit length.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.core.ray import Ray, ray_at
    >>> from rtweekend.core.vec3 import vec3
    >>> # Inside a Taichi kernel:
    >>> # ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> # point = ray_at(ray, 5.0)
"""

import taichi as ti

from rtweekend.core.vec3 import vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel. Not normalized in general.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point origin + t * direction along the ray."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)
