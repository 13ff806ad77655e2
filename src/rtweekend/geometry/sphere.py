"""Sphere primitive and the hit record produced by intersection tests.

The ray-sphere intersection solves

    |O + t*D - C|^2 = r^2

which expands to the quadratic a*t^2 - 2*h*t + c = 0 with

    oc = C - O
    a  = dot(D, D)
    h  = dot(D, oc)          (half of the traditional b)
    c  = dot(oc, oc) - r^2

and discriminant h^2 - a*c. The smaller root (h - sqrt(d)) / a is tried
first, then the larger one; a root counts only if it lies strictly inside the
query interval.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.geometry.sphere import hit_sphere, make_sphere
    >>> # Use within a Taichi kernel:
    >>> # rec = hit_sphere(ray, make_sphere(center, 0.5, material_id), interval)
"""

import taichi as ti
import taichi.math as tm

from rtweekend.core.interval import Interval, interval_surrounds
from rtweekend.core.ray import Ray, ray_at
from rtweekend.core.vec3 import vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius, never negative.
        material_id: Unified ID of the material shared by this sphere.
    """

    center: vec3
    radius: ti.f64
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected the surface, 0 on a miss. The other
            fields are only meaningful when hit == 1.
        t: Ray parameter of the intersection.
        p: The intersection point.
        normal: Unit surface normal, always facing against the incoming ray.
        front_face: 1 if the ray arrived from the outward side, 0 if it
            arrived from inside.
        material_id: Unified ID of the material at the hit point.
    """

    hit: ti.i32
    t: ti.f64
    p: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_sphere(center: vec3, radius: ti.f64, material_id: ti.i32) -> Sphere:
    """Create a sphere, clamping a negative radius to zero."""
    return Sphere(center=center, radius=tm.max(radius, 0.0), material_id=material_id)


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        p=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (front_face, normal). front_face is 1 when the ray
        approaches from outside, in which case the normal is returned as-is;
        otherwise the normal is negated.
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray_direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return front_face, normal


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test against.
        ray_t: Acceptable ray parameters. Bounds are exclusive.

    Returns:
        A HitRecord for the nearest root inside ray_t. Check the hit field
        to determine whether an intersection occurred. Spheres of radius zero
        never report a hit.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration
    result = make_miss_record()

    if discriminant >= 0.0 and sphere.radius > 0.0:
        sqrtd = tm.sqrt(discriminant)

        # Find the nearest root that lies in the acceptable range
        root = (h - sqrtd) / a
        valid = interval_surrounds(ray_t, root)
        if not valid:
            root = (h + sqrtd) / a
            valid = interval_surrounds(ray_t, root)

        if valid:
            p = ray_at(ray, root)
            outward_normal = (p - sphere.center) / sphere.radius
            front_face, normal = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                p=p,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result
