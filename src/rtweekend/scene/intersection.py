"""Scene aggregate: sphere storage and nearest-hit queries.

Spheres live in Taichi fields in insertion order (Structure of Arrays layout).
``intersect_scene`` scans all of them linearly, narrowing the accepted
interval to the closest hit found so far, so only the nearest intersection
along the ray is reported. When two spheres are hit at exactly the same t the
one inserted first wins, because the narrowed interval excludes its bound.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from rtweekend.core.interval import Interval, make_interval
from rtweekend.core.ray import Ray
from rtweekend.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the count to zero. Old field data is overwritten as new spheres
    are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point as (x, y, z).
        radius: The radius. Negative values are clamped to zero.
        material_id: The unified material ID shared by this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = max(0.0, float(radius))
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_sphere_radius(index: int) -> float:
    """Get the stored (clamped) radius of a sphere."""
    return float(sphere_radii[index])


@ti.func
def get_sphere(i: ti.i32) -> Sphere:
    """Load the i-th sphere from field storage."""
    return Sphere(
        center=sphere_centers[i],
        radius=sphere_radii[i],
        material_id=sphere_material_ids[i],
    )


@ti.func
def intersect_scene(ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the nearest sphere hit along a ray.

    Each sphere is tested against (ray_t.min, closest_so_far), so the
    accepted interval shrinks every time a closer hit is found.

    Args:
        ray: The ray to trace.
        ray_t: Acceptable ray parameters. Bounds are exclusive.

    Returns:
        The HitRecord of the closest intersection, or a miss record.
    """
    closest_so_far = ray_t.max
    result = make_miss_record()

    # A while loop keeps the scan serial even when inlined at kernel top level
    i = 0
    while i < num_spheres[None]:
        rec = hit_sphere(ray, get_sphere(i), make_interval(ray_t.min, closest_so_far))
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec
        i += 1

    return result

