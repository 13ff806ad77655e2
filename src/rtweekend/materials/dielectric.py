"""Dielectric (glass/water) material implementation.

Dielectrics either reflect or refract every incoming ray:
    - Snell's law gives the refracted direction.
    - When ratio * sin(theta) > 1 refraction is impossible (total internal
      reflection) and the ray reflects.
    - Otherwise the ray reflects with probability given by Schlick's
      approximation and refracts the rest of the time.

The ratio of refractive indices is 1/index when the ray enters the material
(front face) and index when it leaves. Glass absorbs nothing here, so the
attenuation is always white.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_dielectric(1.5, ray, rec)
"""

import taichi as ti
import taichi.math as tm

from rtweekend.core.ray import Ray
from rtweekend.core.vec3 import normalize, reflect, reflectance, refract, vec3
from rtweekend.geometry.sphere import HitRecord


@ti.func
def refraction_ratio(refraction_index: ti.f64, front_face: ti.i32) -> ti.f64:
    """Ratio of indices across the interface for the ray's side."""
    ri = refraction_index
    if front_face == 1:
        ri = 1.0 / refraction_index
    return ri


@ti.func
def cannot_refract(ri: ti.f64, unit_direction: vec3, normal: vec3) -> ti.i32:
    """Check for total internal reflection.

    Args:
        ri: Ratio of refractive indices (incident over transmitted).
        unit_direction: The normalized incoming direction.
        normal: The surface normal facing the incoming ray.

    Returns:
        1 if refraction is geometrically impossible, 0 otherwise.
    """
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = tm.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))
    result = 0
    if ri * sin_theta > 1.0:
        result = 1
    return result


@ti.func
def scatter_dielectric(refraction_index: ti.f64, ray_in: Ray, rec: HitRecord):
    """Reflect or refract a ray at a dielectric surface.

    Args:
        refraction_index: The material's index of refraction.
        ray_in: The incoming ray.
        rec: The hit record of the intersection.

    Returns:
        A tuple (did_scatter, attenuation, direction). did_scatter is always
        1 and attenuation is always (1, 1, 1).
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ri = refraction_ratio(refraction_index, rec.front_face)

    unit_direction = normalize(ray_in.direction)
    cos_theta = tm.min(tm.dot(-unit_direction, rec.normal), 1.0)

    must_reflect = cannot_refract(ri, unit_direction, rec.normal)
    if reflectance(cos_theta, ri) > ti.random(ti.f64):
        must_reflect = 1

    direction = vec3(0.0, 0.0, 0.0)
    if must_reflect == 1:
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ri)

    return 1, attenuation, direction


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

# Storage for dielectric material properties
dielectric_indices = ti.field(dtype=ti.f64, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(refraction_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Index of refraction. Default is 1.5 (glass).
            Values below 1.0 are allowed and model a less dense medium
            inside a denser one (e.g. an air bubble in water, 1.0 / 1.33).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If refraction_index is not positive.
    """
    if refraction_index <= 0.0:
        raise ValueError(
            f"Index of refraction = {refraction_index} must be positive."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[idx] = float(refraction_index)
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_index(material_idx: ti.i32) -> ti.f64:
    """Get the refraction index for a dielectric material by index."""
    return dielectric_indices[material_idx]


@ti.func
def scatter_dielectric_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord):
    """Scatter off the dielectric material stored at material_idx."""
    return scatter_dielectric(get_dielectric_index(material_idx), ray_in, rec)
