"""Metal (specular reflective) material implementation.

The incoming direction is mirrored about the normal, R = I - 2(I . N)N,
normalized, and then perturbed by fuzz * random_unit_vector(). A fuzz of 0
gives a perfect mirror; larger values blur the reflection.

If the perturbed direction points into the surface (dot(R, N) <= 0) the
scatter is refused: the ray is absorbed and its path contributes black.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_metal(albedo, fuzz, ray, rec)
"""

import taichi as ti
import taichi.math as tm

from rtweekend.core.ray import Ray
from rtweekend.core.vec3 import normalize, random_unit_vector, reflect, vec3
from rtweekend.geometry.sphere import HitRecord


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f64, ray_in: Ray, rec: HitRecord):
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: The reflection blur in [0, 1].
        ray_in: The incoming ray.
        rec: The hit record of the intersection.

    Returns:
        A tuple (did_scatter, attenuation, direction). did_scatter is 0 when
        the fuzzed reflection ends up below the surface.
    """
    reflected = normalize(reflect(ray_in.direction, rec.normal))
    reflected = reflected + fuzz * random_unit_vector()

    did_scatter = 1
    if tm.dot(reflected, rec.normal) <= 0.0:
        did_scatter = 0

    return did_scatter, albedo, reflected


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 1024

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f64, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials."""
    num_metal_materials[None] = 0


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzz: float = 0.0,
) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B) tuple.
        fuzz: The reflection blur in [0, 1]. Default is 0 (perfect mirror).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
        ValueError: If fuzz is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    if fuzz < 0.0 or fuzz > 1.0:
        raise ValueError(
            f"Fuzz = {fuzz} is outside [0, 1]. "
            "Fuzz must be between 0 (perfect mirror) and 1 (maximum blur)."
        )

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_albedos[idx] = [float(albedo[0]), float(albedo[1]), float(albedo[2])]
    metal_fuzzes[idx] = float(fuzz)
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f64:
    """Get the fuzz for a metal material by index."""
    return metal_fuzzes[material_idx]


@ti.func
def scatter_metal_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord):
    """Scatter off the metal material stored at material_idx."""
    return scatter_metal(
        get_metal_albedo(material_idx), get_metal_fuzz(material_idx), ray_in, rec
    )
