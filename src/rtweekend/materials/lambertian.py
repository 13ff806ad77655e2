"""Lambertian (ideal diffuse) material implementation.

Diffuse scattering picks the direction normal + random_unit_vector(), which
distributes outgoing rays proportionally to cos(theta) about the normal. If
the random vector nearly cancels the normal the bare normal is used instead,
so the scattered ray never has a degenerate direction.

A Lambertian surface always scatters and its attenuation is its albedo.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_lambertian(albedo, rec)
"""

import taichi as ti

from rtweekend.core.vec3 import near_zero, random_unit_vector, vec3
from rtweekend.geometry.sphere import HitRecord


@ti.func
def scatter_lambertian(albedo: vec3, rec: HitRecord):
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color.
        rec: The hit record of the intersection.

    Returns:
        A tuple (did_scatter, attenuation, direction) where did_scatter is
        always 1, attenuation equals albedo and direction is the scattered
        ray direction leaving the hit point.
    """
    scatter_direction = rec.normal + random_unit_vector()

    # Catch degenerate scatter direction
    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return 1, albedo, scatter_direction


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 1024

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def _validate_albedo(albedo: tuple[float, float, float]) -> None:
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    _validate_albedo(albedo)

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = [float(albedo[0]), float(albedo[1]), float(albedo[2])]
    num_lambertian_materials[None] = idx + 1
    return idx


def set_lambertian_albedo(index: int, albedo: tuple[float, float, float]) -> None:
    """Replace the albedo of an existing Lambertian material.

    Every surface sharing the material sees the new value on its next hit.

    Raises:
        IndexError: If index does not name a registered material.
        ValueError: If any albedo component is outside [0, 1].
    """
    if not 0 <= index < num_lambertian_materials[None]:
        raise IndexError(f"No Lambertian material at index {index}")
    _validate_albedo(albedo)
    lambertian_albedos[index] = [float(albedo[0]), float(albedo[1]), float(albedo[2])]


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, rec: HitRecord):
    """Scatter off the Lambertian material stored at material_idx."""
    return scatter_lambertian(get_lambertian_albedo(material_idx), rec)
