"""Materials module for surface scattering models.

Components:
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction (Schlick reflectance)
    material: Unified material IDs and scatter dispatch

Each material scatters an incoming ray into at most one outgoing ray and an
attenuation color. Parameters live in per-type Taichi fields; surfaces refer
to them through a unified material ID so materials are shared, not copied.
"""

from .dielectric import (
    add_dielectric_material,
    cannot_refract,
    clear_dielectric_materials,
    get_dielectric_index,
    get_dielectric_material_count,
    refraction_ratio,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
    set_lambertian_albedo,
)
from .material import (
    MAX_MATERIALS,
    MaterialType,
    ScatterRecord,
    clear_material_tracking,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
    scatter,
    scattered_ray,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Lambertian
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "set_lambertian_albedo",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    # Dielectric
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_index",
    "refraction_ratio",
    "cannot_refract",
    # Dispatch
    "MaterialType",
    "ScatterRecord",
    "MAX_MATERIALS",
    "scatter",
    "scattered_ray",
    "register_material",
    "clear_material_tracking",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
]
