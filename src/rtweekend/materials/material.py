"""Material registry and scatter dispatch.

Every material in a scene gets a unified material ID. The ID maps to a
(material type, type-local index) pair so the path tracer can dispatch to the
right scattering function and look up its parameters in the type-specific
field storage. Surfaces store only the ID, so any number of surfaces can share
one material and all of them see an update to it.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.materials.material import scatter
    >>> # Use within a Taichi kernel:
    >>> # srec = scatter(ray, rec)
    >>> # if srec.did_scatter == 1: ...
"""

from enum import IntEnum

import taichi as ti

from rtweekend.core.ray import Ray, make_ray
from rtweekend.core.vec3 import vec3
from rtweekend.geometry.sphere import HitRecord
from rtweekend.materials.dielectric import scatter_dielectric_by_id
from rtweekend.materials.lambertian import scatter_lambertian_by_id
from rtweekend.materials.metal import scatter_metal_by_id


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = 3072  # 1024 per type * 3 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g. if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


@ti.dataclass
class ScatterRecord:
    """Outcome of a material scattering an incoming ray.

    Attributes:
        did_scatter: 1 if the ray continues, 0 if it was absorbed.
        attenuation: Color the path's throughput is multiplied by.
        origin: Origin of the scattered ray (the hit point).
        direction: Direction of the scattered ray.
    """

    did_scatter: ti.i32
    attenuation: vec3
    origin: vec3
    direction: vec3


def clear_material_tracking() -> None:
    """Forget every unified material ID."""
    num_materials[None] = 0


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign the next unified material ID to a type-local material.

    Args:
        material_type: The kind of material.
        type_index: Index of the material in its type-specific registry.

    Returns:
        The new unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Returns:
        The material type as an integer (see MaterialType), or -1 for an
        invalid ID.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the index into the type-specific registry for a material ID.

    Returns:
        The type-local index, or -1 for an invalid ID.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def scatter(ray_in: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray with the material referenced by a hit record.

    Args:
        ray_in: The incoming ray.
        rec: The hit record; rec.material_id selects the material.

    Returns:
        A ScatterRecord. An unknown material ID absorbs the ray.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    direction = vec3(0.0, 0.0, 0.0)

    if mat_type == int(MaterialType.LAMBERTIAN):
        did_scatter, attenuation, direction = scatter_lambertian_by_id(type_index, rec)
    elif mat_type == int(MaterialType.METAL):
        did_scatter, attenuation, direction = scatter_metal_by_id(type_index, ray_in, rec)
    elif mat_type == int(MaterialType.DIELECTRIC):
        did_scatter, attenuation, direction = scatter_dielectric_by_id(
            type_index, ray_in, rec
        )

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=attenuation,
        origin=rec.p,
        direction=direction,
    )


@ti.func
def scattered_ray(srec: ScatterRecord) -> Ray:
    """The outgoing ray described by a ScatterRecord."""
    return make_ray(srec.origin, srec.direction)
