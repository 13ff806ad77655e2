"""Scene construction on top of the sphere and material registries.

Spheres do not own their materials. Each material is registered once and
receives a material ID (see ``rtweekend.materials.material``); spheres store
that ID, so any number of spheres can share one material and a change to it
shows up on all of them.

SceneManager keeps a Python-side record of what it put into the Taichi
fields. The record answers queries without reading fields back and is what
gets written out when a scene is saved as a dictionary or a JSON file.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> glass = scene.add_dielectric_material(1.5)
    >>> scene.add_sphere((-1.0, 0.0, -1.0), 0.5, glass)
    >>> scene.add_sphere((-1.0, 0.0, -1.0), 0.4, glass)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from rtweekend.camera.camera import CameraConfig
from rtweekend.materials import dielectric, lambertian, metal
from rtweekend.materials.material import (
    MAX_MATERIALS,
    MaterialType,
    clear_material_tracking,
    get_material_count,
    register_material,
)
from rtweekend.scene import intersection

Vec3Tuple = tuple[float, float, float]


@dataclass
class MaterialInfo:
    """Record of one registered material.

    Attributes:
        material_id: ID that spheres use to reference the material.
        material_type: Which scatter model the material uses.
        type_index: Slot in that model's own registry.
        params: Keyword parameters the material was created with.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Record of one sphere.

    Attributes:
        sphere_index: Slot in the sphere fields.
        center: Sphere center.
        radius: Radius as stored, never negative.
        material_id: ID of the material the sphere is made of.
    """

    sphere_index: int
    center: Vec3Tuple
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """Plain-data form of a scene.

    Attributes:
        materials: One dict per material with a ``type`` key plus its
            parameters. A material's ID is its position in this list.
        spheres: One dict per sphere with ``center``, ``radius`` and
            ``material_id`` keys.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3(values: Any, default: Vec3Tuple) -> Vec3Tuple:
    if values is None:
        return default
    if isinstance(values, (str, bytes, dict)) or not hasattr(values, "__len__"):
        raise ValueError(f"Expected 3 components, got {values!r}")
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}: {values!r}")
    try:
        return (float(values[0]), float(values[1]), float(values[2]))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Expected 3 numbers, got {values!r}") from e


def _as_number(value: Any, name: str, kind: type = float) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _as_entries(values: Any, name: str) -> list[dict[str, Any]]:
    if not isinstance(values, list):
        raise ValueError(f"'{name}' must be a list, got {values!r}")
    for i, entry in enumerate(values):
        if not isinstance(entry, dict):
            raise ValueError(f"{name}[{i}] must be an object, got {entry!r}")
    return values


class SceneManager:
    """Builds the scene that kernels render.

    The sphere and material storage are module-level Taichi fields, so there
    is a single live scene. Constructing a SceneManager empties it.

    Attributes:
        materials: MaterialInfo for every material, indexed by material ID.
        spheres: SphereInfo for every sphere, in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
        >>> gold = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=1.0)
        >>> scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
        >>> scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)
    """

    def __init__(self) -> None:
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._reset_storage()

    def _reset_storage(self) -> None:
        intersection.clear_scene()
        lambertian.clear_lambertian_materials()
        metal.clear_metal_materials()
        dielectric.clear_dielectric_materials()
        clear_material_tracking()
        self.materials = []
        self.spheres = []

    def clear(self) -> None:
        """Remove every sphere and material."""
        self._reset_storage()
        logger.debug("Scene cleared")

    # =========================================================================
    # Materials
    # =========================================================================

    def _register(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        material_id = register_material(material_type, type_index)
        self.materials.append(MaterialInfo(material_id, material_type, type_index, params))
        logger.debug(
            "Material {} registered as {} #{}", material_id, material_type.name, type_index
        )
        return material_id

    def add_lambertian_material(self, albedo: Vec3Tuple) -> int:
        """Register a diffuse material.

        Returns:
            The new material ID.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If an albedo component lies outside [0, 1].
        """
        albedo = _as_vec3(albedo, (0.5, 0.5, 0.5))
        type_index = lambertian.add_lambertian_material(albedo)
        return self._register(MaterialType.LAMBERTIAN, type_index, {"albedo": albedo})

    def add_metal_material(self, albedo: Vec3Tuple, fuzz: float = 0.0) -> int:
        """Register a metal material.

        Args:
            albedo: Reflected color.
            fuzz: Radius of the perturbation added to mirror reflections;
                0 is a perfect mirror.

        Returns:
            The new material ID.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If an albedo component or the fuzz lies outside
                [0, 1].
        """
        albedo = _as_vec3(albedo, (0.8, 0.8, 0.8))
        fuzz = _as_number(fuzz, "fuzz")
        type_index = metal.add_metal_material(albedo, fuzz)
        return self._register(MaterialType.METAL, type_index, {"albedo": albedo, "fuzz": fuzz})

    def add_dielectric_material(self, refraction_index: float = 1.5) -> int:
        """Register a clear refractive material such as glass or water.

        Returns:
            The new material ID.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If refraction_index is not positive.
        """
        refraction_index = _as_number(refraction_index, "refraction_index")
        type_index = dielectric.add_dielectric_material(refraction_index)
        return self._register(
            MaterialType.DIELECTRIC, type_index, {"refraction_index": refraction_index}
        )

    def set_lambertian_albedo(self, material_id: int, albedo: Vec3Tuple) -> None:
        """Change the albedo of a diffuse material in place.

        Every sphere made of the material renders with the new albedo.

        Raises:
            ValueError: If material_id is not a Lambertian material or the
                albedo is outside [0, 1].
        """
        info = self.get_material_info(material_id)
        if info is None or info.material_type != MaterialType.LAMBERTIAN:
            raise ValueError(f"Material {material_id} is not a Lambertian material")
        albedo = _as_vec3(albedo, (0.5, 0.5, 0.5))
        lambertian.set_lambertian_albedo(info.type_index, albedo)
        info.params["albedo"] = albedo
        logger.debug("Material {} albedo set to {}", material_id, albedo)

    def get_material_count(self) -> int:
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Look up a material record, or None for an unknown ID."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType | None:
        """Material type of an ID, resolved in Python.

        Kernels use ``get_material_type`` instead.
        """
        info = self.get_material_info(material_id)
        return None if info is None else info.material_type

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(self, center: Vec3Tuple, radius: float, material_id: int) -> int:
        """Place a sphere made of an already registered material.

        A negative radius is stored as zero and such a sphere is never hit.

        Returns:
            The sphere's index.

        Raises:
            RuntimeError: If the sphere storage is full.
            ValueError: If material_id is not registered.
        """
        material_id = _as_number(material_id, "material_id", int)
        if not 0 <= material_id < get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

        center = _as_vec3(center, (0.0, 0.0, 0.0))
        radius = max(0.0, _as_number(radius, "radius"))
        sphere_index = intersection.add_sphere(center, radius, material_id)
        self.spheres.append(SphereInfo(sphere_index, center, radius, material_id))
        return sphere_index

    def add_lambertian_sphere(
        self, center: Vec3Tuple, radius: float, albedo: Vec3Tuple
    ) -> tuple[int, int]:
        """Place a sphere with its own new diffuse material.

        Returns:
            (sphere_index, material_id)
        """
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def add_metal_sphere(
        self, center: Vec3Tuple, radius: float, albedo: Vec3Tuple, fuzz: float = 0.0
    ) -> tuple[int, int]:
        """Place a sphere with its own new metal material.

        Returns:
            (sphere_index, material_id)
        """
        material_id = self.add_metal_material(albedo, fuzz)
        return self.add_sphere(center, radius, material_id), material_id

    def add_dielectric_sphere(
        self, center: Vec3Tuple, radius: float, refraction_index: float = 1.5
    ) -> tuple[int, int]:
        """Place a sphere with its own new dielectric material.

        Returns:
            (sphere_index, material_id)
        """
        material_id = self.add_dielectric_material(refraction_index)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        return intersection.get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Describe the scene as plain data."""
        materials = []
        for info in self.materials:
            entry: dict[str, Any] = {"type": info.material_type.name.lower()}
            for key, value in info.params.items():
                entry[key] = list(value) if isinstance(value, tuple) else value
            materials.append(entry)

        spheres = [
            {"center": list(s.center), "radius": s.radius, "material_id": s.material_id}
            for s in self.spheres
        ]
        return SceneConfig(materials=materials, spheres=spheres)

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene with the one described by config.

        Raises:
            ValueError: If an entry is not an object, a material type is
                unknown or a value is malformed or out of range.
        """
        materials = _as_entries(config.materials, "materials")
        spheres = _as_entries(config.spheres, "spheres")
        self.clear()

        for entry in materials:
            kind = str(entry.get("type", "")).lower()
            if kind == "lambertian":
                self.add_lambertian_material(_as_vec3(entry.get("albedo"), (0.5, 0.5, 0.5)))
            elif kind == "metal":
                self.add_metal_material(
                    _as_vec3(entry.get("albedo"), (0.8, 0.8, 0.8)), entry.get("fuzz", 0.0)
                )
            elif kind == "dielectric":
                self.add_dielectric_material(entry.get("refraction_index", 1.5))
            else:
                raise ValueError(f"Unknown material type: {kind}")

        for entry in spheres:
            self.add_sphere(
                _as_vec3(entry.get("center"), (0.0, 0.0, 0.0)),
                entry.get("radius", 1.0),
                entry.get("material_id", 0),
            )

        logger.debug(
            "Loaded scene with {} materials and {} spheres",
            len(self.materials),
            len(self.spheres),
        )

    def to_dict(self) -> dict[str, Any]:
        """Scene as a JSON-serializable dictionary."""
        config = self.to_config()
        return {"materials": config.materials, "spheres": config.spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene from a dictionary with 'materials' and 'spheres'.

        Other keys, such as 'camera', are ignored here.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scene data must be an object, got {type(data).__name__}")
        self.from_config(
            SceneConfig(
                materials=data.get("materials", []),
                spheres=data.get("spheres", []),
            )
        )

    def save_json(self, path: str | Path, camera: CameraConfig | None = None) -> None:
        """Write the scene, and optionally the camera, to a JSON file."""
        data = self.to_dict()
        if camera is not None:
            data["camera"] = camera.to_dict()
        Path(path).write_text(json.dumps(data, indent=2))

    def load_json(self, path: str | Path) -> CameraConfig:
        """Replace the scene from a JSON file written by save_json.

        Returns:
            The camera stored under the file's 'camera' key. Settings the
            file leaves out keep their CameraConfig defaults.

        Raises:
            ValueError: If the file is not valid JSON or describes an
                invalid scene or camera.
            OSError: If the file cannot be read.
        """
        data = json.loads(Path(path).read_text())
        self.from_dict(data)
        return CameraConfig.from_dict(data.get("camera", {}))

    # =========================================================================
    # Capacity
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        return intersection.MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS
