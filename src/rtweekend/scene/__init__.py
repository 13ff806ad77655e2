"""Scene module for scene storage, management and presets.

Components:
    intersection: Sphere storage in Taichi fields and nearest-hit queries
    manager: Scene manager assigning shared material IDs, with serialization
    presets: Demo scenes paired with camera configurations

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for sphere data
    - Spheres reference materials through unified integer IDs
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    get_sphere_radius,
    intersect_scene,
)
from .manager import (
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)
from .presets import (
    SCENES,
    create_scene,
    random_spheres_scene,
    three_spheres_scene,
)

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "get_sphere_radius",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    # Presets
    "SCENES",
    "create_scene",
    "three_spheres_scene",
    "random_spheres_scene",
]
