"""Ready-made demo scenes.

Each factory clears the scene storage, populates it through a SceneManager and
returns the manager together with a CameraConfig that frames the scene.

Scenes:
    three_spheres: A diffuse, a hollow glass and a fuzzy metal sphere resting
        on a large ground sphere.
    final: The random-spheres cover scene. A grid of small spheres with
        randomly chosen materials surrounds three large spheres.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.scene.presets import create_scene
    >>> scene, camera = create_scene("three-spheres")
"""

from collections.abc import Callable

import numpy as np
from loguru import logger

from rtweekend.camera.camera import CameraConfig
from rtweekend.scene.manager import SceneManager

# =============================================================================
# Three Spheres Scene
# =============================================================================

GROUND_ALBEDO = (0.8, 0.8, 0.0)
CENTER_ALBEDO = (0.1, 0.2, 0.5)
GLASS_INDEX = 1.5
RIGHT_METAL_ALBEDO = (0.8, 0.6, 0.2)
RIGHT_METAL_FUZZ = 1.0


def three_spheres_scene() -> tuple[SceneManager, CameraConfig]:
    """Create the three spheres scene.

    The left sphere is a glass shell: an outer sphere of index 1.5 around an
    inner air bubble of index 1/1.5.

    Returns:
        Tuple of (scene, camera_config).
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    center = scene.add_lambertian_material(CENTER_ALBEDO)
    left = scene.add_dielectric_material(GLASS_INDEX)
    bubble = scene.add_dielectric_material(1.0 / GLASS_INDEX)
    right = scene.add_metal_material(RIGHT_METAL_ALBEDO, RIGHT_METAL_FUZZ)

    scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.2), 0.5, center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, left)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.4, bubble)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, right)

    camera = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=400,
        samples_per_pixel=100,
        max_depth=50,
        vfov=20.0,
        lookfrom=(-2.0, 2.0, 1.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=10.0,
        focus_dist=3.4,
    )

    logger.debug("Created three spheres scene ({} spheres)", scene.get_sphere_count())
    return scene, camera


# =============================================================================
# Final (Random Spheres) Scene
# =============================================================================

# Small spheres are placed on a GRID_RANGE x GRID_RANGE grid of unit cells
GRID_RANGE = range(-11, 11)
SMALL_RADIUS = 0.2
# Small spheres too close to this point would intersect the large glass sphere
CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])
CLEARANCE = 0.9

# Cumulative probabilities of the small sphere materials
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95


def random_spheres_scene(seed: int | None = 0) -> tuple[SceneManager, CameraConfig]:
    """Create the random spheres scene.

    Args:
        seed: Seed for the NumPy generator placing the small spheres. None
            draws a fresh layout every call.

    Returns:
        Tuple of (scene, camera_config).
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    scene.add_lambertian_sphere((0.0, -1000.0, 0.0), 1000.0, (0.5, 0.5, 0.5))

    # Glass is shared by every small glass sphere and the large one
    glass = scene.add_dielectric_material(GLASS_INDEX)

    for a in GRID_RANGE:
        for b in GRID_RANGE:
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()])

            if np.linalg.norm(center - CLEARANCE_POINT) <= CLEARANCE:
                continue

            center_tuple = (float(center[0]), float(center[1]), float(center[2]))
            if choose_mat < DIFFUSE_PROBABILITY:
                albedo = rng.random(3) * rng.random(3)
                scene.add_lambertian_sphere(center_tuple, SMALL_RADIUS, tuple(albedo.tolist()))
            elif choose_mat < METAL_PROBABILITY:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = float(rng.uniform(0.0, 0.5))
                scene.add_metal_sphere(center_tuple, SMALL_RADIUS, tuple(albedo.tolist()), fuzz)
            else:
                scene.add_sphere(center_tuple, SMALL_RADIUS, glass)

    scene.add_sphere((0.0, 1.0, 0.0), 1.0, glass)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, (0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, (0.7, 0.6, 0.5), 0.0)

    camera = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=1200,
        samples_per_pixel=500,
        max_depth=50,
        vfov=20.0,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=0.6,
        focus_dist=10.0,
    )

    logger.debug(
        "Created random spheres scene ({} spheres, {} materials)",
        scene.get_sphere_count(),
        scene.get_material_count(),
    )
    return scene, camera


SCENES: dict[str, Callable[[], tuple[SceneManager, CameraConfig]]] = {
    "three-spheres": three_spheres_scene,
    "final": random_spheres_scene,
}


def create_scene(name: str) -> tuple[SceneManager, CameraConfig]:
    """Create a preset scene by name.

    Raises:
        ValueError: If name is not one of SCENES.
    """
    if name not in SCENES:
        raise ValueError(f"Unknown scene {name!r}. Choose from {sorted(SCENES)}")
    return SCENES[name]()
