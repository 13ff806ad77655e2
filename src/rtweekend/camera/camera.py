"""Positionable thin-lens camera for primary ray generation.

This module implements the camera that generates primary rays for rendering.
The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view
- Arbitrary aspect ratios
- Jittered sampling within each pixel for anti-aliasing
- Depth of field through a defocus disk of configurable angle

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport lies on the focus plane, ``focus_dist`` in front of the camera.
Pixel (0, 0) is the top-left corner of the image: ``pixel_delta_v`` points
down the viewport.

Geometry is derived in Python with NumPy and copied into Taichi fields, which
``get_ray`` reads inside kernels.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.camera.camera import CameraConfig, setup_camera, get_ray
    >>>
    >>> config = CameraConfig(image_width=400, vfov=20.0, lookfrom=(13.0, 2.0, 3.0))
    >>> geometry = setup_camera(config)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0)  # Ray through the top-left pixel
"""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

import numpy as np
import taichi as ti
from loguru import logger

from rtweekend.core.ray import Ray, make_ray
from rtweekend.core.vec3 import random_in_unit_disk, vec3

_VECTOR_FIELDS = ("lookfrom", "lookat", "vup")
_INT_FIELDS = ("image_width", "samples_per_pixel", "max_depth")

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class CameraConfig:
    """Configuration for the camera and its sampling.

    Attributes:
        aspect_ratio: Ratio of image width over height.
        image_width: Rendered image width in pixels.
        samples_per_pixel: Number of random samples averaged per pixel.
        max_depth: Maximum number of ray bounces into the scene.
        vfov: Vertical field of view in degrees.
        lookfrom: Camera position in world space.
        lookat: Point the camera is looking at.
        vup: Camera-relative "up" direction.
        defocus_angle: Variation angle of rays through each pixel, in degrees.
            0 disables depth of field.
        focus_dist: Distance from the camera to the plane of perfect focus.
    """

    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 50
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    @property
    def image_height(self) -> int:
        """Image height derived from width and aspect ratio, at least 1."""
        return max(1, int(self.image_width / self.aspect_ratio))

    def validate(self) -> None:
        """Check the configuration for values that cannot produce an image.

        Raises:
            ValueError: If any setting is out of range or the view basis is
                degenerate.
        """
        if self.image_width < 1:
            raise ValueError(f"image_width = {self.image_width} must be at least 1")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {self.aspect_ratio} must be positive")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel = {self.samples_per_pixel} must be at least 1"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth = {self.max_depth} must not be negative")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov = {self.vfov} must be in (0, 180) degrees")
        if self.defocus_angle < 0.0:
            raise ValueError(f"defocus_angle = {self.defocus_angle} must not be negative")
        if self.focus_dist <= 0.0:
            raise ValueError(f"focus_dist = {self.focus_dist} must be positive")

        view = np.subtract(self.lookfrom, self.lookat, dtype=np.float64)
        if np.linalg.norm(view) == 0.0:
            raise ValueError("lookfrom and lookat must be different points")
        if np.linalg.norm(np.cross(np.asarray(self.vup, dtype=np.float64), view)) == 0.0:
            raise ValueError("vup must not be parallel to the view direction")

    def to_dict(self) -> dict[str, Any]:
        """Settings as a JSON-serializable dictionary."""
        data = asdict(self)
        for name in _VECTOR_FIELDS:
            data[name] = list(data[name])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CameraConfig":
        """Build a configuration from a dictionary such as to_dict returns.

        Missing keys keep their defaults. Values are converted but not
        range-checked; call validate() for that.

        Raises:
            ValueError: If data is not a dictionary, has an unknown key or
                holds a value of the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Camera settings must be an object, got {data!r}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown camera settings: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            try:
                if name in _VECTOR_FIELDS:
                    if isinstance(value, (str, dict)) or len(value) != 3:
                        raise ValueError
                    kwargs[name] = (float(value[0]), float(value[1]), float(value[2]))
                elif name in _INT_FIELDS:
                    if isinstance(value, bool) or int(value) != value:
                        raise ValueError
                    kwargs[name] = int(value)
                else:
                    if isinstance(value, bool):
                        raise ValueError
                    kwargs[name] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid camera setting {name} = {value!r}") from e
        return cls(**kwargs)


@dataclass
class CameraGeometry:
    """Projection geometry derived from a CameraConfig.

    All vectors are float64 NumPy arrays of shape (3,).
    """

    image_width: int
    image_height: int
    samples_per_pixel: int
    pixel_samples_scale: float
    center: np.ndarray
    pixel00_loc: np.ndarray
    pixel_delta_u: np.ndarray
    pixel_delta_v: np.ndarray
    u: np.ndarray
    v: np.ndarray
    w: np.ndarray
    defocus_angle: float
    defocus_disk_u: np.ndarray
    defocus_disk_v: np.ndarray


def compute_camera_geometry(config: CameraConfig) -> CameraGeometry:
    """Derive the projection geometry for a camera configuration.

    Args:
        config: A camera configuration. It is validated first.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If the configuration is invalid.
    """
    config.validate()

    image_width = int(config.image_width)
    image_height = config.image_height

    center = np.asarray(config.lookfrom, dtype=np.float64)

    # Viewport dimensions on the focus plane
    theta = math.radians(config.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * config.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    # Orthonormal basis
    w = center - np.asarray(config.lookat, dtype=np.float64)
    w = w / np.linalg.norm(w)
    u = np.cross(np.asarray(config.vup, dtype=np.float64), w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = (
        center - config.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = config.focus_dist * math.tan(math.radians(config.defocus_angle / 2.0))

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        samples_per_pixel=int(config.samples_per_pixel),
        pixel_samples_scale=1.0 / config.samples_per_pixel,
        center=center,
        pixel00_loc=pixel00_loc,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        u=u,
        v=v,
        w=w,
        defocus_angle=float(config.defocus_angle),
        defocus_disk_u=u * defocus_radius,
        defocus_disk_v=v * defocus_radius,
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f64, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f64, shape=())
_defocus_angle = ti.field(dtype=ti.f64, shape=())
# 1 when primary rays are jittered within the pixel (more than one sample)
_jitter_samples = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(config: CameraConfig) -> CameraGeometry:
    """Derive camera geometry and load it into the kernel-visible fields.

    Must be called before rendering and again whenever the configuration
    changes.

    Args:
        config: The camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If the configuration is invalid.
    """
    geometry = compute_camera_geometry(config)

    _camera_center[None] = geometry.center.tolist()
    _pixel00_loc[None] = geometry.pixel00_loc.tolist()
    _pixel_delta_u[None] = geometry.pixel_delta_u.tolist()
    _pixel_delta_v[None] = geometry.pixel_delta_v.tolist()
    _defocus_disk_u[None] = geometry.defocus_disk_u.tolist()
    _defocus_disk_v[None] = geometry.defocus_disk_v.tolist()
    _defocus_angle[None] = geometry.defocus_angle
    _jitter_samples[None] = 1 if geometry.samples_per_pixel > 1 else 0

    logger.debug(
        "Camera set up: {}x{} px, {} spp, vfov={}, defocus={}",
        geometry.image_width,
        geometry.image_height,
        geometry.samples_per_pixel,
        config.vfov,
        config.defocus_angle,
    )
    return geometry


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def sample_square() -> vec3:
    """Random offset in the [-0.5, 0.5) x [-0.5, 0.5) unit square."""
    return vec3(ti.random(ti.f64) - 0.5, ti.random(ti.f64) - 0.5, 0.0)


@ti.func
def defocus_disk_sample() -> vec3:
    """Random point on the camera's defocus disk."""
    p = random_in_unit_disk()
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a camera ray for pixel column i and row j.

    The ray originates at the camera center, or at a random point on the
    defocus disk when depth of field is enabled, and passes through a random
    point within the pixel. With a single sample per pixel the ray passes
    through the pixel center. The direction is not normalized.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).

    Returns:
        The primary ray.
    """
    offset = vec3(0.0, 0.0, 0.0)
    if _jitter_samples[None] == 1:
        offset = sample_square()

    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f64) + offset.x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f64) + offset.y) * _pixel_delta_v[None]
    )

    ray_origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        ray_origin = defocus_disk_sample()

    return make_ray(ray_origin, pixel_sample - ray_origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        defocus_disk_u and defocus_disk_v.
    """

    def _tuple(f) -> tuple[float, float, float]:
        vec = f[None]
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "center": _tuple(_camera_center),
        "pixel00_loc": _tuple(_pixel00_loc),
        "pixel_delta_u": _tuple(_pixel_delta_u),
        "pixel_delta_v": _tuple(_pixel_delta_v),
        "defocus_disk_u": _tuple(_defocus_disk_u),
        "defocus_disk_v": _tuple(_defocus_disk_v),
    }
