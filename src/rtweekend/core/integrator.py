"""Path tracing integrator.

This module turns camera rays into colors and accumulates them into an image.

``ray_color`` follows a ray through the scene: on a miss it returns the sky
gradient, on a hit the surface's material scatters the ray and the returned
color is the material's attenuation times the color of the scattered ray.
Absorbed rays and rays that run out of bounces contribute black. Taichi
functions cannot recurse, so the bounce chain is evaluated as a loop that
carries the product of attenuations along the path.

Each render pass traces one camera ray per pixel in a parallel kernel and
adds it to a per-pixel sum. The image is the sum divided by the number of
passes, i.e. every pixel averages samples_per_pixel samples.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.core.integrator import render
    >>> from rtweekend.scene.presets import three_spheres_scene
    >>>
    >>> scene, camera = three_spheres_scene()
    >>> image = render(camera)  # (height, width, 3) float64, linear color
"""

import numpy as np
import taichi as ti
import taichi.math as tm
from loguru import logger

from rtweekend.camera.camera import CameraConfig, get_ray, setup_camera
from rtweekend.core.interval import make_interval
from rtweekend.core.ray import Ray, make_ray
from rtweekend.core.vec3 import normalize, vec3
from rtweekend.materials.material import scatter, scattered_ray
from rtweekend.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum number of ray bounces
DEFAULT_MAX_DEPTH = 50

# Hits closer than this are ignored so a scattered ray does not re-hit the
# surface it left because of floating point error
T_MIN = 0.001

# Sky gradient endpoints, blended by the ray direction's height
SKY_HORIZON_COLOR = (1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = (0.5, 0.7, 1.0)


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background color seen by a ray that escapes the scene.

    Blends linearly from white at the bottom (unit direction y = -1) to light
    blue at the top (y = 1).
    """
    unit_direction = normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    horizon = vec3(SKY_HORIZON_COLOR[0], SKY_HORIZON_COLOR[1], SKY_HORIZON_COLOR[2])
    zenith = vec3(SKY_ZENITH_COLOR[0], SKY_ZENITH_COLOR[1], SKY_ZENITH_COLOR[2])
    return (1.0 - a) * horizon + a * zenith


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Number of bounces left. 0 yields black immediately.

    Returns:
        The linear RGB color carried back along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    depth = max_depth

    # While loops keep the bounce chain serial inside parallel kernels
    active = 1
    while active == 1 and depth > 0:
        rec = intersect_scene(current, make_interval(T_MIN, tm.inf))

        if rec.hit == 0:
            color = throughput * sky_color(current.direction)
            active = 0
        else:
            srec = scatter(current, rec)
            if srec.did_scatter == 0:
                active = 0
            else:
                throughput = throughput * srec.attenuation
                current = scattered_ray(srec)
                depth -= 1

    return color


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated so kernels compile once)
MAX_IMAGE_WIDTH = 1920
MAX_IMAGE_HEIGHT = 1080

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of sample colors, indexed [column, row] with row 0 at the top
_color_sum = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of completed render passes (samples per pixel so far)
_samples_taken = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Reset accumulated samples to zero."""
    _color_sum.fill(0.0)
    _samples_taken[None] = 0


def reset_render_target() -> None:
    """Forget the render target entirely (setup is required again)."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Trace one camera ray per pixel and add it to the color sum."""
    for i, j in ti.ndrange(width, height):
        _color_sum[i, j] += ray_color(get_ray(i, j), max_depth)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, max_depth: ti.i32) -> vec3:
    """Trace one camera ray through a single pixel."""
    return ray_color(get_ray(pixel_i, pixel_j), max_depth)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Trace an arbitrary ray."""
    return ray_color(make_ray(origin, direction), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Compute the color along one ray against the current scene.

    Args:
        origin: The ray origin.
        direction: The ray direction (need not be unit length).
        max_depth: Maximum number of bounces.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction), max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_sample(
    pixel_i: int,
    pixel_j: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    Uses the camera set up by setup_camera(). For production rendering use
    render_image(), which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        max_depth: Maximum number of bounces.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(pixel_i, pixel_j, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Add samples to every pixel of the render target.

    Can be called repeatedly; samples keep accumulating until the target is
    cleared.

    Args:
        num_samples: Number of samples to render per pixel.
        max_depth: Maximum number of bounces per sample.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    for _ in range(num_samples):
        _render_one_spp(width, height, max_depth)
        _samples_taken[None] += 1


def get_total_samples() -> int:
    """Get the number of samples per pixel accumulated so far."""
    _check_render_target_initialized()
    return int(_samples_taken[None])


def get_image_numpy() -> np.ndarray:
    """Get the averaged linear image.

    Returns:
        A float64 array of shape (height, width, 3), row 0 at the top. All
        zeros if no samples have been taken yet.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = int(_samples_taken[None])

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(_color_sum.to_numpy()[:width, :height, :], (1, 0, 2))
    if samples > 0:
        image = image / samples
    return image.astype(np.float64)


def iter_pixels():
    """Yield each pixel's (R, G, B) linear color in row-major order."""
    image = get_image_numpy()
    height, width, _ = image.shape
    for j in range(height):
        for i in range(width):
            r, g, b = image[j, i]
            yield (float(r), float(g), float(b))


def render(config: CameraConfig) -> np.ndarray:
    """Render the current scene with a camera configuration.

    Sets up the camera and the render target, takes
    ``config.samples_per_pixel`` samples per pixel and returns the averaged
    image.

    Returns:
        A float64 array of shape (image_height, image_width, 3).

    Raises:
        ValueError: If the camera configuration is invalid or the image is
            too large for the render target.
    """
    geometry = setup_camera(config)
    setup_render_target(geometry.image_width, geometry.image_height)

    logger.debug(
        "Rendering {}x{} at {} spp, max depth {}",
        geometry.image_width,
        geometry.image_height,
        config.samples_per_pixel,
        config.max_depth,
    )
    render_image(config.samples_per_pixel, config.max_depth)
    return get_image_numpy()
