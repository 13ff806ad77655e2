"""Progressive renderer for iterative sample accumulation.

This module provides a convenient wrapper around the core integrator that supports:
- Progressive rendering that refines over time
- Batch rendering (multiple samples per pixel in one call)
- Progress callbacks and a generator API for progress bars
- Easy reset and re-render functionality

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu")
    >>> from rtweekend.core.progressive import ProgressiveRenderer
    >>> from rtweekend.scene.presets import three_spheres_scene
    >>>
    >>> scene, camera = three_spheres_scene()
    >>> renderer = ProgressiveRenderer(camera)
    >>> renderer.render()  # camera.samples_per_pixel samples
    >>> renderer.save_image("image.ppm")
"""

from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt
from loguru import logger

from rtweekend.camera.camera import CameraConfig, setup_camera
from rtweekend.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from rtweekend.preview.export import image_to_uint8, save_image

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    The renderer configures the camera and the render target from a
    CameraConfig, then delegates to the global integrator buffers (which are
    Taichi fields). Only one renderer is active at a time.

    Attributes:
        config: The camera configuration being rendered.
    """

    def __init__(self, config: CameraConfig) -> None:
        """Initialize the progressive renderer.

        Args:
            config: The camera configuration.

        Raises:
            ValueError: If the configuration is invalid or the image exceeds
                the maximum supported size.
        """
        self.config = config
        self._width = 0
        self._height = 0
        self._configure()

    def _configure(self) -> None:
        geometry = setup_camera(self.config)
        self._width = geometry.image_width
        self._height = geometry.image_height
        setup_render_target(self._width, self._height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear accumulated samples without changing the camera."""
        clear_render_target()

    def set_config(self, config: CameraConfig) -> None:
        """Switch to a new camera configuration and reset the accumulator.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config
        self._configure()

    def render(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Accumulates samples into the existing buffer. Can be called multiple
        times to continue refining the image.

        Args:
            num_samples: Number of samples per pixel to add. Defaults to the
                configuration's samples_per_pixel.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback function called after each batch.
                Receives (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Number of samples per pixel to add. Defaults to the
                configuration's samples_per_pixel.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples is None:
            num_samples = self.config.samples_per_pixel
        if num_samples <= 0:
            return
        batch_size = max(1, batch_size)

        start_samples = self.sample_count
        target_samples = start_samples + num_samples
        logger.debug(
            "Rendering {} samples per pixel in batches of {}", num_samples, batch_size
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.config.max_depth)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the averaged linear image as a (height, width, 3) array."""
        return get_image_numpy()

    def get_image_uint8(self, gamma: bool = True) -> npt.NDArray[np.uint8]:
        """Get the image quantized to 8 bits per channel.

        Args:
            gamma: Apply gamma-2 correction before quantizing.
        """
        return image_to_uint8(self.get_image_numpy(), gamma=gamma)

    def save_image(self, filepath: str | Path, gamma: bool = True) -> None:
        """Save the rendered image as PPM or PNG (chosen by file suffix)."""
        save_image(self.get_image_numpy(), filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
