"""Preview module for image output.

Components:
    export: Gamma correction, 8-bit quantization and PPM/PNG writers

Example:
    >>> from rtweekend.preview import save_image
    >>> from rtweekend.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(camera)
    >>> renderer.render()
    >>> save_image(renderer.get_image_numpy(), "output.png")
"""

from rtweekend.preview.export import (
    compute_rmse,
    image_to_uint8,
    linear_to_gamma,
    save_image,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    "linear_to_gamma",
    "image_to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
]
