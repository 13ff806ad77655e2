"""Image export utilities for rendered images.

This module converts linear float images to 8-bit output and writes files.

The output encoding is:
    - gamma 2 correction (square root of each linear component; zero and
      negative values map to 0)
    - clamping to the intensity interval [0.000, 0.999]
    - quantization to int(256 * c), giving bytes in [0, 255]

Supported formats:
    - PPM (plain-text P3)
    - PNG (8-bit via Pillow)

Example:
    >>> from rtweekend.preview.export import save_image
    >>> save_image(image, "output.ppm")  # image: (H, W, 3) linear floats
"""

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from loguru import logger
from PIL import Image as PILImage

# Linear components are clamped into this interval before quantization
INTENSITY_MIN = 0.000
INTENSITY_MAX = 0.999


def linear_to_gamma(image: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Apply gamma 2 correction.

    Args:
        image: Linear values of any shape.

    Returns:
        sqrt(x) where x > 0, otherwise 0 (NaN included).
    """
    linear = np.asarray(image, dtype=np.float64)
    positive = linear > 0.0
    return np.where(positive, np.sqrt(np.where(positive, linear, 0.0)), 0.0)


def image_to_uint8(
    image: npt.ArrayLike,
    *,
    gamma: bool = True,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit components.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Apply gamma 2 correction first.

    Returns:
        8-bit image array with the same shape and dtype uint8.
    """
    values = np.asarray(image, dtype=np.float64)
    if gamma:
        values = linear_to_gamma(values)
    values = np.nan_to_num(values, nan=0.0)
    values = np.clip(values, INTENSITY_MIN, INTENSITY_MAX)
    return np.floor(256.0 * values).astype(np.uint8)


def write_ppm(
    image: npt.ArrayLike,
    out: TextIO,
    *,
    gamma: bool = True,
) -> None:
    """Write an image as plain-text PPM.

    The output is the header ``P3``, ``<width> <height>``, ``255`` followed by
    one ``r g b`` line per pixel in row-major order, top row first.

    Args:
        image: Linear image array of shape (H, W, 3).
        out: Text stream to write to.
        gamma: Apply gamma 2 correction first.
    """
    pixels = image_to_uint8(image, gamma=gamma)
    height, width, _ = pixels.shape

    out.write(f"P3\n{width} {height}\n255\n")
    for row in pixels:
        for r, g, b in row:
            out.write(f"{r} {g} {b}\n")


def save_ppm(
    image: npt.ArrayLike,
    filepath: str | Path,
    *,
    gamma: bool = True,
) -> None:
    """Save an image as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f, gamma=gamma)


def save_png(
    image: npt.ArrayLike,
    filepath: str | Path,
    *,
    gamma: bool = True,
) -> None:
    """Save an image as an 8-bit PNG file."""
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma), mode="RGB")
    pil_image.save(filepath)


def save_image(
    image: npt.ArrayLike,
    filepath: str | Path,
    *,
    gamma: bool = True,
) -> None:
    """Save an image, choosing the format from the file suffix.

    ``.ppm`` writes plain-text PPM; every other suffix is handed to Pillow.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
        gamma: Apply gamma 2 correction first.
    """
    path = Path(filepath)
    if path.suffix.lower() == ".ppm":
        save_ppm(image, path, gamma=gamma)
    else:
        save_png(image, path, gamma=gamma)
    logger.debug("Saved image to {}", path)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared difference between two linear images.

    Used to measure how far a render with few samples is from a
    high-sample reference of the same scene.

    Raises:
        ValueError: If the images differ in shape.
    """
    a = np.asarray(image_a, dtype=np.float64)
    b = np.asarray(image_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Cannot compare images of shape {a.shape} and {b.shape}")
    return float(np.sqrt(np.mean(np.square(a - b))))
