"""Camera module for view and ray generation.

Components:
    camera: Look-at camera with field of view, anti-aliasing jitter and
        defocus blur

Camera responsibilities:
    - Derive the viewport geometry from a CameraConfig
    - Map pixel (i, j) to a world-space ray, row 0 at the top of the image
    - Jitter rays within the pixel when more than one sample is taken
    - Sample ray origins on the defocus disk for depth of field
"""

from .camera import (
    CameraConfig,
    CameraGeometry,
    compute_camera_geometry,
    defocus_disk_sample,
    get_camera_info,
    get_ray,
    sample_square,
    setup_camera,
)

__all__ = [
    "CameraConfig",
    "CameraGeometry",
    "compute_camera_geometry",
    "setup_camera",
    "get_ray",
    "sample_square",
    "defocus_disk_sample",
    "get_camera_info",
]
