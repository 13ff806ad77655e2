"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field created by modules imported earlier.
    """
    from rtweekend import runtime

    runtime.init(arch="cpu", seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and render target data around each test."""
    # Imported here so Taichi is initialized first
    from rtweekend.core.integrator import reset_render_target
    from rtweekend.materials.dielectric import clear_dielectric_materials
    from rtweekend.materials.lambertian import clear_lambertian_materials
    from rtweekend.materials.material import clear_material_tracking
    from rtweekend.materials.metal import clear_metal_materials
    from rtweekend.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_material_tracking()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
