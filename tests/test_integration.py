"""Integration tests for the end-to-end rendering pipeline.

These tests render the preset scenes at low resolution with few samples and
check basic properties of the output image and its convergence.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import numpy as np


class TestThreeSpheresIntegration:
    """Integration tests for the three spheres scene."""

    def test_renders_finite_image(self):
        """Test the scene renders to a finite, non-negative image."""
        from rtweekend.core.integrator import render
        from rtweekend.scene.presets import three_spheres_scene

        _, camera = three_spheres_scene()
        camera.image_width = 32
        camera.samples_per_pixel = 4
        camera.max_depth = 8

        image = render(camera)
        assert image.shape == (18, 32, 3)
        assert np.isfinite(image).all()
        assert image.min() >= 0.0
        assert image.max() <= 1.0
        # Something other than black was rendered
        assert image.mean() > 0.05

    def test_ground_below_sky(self):
        """Test the sky at the top is brighter than the ground at the bottom."""
        from rtweekend.core.integrator import render
        from rtweekend.scene.presets import three_spheres_scene

        _, camera = three_spheres_scene()
        camera.image_width = 32
        camera.samples_per_pixel = 8
        camera.max_depth = 8
        camera.defocus_angle = 0.0
        # Look straight ahead so the horizon crosses the middle of the image
        camera.lookfrom = (0.0, 0.0, 1.0)
        camera.vfov = 90.0

        image = render(camera)
        top_blue = image[0, :, 2].mean()
        bottom_blue = image[-1, :, 2].mean()
        assert top_blue > bottom_blue

    def test_error_falls_with_more_samples(self):
        """Test a render moves closer to a high-sample reference as samples accumulate."""
        from rtweekend.core.progressive import ProgressiveRenderer
        from rtweekend.preview.export import compute_rmse
        from rtweekend.scene.presets import three_spheres_scene

        _, camera = three_spheres_scene()
        camera.image_width = 16
        camera.samples_per_pixel = 64
        camera.max_depth = 8
        camera.defocus_angle = 0.0

        renderer = ProgressiveRenderer(camera)
        renderer.render()
        reference = renderer.get_image_numpy().copy()

        renderer.reset()
        renderer.render(2)
        error_low = compute_rmse(renderer.get_image_numpy(), reference)
        renderer.render(30)
        assert renderer.sample_count == 32
        error_high = compute_rmse(renderer.get_image_numpy(), reference)

        assert error_low > 0.0
        assert error_high < error_low


class TestRandomSpheresIntegration:
    """Integration tests for the random spheres scene."""

    def test_progressive_render_and_save(self, tmp_path):
        """Test the cover scene renders progressively and saves a PNG."""
        from PIL import Image

        from rtweekend.core.progressive import ProgressiveRenderer
        from rtweekend.scene.presets import random_spheres_scene

        _, camera = random_spheres_scene(seed=3)
        camera.image_width = 24
        camera.samples_per_pixel = 2
        camera.max_depth = 5

        renderer = ProgressiveRenderer(camera)
        progress = list(renderer.render_progressive())
        assert progress[-1] == (2, 2)

        image = renderer.get_image_numpy()
        assert np.isfinite(image).all()

        path = tmp_path / "final.png"
        renderer.save_image(path)
        with Image.open(path) as img:
            assert img.size == (24, 13)
