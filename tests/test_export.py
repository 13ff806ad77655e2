"""Tests for image export.

These tests do not need Taichi: export works on NumPy arrays.
"""

import io

import numpy as np
import pytest
from PIL import Image

from rtweekend.preview.export import (
    compute_rmse,
    image_to_uint8,
    linear_to_gamma,
    save_image,
    write_ppm,
)


class TestLinearToGamma:
    """Tests for linear_to_gamma."""

    def test_square_root(self):
        """Test positive values map to their square root."""
        result = linear_to_gamma([0.25, 1.0, 0.0])
        np.testing.assert_allclose(result, [0.5, 1.0, 0.0])

    def test_non_positive_and_nan(self):
        """Test negative and NaN values map to zero."""
        result = linear_to_gamma([-0.5, np.nan])
        assert (result == 0.0).all()


class TestImageToUint8:
    """Tests for image_to_uint8."""

    def test_quantization(self):
        """Test gamma, clamping and quantization of sample values."""
        image = np.array([[[0.25, 1.0, 0.0], [-1.0, np.nan, 4.0]]])
        pixels = image_to_uint8(image)
        assert pixels.dtype == np.uint8
        assert pixels.tolist() == [[[128, 255, 0], [0, 0, 255]]]

    def test_without_gamma(self):
        """Test linear quantization when gamma is disabled."""
        image = np.array([[[0.25, 0.5, 0.999]]])
        assert image_to_uint8(image, gamma=False).tolist() == [[[64, 128, 255]]]


class TestPPM:
    """Tests for PPM output."""

    def test_header_and_body(self):
        """Test a 2x1 image writes the header and one line per pixel."""
        image = np.array([[[1.0, 0.0, 0.25], [0.0, 1.0, 0.0]]])
        out = io.StringIO()
        write_ppm(image, out)
        assert out.getvalue() == "P3\n2 1\n255\n255 0 128\n0 255 0\n"

    def test_rows_top_first(self):
        """Test rows are written from the top of the image."""
        image = np.zeros((2, 1, 3))
        image[0, 0] = 1.0
        out = io.StringIO()
        write_ppm(image, out)
        lines = out.getvalue().splitlines()
        assert lines[1] == "1 2"
        assert lines[3] == "255 255 255"
        assert lines[4] == "0 0 0"


class TestSaveImage:
    """Tests for save_image."""

    def test_ppm_by_suffix(self, tmp_path):
        """Test .ppm files are written as plain text."""
        path = tmp_path / "image.ppm"
        save_image(np.full((3, 4, 3), 0.25), path)
        text = path.read_text()
        assert text.startswith("P3\n4 3\n255\n")
        assert text.count("\n") == 3 + 12

    def test_png_with_pillow(self, tmp_path):
        """Test other suffixes are written through Pillow."""
        path = tmp_path / "image.png"
        save_image(np.full((3, 4, 3), 0.25), path)
        with Image.open(path) as img:
            assert img.size == (4, 3)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (128, 128, 128)


class TestComputeRMSE:
    """Tests for compute_rmse."""

    def test_values(self):
        """Test identical images have zero error and offsets are measured."""
        a = np.zeros((2, 2, 3))
        assert compute_rmse(a, a) == 0.0
        assert abs(compute_rmse(a, a + 0.5) - 0.5) < 1e-12

    def test_shape_mismatch(self):
        """Test mismatched shapes are rejected."""
        with pytest.raises(ValueError, match="Cannot compare images"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
