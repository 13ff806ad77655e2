"""Tests for the command-line renderer.

Rendering runs in a subprocess: the CLI initializes Taichi itself, and a
second ti.init() in the test process would invalidate the session's fields.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

from rtweekend.cli import parse_args

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "rtweekend", *args],
        capture_output=True,
        text=True,
        env=env,
        timeout=600,
    )


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test the default options."""
        args = parse_args([])
        assert args.scene == "three-spheres"
        assert args.scene_file is None
        assert args.width is None
        assert args.samples is None
        assert args.max_depth is None
        assert args.batch_size == 1
        assert args.seed == 0
        assert args.arch == "cpu"
        assert args.output == Path("image.ppm")
        assert not args.no_gamma
        assert not args.quiet

    def test_overrides(self):
        """Test options are parsed into their types."""
        args = parse_args(
            ["--scene", "final", "--width", "64", "--samples", "4", "--output", "out.png"]
        )
        assert args.scene == "final"
        assert args.width == 64
        assert args.samples == 4
        assert args.output == Path("out.png")


class TestRenderCommand:
    """End-to-end CLI runs."""

    def test_render_preset_to_ppm(self, tmp_path):
        """Test a tiny preset render writes a PPM file."""
        output = tmp_path / "tiny.ppm"
        result = _run_cli(
            "--width", "8", "--samples", "1", "--max-depth", "2", "--quiet",
            "--output", str(output),
        )
        assert result.returncode == 0, result.stderr

        lines = output.read_text().splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 8 * 4
        for line in lines[3:]:
            assert all(0 <= int(v) <= 255 for v in line.split())

    def test_render_scene_file(self, tmp_path):
        """Test a JSON scene file without a camera uses the default camera."""
        scene_file = tmp_path / "scene.json"
        scene_file.write_text(
            json.dumps(
                {
                    "materials": [{"type": "lambertian", "albedo": [0.5, 0.5, 0.5]}],
                    "spheres": [{"center": [0, 0, -1], "radius": 0.5, "material_id": 0}],
                }
            )
        )
        output = tmp_path / "scene.png"
        result = _run_cli(
            "--scene-file", str(scene_file), "--width", "16", "--samples", "1",
            "--quiet", "--output", str(output),
        )
        assert result.returncode == 0, result.stderr
        assert output.exists()

    def test_invalid_setting_fails(self, tmp_path):
        """Test an invalid camera setting exits with status 1."""
        result = _run_cli("--width", "0", "--quiet", "--output", str(tmp_path / "x.ppm"))
        assert result.returncode == 1
        assert "image_width" in result.stderr

    def test_scene_file_camera(self, tmp_path):
        """Test the camera object in a scene file sets the image size."""
        scene_file = tmp_path / "scene.json"
        scene_file.write_text(
            json.dumps(
                {
                    "materials": [{"type": "metal", "albedo": [0.8, 0.8, 0.8], "fuzz": 0.2}],
                    "spheres": [{"center": [0, 0, -1], "radius": 0.5, "material_id": 0}],
                    "camera": {"image_width": 12, "aspect_ratio": 2.0, "samples_per_pixel": 1},
                }
            )
        )
        output = tmp_path / "scene.ppm"
        result = _run_cli("--scene-file", str(scene_file), "--quiet", "--output", str(output))
        assert result.returncode == 0, result.stderr

        lines = output.read_text().splitlines()
        assert lines[:3] == ["P3", "12 6", "255"]

    def test_malformed_scene_file_fails(self, tmp_path):
        """Test a malformed scene file exits with status 1 and no traceback."""
        output = tmp_path / "x.ppm"
        for i, data in enumerate(
            [
                {"materials": [{"type": "lambertian", "albedo": 0.5}]},
                {"materials": [{"type": "lambertian"}], "spheres": [[0, 0, -1]]},
                {"camera": {"image_width": "wide"}},
                [1, 2, 3],
            ]
        ):
            scene_file = tmp_path / f"bad{i}.json"
            scene_file.write_text(json.dumps(data))
            result = _run_cli("--scene-file", str(scene_file), "--quiet", "--output", str(output))
            assert result.returncode == 1, data
            assert "Traceback" not in result.stderr
            assert not output.exists()

    def test_invalid_json_fails(self, tmp_path):
        """Test a scene file that is not JSON exits with status 1."""
        scene_file = tmp_path / "broken.json"
        scene_file.write_text("{not json")
        result = _run_cli(
            "--scene-file", str(scene_file), "--quiet", "--output", str(tmp_path / "x.ppm")
        )
        assert result.returncode == 1
        assert "Traceback" not in result.stderr
