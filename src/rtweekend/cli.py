"""Command-line renderer.

Renders a preset scene or a JSON scene file and saves the image as PPM or
PNG depending on the output suffix.

Usage:
    rtweekend [options]
    python -m rtweekend [options]

Example:
    rtweekend --scene final --width 400 --samples 50 --output final.png
"""

import argparse
import sys
import time
from pathlib import Path

from loguru import logger
from tqdm import tqdm

from rtweekend import runtime

SCENE_NAMES = ("three-spheres", "final")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rtweekend",
        description="Render a scene of spheres with a stochastic ray tracer.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="three-spheres",
        help="Preset scene to render (default: three-spheres)",
    )
    source.add_argument(
        "--scene-file",
        type=Path,
        default=None,
        help="JSON scene file with 'materials' and 'spheres' lists "
        "and an optional 'camera' object",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: the scene's)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Samples per pixel (default: the scene's)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum ray bounces (default: the scene's)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1,
        help="Samples per progress update (default: 1)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for rendering and scene layout (default: 0)",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(runtime.ARCHES),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("image.ppm"),
        help="Output file; .ppm writes plain PPM, other suffixes use Pillow "
        "(default: image.ppm)",
    )
    parser.add_argument(
        "--no-gamma",
        action="store_true",
        help="Write linear values without gamma correction",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors, no progress bar",
    )
    return parser.parse_args(argv)


def configure_logging(quiet: bool) -> None:
    """Send log records to stderr at INFO, or WARNING when quiet."""
    logger.remove()
    logger.add(sys.stderr, level="WARNING" if quiet else "INFO")


def render_to_file(args: argparse.Namespace) -> Path:
    """Build the requested scene, render it and save the image.

    Taichi must already be initialized.

    Returns:
        Path of the written image.
    """
    # Imported after Taichi initialization
    from rtweekend.core.progressive import ProgressiveRenderer
    from rtweekend.scene.manager import SceneManager
    from rtweekend.scene.presets import random_spheres_scene, three_spheres_scene

    if args.scene_file is not None:
        scene = SceneManager()
        camera = scene.load_json(args.scene_file)
        logger.info("Loaded {} spheres from {}", scene.get_sphere_count(), args.scene_file)
    elif args.scene == "final":
        scene, camera = random_spheres_scene(seed=args.seed)
    else:
        scene, camera = three_spheres_scene()

    if args.width is not None:
        camera.image_width = args.width
    if args.samples is not None:
        camera.samples_per_pixel = args.samples
    if args.max_depth is not None:
        camera.max_depth = args.max_depth

    renderer = ProgressiveRenderer(camera)
    logger.info(
        "Rendering {}x{} with {} spheres, {} samples per pixel",
        renderer.width,
        renderer.height,
        scene.get_sphere_count(),
        camera.samples_per_pixel,
    )

    start_time = time.time()
    with tqdm(
        total=camera.samples_per_pixel,
        unit="spp",
        disable=args.quiet,
        file=sys.stderr,
    ) as pbar:
        for current, _ in renderer.render_progressive(batch_size=args.batch_size):
            pbar.update(current - pbar.n)

    renderer.save_image(args.output, gamma=not args.no_gamma)
    logger.info("Saved {} in {:.2f}s", args.output, time.time() - start_time)
    return args.output


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.quiet)

    try:
        runtime.init(arch=args.arch, seed=args.seed)
        render_to_file(args)
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("{}", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
