"""Taichi runtime initialization.

Every module that declares Taichi fields must be imported after Taichi has
been initialized, so scripts and tests call ``init()`` first. The runtime is
always configured for double precision so that kernels, dataclasses and
fields agree on float64.

Randomness inside kernels comes from Taichi's per-thread generators. The
``seed`` given here makes renders reproducible for a given backend.
"""

import taichi as ti
from loguru import logger

ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
}


def init(arch: str = "cpu", seed: int = 0, debug: bool = False) -> None:
    """Initialize Taichi for rendering.

    Args:
        arch: Backend name, one of the keys of ARCHES. "gpu" lets Taichi pick
            an available GPU backend and falls back to CPU.
        seed: Seed for the kernel random number generators.
        debug: Enable Taichi's debug mode (bounds checks, slower).

    Raises:
        ValueError: If arch is not a known backend name.
    """
    if arch not in ARCHES:
        raise ValueError(f"Unknown Taichi arch {arch!r}. Choose from {sorted(ARCHES)}")

    ti.init(
        arch=ARCHES[arch],
        default_fp=ti.f64,
        random_seed=seed,
        debug=debug,
    )
    logger.debug("Taichi initialized (arch={}, seed={}, debug={})", arch, seed, debug)
