from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from sparseconv.config import INTENSITY_LEVELS, NOISE_AMPLITUDE

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def add_uniform_noise(
    grid: npt.NDArray[np.float64],
    rng: np.random.Generator,
    amplitude: int = NOISE_AMPLITUDE,
) -> npt.NDArray[np.float64]:
    """
    Add integer uniform noise to a normalized grid.

    Each cell receives an independent draw from ``[-amplitude, amplitude]``
    (inclusive, in 8-bit intensity levels) scaled by ``1/255``. The result is
    clamped back to [0, 1].

    Args:
        grid: 2D array of intensities in [0, 1].
        rng: Random generator; pass a seeded one for reproducible noise.
        amplitude: Maximum absolute noise in intensity levels.

    Returns:
        A new C-contiguous grid; the input is left untouched.
    """
    if amplitude < 0:
        raise ValueError(f"Noise amplitude must be non-negative, got {amplitude}.")

    grid = np.asarray(grid, dtype=np.float64)
    noise = rng.integers(-amplitude, amplitude, size=grid.shape, endpoint=True)
    noised = grid + noise.astype(np.float64) / INTENSITY_LEVELS
    logger.debug(f"Added uniform noise of amplitude {amplitude} to a {grid.shape[0]}x{grid.shape[1]} grid.")
    return np.ascontiguousarray(np.clip(noised, 0.0, 1.0))
