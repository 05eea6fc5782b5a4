"""
Raster Image I/O
Loads grayscale images as normalized grids and saves 8-bit grids as images.
"""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Union

import numpy as np
from PIL import Image

from sparseconv.config import INTENSITY_LEVELS
from sparseconv.errors import DimensionMismatchError, ImageLoadError, ImageSaveError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def load_grayscale(path: PathLike) -> npt.NDArray[np.float64]:
    """
    Load an image as a single-channel grid of intensities in [0, 1].

    Colour images are converted to luminance ("L" mode) first.

    Raises:
        ImageLoadError: If the file is missing, unreadable, truncated or not an image.
    """
    try:
        with Image.open(path) as img:
            channels = len(img.getbands())
            gray = np.asarray(img.convert("L"), dtype=np.float64)
    except OSError as e:
        logger.error(f"Could not load image {path}: {e}")
        raise ImageLoadError(f"Could not load image '{path}'.") from e

    height, width = gray.shape
    logger.info(f"Image loaded: {width}x{height} with {channels} channels.")
    return np.ascontiguousarray(gray / INTENSITY_LEVELS)


def save_grayscale(grid: npt.NDArray[np.uint8], path: PathLike) -> None:
    """Write an 8-bit grid as a single-channel image; the format follows the file extension.

    Raises:
        ImageSaveError: If the destination cannot be written.
    """
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise DimensionMismatchError(f"Expected a 2D grid, got an array with {grid.ndim} dimensions.")
    if grid.dtype != np.uint8:
        raise TypeError(f"Expected a uint8 grid, got {grid.dtype}. Quantize the grid first.")
    try:
        Image.fromarray(grid).save(path)
    except OSError as e:
        logger.error(f"Could not save image to {path}: {e}")
        raise ImageSaveError(f"Could not write image to '{path}'.") from e
    logger.info(f"Image saved to {path}")
