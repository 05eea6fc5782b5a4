from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from sparseconv.config import INTENSITY_LEVELS
from sparseconv.model.grid import GridShape

if TYPE_CHECKING:
    import numpy.typing as npt

    from sparseconv.operators.sparse_operator import SparseOperator


class QuantizationMode(StrEnum):
    """
    Order of clamping and scaling when converting intensities to 8-bit values.

    The two modes are not interchangeable for values that are close to an
    integer level after scaling:

    * ``CLAMP_THEN_SCALE``: ``round(clamp(v, 0, 1) * 255)`` with halves rounded
      up. Used for the noised preview image.
    * ``SCALE_THEN_CLAMP``: ``clamp(v * 255, 0, 255)`` truncated to a byte.
      Used for the filtered outputs of unnormalized kernels, whose values can
      leave [0, 1].
    """
    CLAMP_THEN_SCALE = "clamp_then_scale"
    SCALE_THEN_CLAMP = "scale_then_clamp"


def apply_operator(
    operator: SparseOperator,
    vector: npt.NDArray[np.float64],
    height: int,
    width: int,
) -> npt.NDArray[np.float64]:
    """
    Multiply a flattened grid by an operator and reshape the result.

    Args:
        operator: Operator of dimension ``height * width``.
        vector: Flattened input grid.
        height: Number of grid rows.
        width: Number of grid columns.

    Raises:
        DimensionMismatchError: If the vector, operator and dimensions disagree.

    Returns:
        The filtered ``height x width`` grid; values may lie outside [0, 1].
    """
    shape = GridShape(height, width)
    return shape.reshape(operator.multiply(vector))


def _clamp_then_scale(grid: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    scaled = np.clip(grid, 0.0, 1.0) * INTENSITY_LEVELS
    # Halves round up, np.rint would send 2.5 to 2
    return np.floor(scaled + 0.5).astype(np.uint8)


def _scale_then_clamp(grid: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    scaled = np.clip(grid * INTENSITY_LEVELS, 0.0, float(INTENSITY_LEVELS))
    # astype truncates toward zero, scaled is already non-negative
    return scaled.astype(np.uint8)


def quantize(
    grid: npt.NDArray[np.float64],
    mode: QuantizationMode = QuantizationMode.CLAMP_THEN_SCALE,
) -> npt.NDArray[np.uint8]:
    """
    Convert a real-valued grid to 8-bit intensities.

    Args:
        grid: Grid of intensities, nominally in [0, 1].
        mode: Order of clamping and scaling, see :class:`QuantizationMode`.

    Returns:
        Grid of the same shape with dtype uint8.
    """
    grid = np.asarray(grid, dtype=np.float64)
    mode = QuantizationMode(mode)
    if mode is QuantizationMode.CLAMP_THEN_SCALE:
        return _clamp_then_scale(grid)
    return _scale_then_clamp(grid)


def filter_grid(
    operator: SparseOperator,
    vector: npt.NDArray[np.float64],
    shape: GridShape,
    mode: QuantizationMode = QuantizationMode.SCALE_THEN_CLAMP,
) -> npt.NDArray[np.uint8]:
    """Apply an operator to a flattened grid and quantize the result."""
    return quantize(apply_operator(operator, vector, shape.height, shape.width), mode=mode)
