from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from sparseconv.model.grid import GridShape
from sparseconv.model.kernels import Kernel
from sparseconv.operators.sparse_operator import SparseOperator

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@nb.njit(cache=True)
def _in_bounds_offsets(position: int, radius: int, extent: int) -> tuple[int, int]:
    """Range [lo, hi] of offsets k in [-radius, radius] with 0 <= position + k < extent."""
    lo = max(-radius, -position)
    hi = min(radius, extent - 1 - position)
    return lo, hi


@nb.njit(cache=True)
def _convolution_triplets(
    weights: npt.NDArray[np.float64],
    height: int,
    width: int,
) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.float64]]:
    """
    Enumerate the (row, col, value) triples of the convolution operator.

    Row ``i*width + j`` receives the kernel weight of every offset whose
    contributing cell lies inside the grid. Offsets falling outside are
    dropped. Values are never pruned, a zero weight in bounds is emitted.

    Args:
        weights: (k, k) C-contiguous kernel, k odd.
        height: Number of grid rows.
        width: Number of grid columns.

    Returns:
        rows, cols, values: 1D arrays of equal length.
    """
    k = weights.shape[0]
    radius = k // 2
    capacity = height * width * k * k

    rows = np.empty(capacity, dtype=np.int64)
    cols = np.empty(capacity, dtype=np.int64)
    values = np.empty(capacity, dtype=np.float64)

    count = 0
    for i in range(height):
        for j in range(width):
            r = i * width + j
            for ki in range(-radius, radius + 1):
                ci = i + ki
                if ci < 0 or ci >= height:
                    continue
                for kj in range(-radius, radius + 1):
                    cj = j + kj
                    if cj < 0 or cj >= width:
                        continue
                    rows[count] = r
                    cols[count] = ci * width + cj
                    values[count] = weights[ki + radius, kj + radius]
                    count += 1

    return rows[:count], cols[:count], values[:count]


@nb.njit(cache=True, parallel=True)
def _convolution_triplets_parallel(
    weights: npt.NDArray[np.float64],
    height: int,
    width: int,
) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.float64]]:
    """
    Row-parallel variant of :func:`_convolution_triplets`.

    The number of in-bounds offsets of each row is known in closed form, so a
    prefix sum gives every row its own slice of the output and the rows are
    filled independently.
    """
    k = weights.shape[0]
    radius = k // 2
    mn = height * width

    offsets = np.zeros(mn + 1, dtype=np.int64)
    for r in range(mn):
        i = r // width
        j = r - i * width
        ilo, ihi = _in_bounds_offsets(i, radius, height)
        jlo, jhi = _in_bounds_offsets(j, radius, width)
        offsets[r + 1] = offsets[r] + (ihi - ilo + 1) * (jhi - jlo + 1)

    total = offsets[mn]
    rows = np.empty(total, dtype=np.int64)
    cols = np.empty(total, dtype=np.int64)
    values = np.empty(total, dtype=np.float64)

    for r in nb.prange(mn):
        i = r // width
        j = r - i * width
        ilo, ihi = _in_bounds_offsets(i, radius, height)
        jlo, jhi = _in_bounds_offsets(j, radius, width)
        pos = offsets[r]
        for ki in range(ilo, ihi + 1):
            for kj in range(jlo, jhi + 1):
                rows[pos] = r
                cols[pos] = (i + ki) * width + (j + kj)
                values[pos] = weights[ki + radius, kj + radius]
                pos += 1

    return rows, cols, values


def convolution_triplets(
    kernel: Kernel | npt.ArrayLike,
    height: int,
    width: int,
    parallel: bool = False,
) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.float64]]:
    """
    Collect the sparse entries of the convolution operator without assembling it.

    Args:
        kernel: Odd-sized square kernel.
        height: Number of grid rows.
        width: Number of grid columns.
        parallel: Partition the work by rows across threads.

    Raises:
        DimensionMismatchError: If the kernel is not square with an odd size,
            or the grid dimensions are not positive.

    Returns:
        rows, cols, values of every in-bounds (cell, offset) pair.
    """
    kernel = Kernel.coerce(kernel)
    shape = GridShape(height, width)
    if parallel:
        return _convolution_triplets_parallel(kernel.weights, shape.height, shape.width)
    return _convolution_triplets(kernel.weights, shape.height, shape.width)


def build_operator(
    kernel: Kernel | npt.ArrayLike,
    height: int,
    width: int,
    parallel: bool = False,
) -> SparseOperator:
    """
    Build the sparse mn x mn operator that convolves a flattened ``height x width`` grid.

    Border rows are truncated, not renormalized: a corner cell of a 3x3 kernel
    only receives 4 of the 9 weights, so its output intensity differs from the
    interior for the same input.

    Args:
        kernel: Odd-sized square kernel (a :class:`Kernel` or anything array-like).
        height: Number of grid rows.
        width: Number of grid columns.
        parallel: Collect the triples with the row-parallel kernel.

    Returns:
        The assembled operator.
    """
    kernel = Kernel.coerce(kernel)
    rows, cols, values = convolution_triplets(kernel, height, width, parallel=parallel)
    operator = SparseOperator.from_triplets(rows, cols, values, dimension=height * width)
    logger.debug(
        f"Built {operator.dimension}x{operator.dimension} operator from kernel "
        f"'{kernel.name}' ({kernel.size}x{kernel.size}) with {operator.nonzero_count()} stored entries."
    )
    return operator
