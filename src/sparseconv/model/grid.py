from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from sparseconv.errors import DimensionMismatchError

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class GridShape:
    """
    Dimensions of a 2D intensity grid and its row-major flattening.

    Cell (i, j) of a ``height x width`` grid maps to index ``i * width + j`` of
    the flattened vector. Every component that converts between grid
    coordinates and vector indices goes through this class.
    """
    height: int
    width: int

    def __post_init__(self) -> None:
        if self.height <= 0 or self.width <= 0:
            raise DimensionMismatchError(
                f"Grid dimensions must be positive, got {self.height}x{self.width}."
            )

    @classmethod
    def of(cls, grid: npt.NDArray[np.float64]) -> GridShape:
        """Return the shape of a 2D grid."""
        if np.ndim(grid) != 2:
            raise DimensionMismatchError(f"Expected a 2D grid, got an array with {np.ndim(grid)} dimensions.")
        height, width = np.shape(grid)
        return cls(int(height), int(width))

    @property
    def size(self) -> int:
        """Number of cells, i.e. the length of the flattened vector."""
        return self.height * self.width

    def contains(self, i: int, j: int) -> bool:
        """Whether (i, j) lies inside [0, height) x [0, width)."""
        return 0 <= i < self.height and 0 <= j < self.width

    def to_flat(self, i: int, j: int) -> int:
        """Flattened index of cell (i, j)."""
        if not self.contains(i, j):
            raise IndexError(f"Cell ({i}, {j}) is outside a {self.height}x{self.width} grid.")
        return i * self.width + j

    def to_grid(self, index: int) -> tuple[int, int]:
        """Grid cell (i, j) of a flattened index."""
        if not 0 <= index < self.size:
            raise IndexError(f"Index {index} is outside a vector of length {self.size}.")
        return divmod(index, self.width)

    def flatten(self, grid: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Flatten a grid of this shape in row-major order.

        Returns a view of the grid when its storage is already C-contiguous
        float64, otherwise a copy.
        """
        array = np.asarray(grid, dtype=np.float64)
        if array.shape != (self.height, self.width):
            raise DimensionMismatchError(
                f"Grid of shape {array.shape} does not match {self.height}x{self.width}."
            )
        return array.ravel(order="C")

    def reshape(self, vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Reconstitute a grid of this shape from its flattened vector."""
        array = np.asarray(vector, dtype=np.float64)
        if array.ndim != 1:
            raise DimensionMismatchError(f"Expected a 1D vector, got an array with {array.ndim} dimensions.")
        if array.size != self.size:
            raise DimensionMismatchError(
                f"Vector of length {array.size} cannot be reshaped to "
                f"{self.height}x{self.width} (= {self.size})."
            )
        return array.reshape((self.height, self.width), order="C")


def flatten(grid: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Flatten a 2D grid into a vector of length height*width (row-major)."""
    return GridShape.of(grid).flatten(grid)


def reshape(vector: npt.NDArray[np.float64], height: int, width: int) -> npt.NDArray[np.float64]:
    """Inverse of :func:`flatten`."""
    return GridShape(height, width).reshape(vector)
