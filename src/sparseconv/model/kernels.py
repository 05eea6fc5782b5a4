from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

import numpy as np

from sparseconv.errors import DimensionMismatchError

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class Kernel:
    """
    Square convolution kernel of odd size.

    The centre weight sits at ``(radius, radius)`` and offsets range over
    ``[-radius, radius]`` in both directions. Weights are used as given: no
    normalization is applied, so sharpening and edge-detection kernels keep
    their intended gain.
    """
    weights: npt.NDArray[np.float64]
    name: str = "custom"

    def __post_init__(self) -> None:
        weights = np.array(self.weights, dtype=np.float64, order="C")
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            raise DimensionMismatchError(f"Kernel must be a square matrix, got shape {weights.shape}.")
        size = weights.shape[0]
        if size <= 0 or size % 2 == 0:
            raise DimensionMismatchError(f"Kernel size must be odd and positive, got {size}.")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', size={self.size})"

    @classmethod
    def coerce(cls, kernel: Kernel | npt.ArrayLike) -> Kernel:
        """Return ``kernel`` unchanged if it already is a Kernel, otherwise wrap it."""
        if isinstance(kernel, Kernel):
            return kernel
        return cls(np.asarray(kernel, dtype=np.float64))

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        """Maximum offset from the centre to the edge of the kernel."""
        return self.size // 2

    def weight(self, ki: int, kj: int) -> float:
        """Weight at offset (ki, kj) from the centre."""
        return float(self.weights[ki + self.radius, kj + self.radius])

    def is_symmetric(self) -> bool:
        """Whether the kernel equals its point reflection through the centre."""
        return bool(np.array_equal(self.weights, self.weights[::-1, ::-1]))


def _check_size(size: int) -> None:
    if size <= 0 or size % 2 == 0:
        raise DimensionMismatchError(f"Kernel size must be odd and positive, got {size}.")


def averaging_kernel(size: int = 3) -> Kernel:
    """Uniform smoothing kernel with all weights equal to ``1 / size**2``."""
    _check_size(size)
    return Kernel(np.full((size, size), 1.0 / (size * size)), name=f"average{size}")


def identity_kernel(size: int = 3) -> Kernel:
    """Kernel that is zero everywhere except for a unit weight at the centre."""
    _check_size(size)
    weights = np.zeros((size, size))
    weights[size // 2, size // 2] = 1.0
    return Kernel(weights, name=f"identity{size}")


def sharpening_kernel() -> Kernel:
    """The asymmetric 3x3 sharpening kernel."""
    return Kernel(
        np.array([
            [0.0, -3.0, 0.0],
            [-1.0, 9.0, -3.0],
            [0.0, -1.0, 0.0],
        ]),
        name="sharpen",
    )


def laplacian_kernel() -> Kernel:
    """The 3x3 Laplacian edge-detection kernel."""
    return Kernel(
        np.array([
            [0.0, -1.0, 0.0],
            [-1.0, 4.0, -1.0],
            [0.0, -1.0, 0.0],
        ]),
        name="laplacian",
    )


PREDEFINED_KERNELS: dict[str, Callable[[], Kernel]] = {
    "average": averaging_kernel,
    "identity": identity_kernel,
    "sharpen": sharpening_kernel,
    "laplacian": laplacian_kernel,
}
