from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

import numpy as np
import matplotlib.pyplot as plt

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.figure import Figure


def plot_grids(
    grids: Mapping[str, npt.NDArray[np.generic]],
    title: str = "Sparse convolution",
    show: bool = True,
) -> Figure:
    """
    Plot grids side by side in grayscale.

    Real-valued grids are drawn on [0, 1] and 8-bit grids on [0, 255], so
    values outside the range saturate the same way the exported images do.

    Args:
        grids: Titles mapped to 2D grids.
        title: Figure title.
        show: Call ``plt.show()`` before returning.

    Returns:
        The created figure.
    """
    if not grids:
        raise ValueError("No grids to plot.")

    plt.rcParams["figure.constrained_layout.use"] = True
    fig, axes = plt.subplots(1, len(grids), figsize=(4 * len(grids), 4), squeeze=False)

    for ax, (name, grid) in zip(axes[0], grids.items()):
        grid = np.asarray(grid)
        vmax = 255 if grid.dtype == np.uint8 else 1.0
        ax.imshow(grid, cmap="gray", vmin=0, vmax=vmax, interpolation="nearest")
        ax.set_title(name)
        ax.set_axis_off()

    fig.suptitle(title)
    if show:
        plt.show()
    return fig
