"""
Filtering Pipeline
==================
Runs the full sequence on one grayscale image:

1. Load the image as a normalized grid and add uniform noise.
2. Smooth the noised image with the averaging operator A1.
3. Sharpen the original image with A2 and report its symmetry defect.
4. Detect edges of the original image with the Laplacian operator A3.
5. Export A1, A2, A3 and the original/noised vectors as coordinate files.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from sparseconv import config as cfg
from sparseconv.model.coordinate_io import export_operator, export_vector
from sparseconv.model.grid import GridShape
from sparseconv.model.image_io import load_grayscale, save_grayscale
from sparseconv.model.kernels import averaging_kernel, laplacian_kernel, sharpening_kernel
from sparseconv.model.noise import add_uniform_noise
from sparseconv.operators import QuantizationMode, SparseOperator, build_operator, filter_grid, quantize

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Grids and operators produced by one run."""
    shape: GridShape
    original: npt.NDArray[np.float64]
    noised: npt.NDArray[np.float64]
    operators: dict[str, SparseOperator] = field(default_factory=dict)
    outputs: dict[str, npt.NDArray[np.uint8]] = field(default_factory=dict)


def _report_operator(name: str, operator: SparseOperator, check_symmetry: bool) -> None:
    logger.info(f"{name} nonzero numbers is {operator.nonzero_count()}")
    if check_symmetry:
        logger.info(f"{name} rows: {operator.shape[0]}\tcolumns: {operator.shape[1]}")
        logger.info(
            f"Check if {name} is symmetric by norm value of its difference with transpose: "
            f"{operator.symmetry_defect()}"
        )


def run_pipeline(
    config: cfg.PipelineConfig,
    rng: np.random.Generator | None = None,
) -> PipelineResult:
    """
    Run the filtering pipeline described in the module docstring.

    Args:
        config: Settings of the run.
        rng: Random generator for the noise; defaults to one seeded with ``config.seed``.

    Raises:
        DimensionMismatchError: If the smoothing kernel size is not odd and positive.
        ValueError: If the noise amplitude is negative.
        OSError: If the image cannot be read or an output cannot be written.

    Returns:
        The produced grids and operators.
    """
    # Invalid settings must fail before anything is written
    smoothing = averaging_kernel(config.kernel_size)
    if config.noise_amplitude < 0:
        raise ValueError(f"Noise amplitude must be non-negative, got {config.noise_amplitude}.")

    if rng is None:
        rng = np.random.default_rng(config.seed)
    config.output_dir.mkdir(parents=True, exist_ok=True)

    original = load_grayscale(config.image_path)
    shape = GridShape.of(original)
    logger.info(f"The Image Matrix Size Is: {shape.height}*{shape.width}={shape.size}")

    noised = add_uniform_noise(original, rng, amplitude=config.noise_amplitude)
    result = PipelineResult(shape=shape, original=original, noised=noised)

    result.outputs["noised"] = quantize(noised, QuantizationMode.CLAMP_THEN_SCALE)
    save_grayscale(result.outputs["noised"], config.output_path(cfg.NOISED_IMAGE_NAME))

    v = shape.flatten(original)
    w = shape.flatten(noised)
    logger.info(f"Original image vector v's size: {v.size}")
    logger.info(f"Noisy image vector w's size: {w.size}")
    logger.info(f"Euclidean norm of v is: {np.linalg.norm(v)}")

    steps = (
        ("A1", smoothing, w, "smoothed", cfg.SMOOTHED_IMAGE_NAME, False),
        ("A2", sharpening_kernel(), v, "sharpened", cfg.SHARPENED_IMAGE_NAME, True),
        ("A3", laplacian_kernel(), v, "edges", cfg.EDGE_DETECTION_IMAGE_NAME, True),
    )
    for name, kernel, vector, output_name, image_name, check_symmetry in steps:
        operator = build_operator(kernel, shape.height, shape.width, parallel=config.parallel)
        _report_operator(name, operator, check_symmetry)
        result.operators[name] = operator

        output = filter_grid(operator, vector, shape, mode=QuantizationMode.SCALE_THEN_CLAMP)
        save_grayscale(output, config.output_path(image_name))
        result.outputs[output_name] = output

    for name, operator in result.operators.items():
        export_operator(operator, config.output_path(cfg.OPERATOR_FILE_NAMES[name]))
    export_vector(v, config.output_path(cfg.ORIGINAL_VECTOR_NAME))
    export_vector(w, config.output_path(cfg.NOISED_VECTOR_NAME))

    return result
