"""
Configuration & Constants
=========================
This module is the central registry for the pipeline's constants and output
file names.

Why is this file needed?
------------------------
1. Abstraction: output names and noise parameters are not hardcoded in the
   pipeline steps.
2. The command line builds a single ``PipelineConfig`` that is passed down,
   so every step reads the same settings.

Exports:
    KERNEL_SIZE (int): Size of the predefined kernels.
    NOISE_AMPLITUDE (int): Maximum absolute noise, in 8-bit intensity levels.
    PipelineConfig: Settings of one pipeline run.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


KERNEL_SIZE: int = 3
NOISE_AMPLITUDE: int = 50
INTENSITY_LEVELS: int = 255

NOISED_IMAGE_NAME: str = "NoisedImage.png"
SMOOTHED_IMAGE_NAME: str = "smoothedImage.png"
SHARPENED_IMAGE_NAME: str = "sharpenedImage.png"
EDGE_DETECTION_IMAGE_NAME: str = "edgeDetectionImage.png"

OPERATOR_FILE_NAMES: dict[str, str] = {
    "A1": "A1.mtx",
    "A2": "A2.mtx",
    "A3": "A3.mtx",
}
ORIGINAL_VECTOR_NAME: str = "v.mtx"
NOISED_VECTOR_NAME: str = "w.mtx"


@dataclass
class PipelineConfig:
    """Settings of one pipeline run."""
    image_path: Path
    output_dir: Path = Path(".")
    seed: Optional[int] = None
    noise_amplitude: int = NOISE_AMPLITUDE
    kernel_size: int = KERNEL_SIZE
    parallel: bool = False
    show: bool = False

    def output_path(self, name: str) -> Path:
        """Return the path of an output file inside the output directory."""
        return self.output_dir / name
