"""
Command-Line Entry Point
========================
Parses the command line, configures logging and runs the pipeline.

Usage:
    $ python -m sparseconv image.png --output-dir out --seed 0
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from sparseconv import config as cfg
from sparseconv.errors import DimensionMismatchError
from sparseconv.logging_config import setup_logging
from sparseconv.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sparseconv",
        description="Smooth, sharpen and edge-detect a grayscale image with sparse convolution operators.",
    )
    parser.add_argument("image_path", type=Path, help="Input image (converted to grayscale)")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Directory for images and .mtx files")
    parser.add_argument("--seed", type=int, default=None, help="Seed of the noise generator")
    parser.add_argument(
        "--noise-amplitude",
        type=int,
        default=cfg.NOISE_AMPLITUDE,
        help=f"Maximum absolute noise in 8-bit levels (default: {cfg.NOISE_AMPLITUDE})",
    )
    parser.add_argument(
        "--kernel-size",
        type=int,
        default=cfg.KERNEL_SIZE,
        help=f"Size of the averaging kernel (default: {cfg.KERNEL_SIZE})",
    )
    parser.add_argument("--parallel", action="store_true", help="Build operators with the row-parallel kernel")
    parser.add_argument("--show", action="store_true", help="Plot the produced images")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    config = cfg.PipelineConfig(
        image_path=args.image_path,
        output_dir=args.output_dir,
        seed=args.seed,
        noise_amplitude=args.noise_amplitude,
        kernel_size=args.kernel_size,
        parallel=args.parallel,
        show=args.show,
    )

    try:
        result = run_pipeline(config)
    except DimensionMismatchError as e:
        logger.error(f"Invalid kernel: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid setting: {e}")
        return 1
    except OSError as e:
        # ImageLoadError, ImageSaveError, CoordinateFileError and output directory failures
        logger.error(f"Error: {e}")
        return 1

    if config.show:
        from sparseconv.view.preview import plot_grids
        plot_grids(result.outputs, title=config.image_path.name)

    return 0
