"""
2D image convolution as multiplication by sparse operators over flattened grids.
"""
from sparseconv.errors import CoordinateFileError, DimensionMismatchError, ImageLoadError, ImageSaveError
from sparseconv.model.grid import GridShape, flatten, reshape
from sparseconv.model.kernels import Kernel
from sparseconv.operators import (
    QuantizationMode,
    SparseOperator,
    apply_operator,
    build_operator,
    quantize,
)

__all__ = [
    "CoordinateFileError",
    "DimensionMismatchError",
    "ImageLoadError",
    "ImageSaveError",
    "GridShape",
    "flatten",
    "reshape",
    "Kernel",
    "QuantizationMode",
    "SparseOperator",
    "apply_operator",
    "build_operator",
    "quantize",
]
