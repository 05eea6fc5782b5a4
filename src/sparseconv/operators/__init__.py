"""
Convolution expressed as sparse linear operators over flattened grids.
"""
from sparseconv.operators.sparse_operator import SparseOperator
from sparseconv.operators.builder import build_operator, convolution_triplets
from sparseconv.operators.applier import QuantizationMode, apply_operator, filter_grid, quantize

__all__ = [
    "SparseOperator",
    "build_operator",
    "convolution_triplets",
    "QuantizationMode",
    "apply_operator",
    "filter_grid",
    "quantize",
]
