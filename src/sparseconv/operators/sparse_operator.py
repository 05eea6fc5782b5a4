from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

import numpy as np
import scipy as sp
import scipy.sparse.linalg

from sparseconv.errors import DimensionMismatchError

if TYPE_CHECKING:
    import numpy.typing as npt


class SparseOperator:
    """
    Square sparse linear operator over flattened grids.

    Wraps a CSR matrix assembled once from (row, col, value) triples. Stored
    entries with value 0.0 are kept, so :meth:`nonzero_count` reports stored
    entries rather than entries with a non-zero value.
    """

    def __init__(self, matrix: sp.sparse.csr_matrix) -> None:
        """
        Initialize the operator from an assembled matrix.

        Args:
            matrix: Square sparse matrix. It is converted to CSR if needed.
        """
        if matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatchError(f"Operator must be square, got shape {matrix.shape}.")
        self._matrix: sp.sparse.csr_matrix = sp.sparse.csr_matrix(matrix, dtype=np.float64)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dimension={self.dimension}, nnz={self.nonzero_count()})"

    @classmethod
    def from_triplets(
        cls,
        rows: npt.NDArray[np.int64],
        cols: npt.NDArray[np.int64],
        values: npt.NDArray[np.float64],
        dimension: int,
    ) -> SparseOperator:
        """
        Assemble an operator from triples in a single batch.

        Duplicate (row, col) pairs are summed (COO tolerates duplicates;
        ``.tocsr()`` sums them). Insertion order does not affect the result.

        Args:
            rows: Row index of each entry.
            cols: Column index of each entry.
            values: Value of each entry.
            dimension: Number of rows and columns.

        Returns:
            The assembled operator.
        """
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        values = np.asarray(values, dtype=np.float64)
        if not rows.shape == cols.shape == values.shape:
            raise DimensionMismatchError(
                f"Triple arrays differ in length: rows {rows.shape}, cols {cols.shape}, values {values.shape}."
            )

        matrix = sp.sparse.coo_matrix(
            (values, (rows, cols)),
            shape=(dimension, dimension),
            dtype=np.float64,
        ).tocsr()
        matrix.sort_indices()
        return cls(matrix)

    @property
    def matrix(self) -> sp.sparse.csr_matrix:
        """The underlying CSR matrix."""
        return self._matrix

    @property
    def shape(self) -> tuple[int, int]:
        return self._matrix.shape

    @property
    def dimension(self) -> int:
        """Number of rows (and columns)."""
        return self._matrix.shape[0]

    def nonzero_count(self) -> int:
        """Number of stored entries."""
        return int(self._matrix.nnz)

    def row_nonzero_count(self, row: int) -> int:
        """Number of stored entries in a single row."""
        indptr = self._matrix.indptr
        return int(indptr[row + 1] - indptr[row])

    def multiply(self, vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Sparse matrix-vector product.

        Rows without stored entries produce 0.

        Raises:
            DimensionMismatchError: If the vector length differs from the operator dimension.
        """
        vector = np.asarray(vector, dtype=np.float64)
        if vector.ndim != 1 or vector.size != self.dimension:
            raise DimensionMismatchError(
                f"Cannot multiply a {self.dimension}x{self.dimension} operator "
                f"with a vector of shape {vector.shape}."
            )
        return np.asarray(self._matrix.dot(vector), dtype=np.float64)

    def __matmul__(self, vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.multiply(vector)

    def transpose(self) -> SparseOperator:
        """Operator with rows and columns swapped."""
        transposed = self._matrix.transpose().tocsr()
        transposed.sort_indices()
        return SparseOperator(transposed)

    @property
    def T(self) -> SparseOperator:
        return self.transpose()

    def norm(self) -> float:
        """Frobenius norm of the stored values."""
        return float(sp.sparse.linalg.norm(self._matrix))

    def difference_norm(self, other: SparseOperator) -> float:
        """Frobenius norm of ``self - other``."""
        if self.shape != other.shape:
            raise DimensionMismatchError(f"Operators differ in shape: {self.shape} vs {other.shape}.")
        return float(sp.sparse.linalg.norm(self._matrix - other.matrix))

    def allclose(self, other: SparseOperator, rtol: float = 1e-9) -> bool:
        """
        Approximate equality relative to the larger of the two norms.

        ``||self - other|| <= rtol * max(||self||, ||other||)``; two all-zero
        operators compare equal.
        """
        scale = max(self.norm(), other.norm())
        return self.difference_norm(other) <= rtol * scale

    def symmetry_defect(self) -> float:
        """``||A - A^T||``, zero for a symmetric operator."""
        return self.difference_norm(self.transpose())

    def is_symmetric(self, rtol: float = 1e-9) -> bool:
        """Whether the operator equals its transpose up to ``rtol``."""
        return self.allclose(self.transpose(), rtol=rtol)

    def triplets(self) -> Iterator[tuple[int, int, float]]:
        """Yield (row, col, value) of every stored entry in storage order."""
        coo = self._matrix.tocoo()
        for row, col, value in zip(coo.row, coo.col, coo.data):
            yield int(row), int(col), float(value)

    def to_dense(self) -> npt.NDArray[np.float64]:
        return self._matrix.toarray()
