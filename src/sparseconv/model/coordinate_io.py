"""
Coordinate File I/O
Writes and reads sparse operators and flattened vectors as coordinate text files.

Operator file::

    %%MatrixMarket matrix coordinate real general
    size:<n>
    <row> <col> <value>        (one line per stored entry, 0-based flat indices)

Vector file::

    %%Vector Image Data Matrix coordinate real general
    size:<n>
    <v0> <v1> ... <vn-1>
"""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, TextIO, Union

import numpy as np

from sparseconv.errors import CoordinateFileError
from sparseconv.operators.sparse_operator import SparseOperator

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

OPERATOR_HEADER = "%%MatrixMarket matrix coordinate real general"
VECTOR_HEADER = "%%Vector Image Data Matrix coordinate real general"
SIZE_PREFIX = "size:"

OPERATOR_VALUE_FORMAT = "%.17g"
VECTOR_VALUE_FORMAT = "%f"


def export_operator(operator: SparseOperator, path: PathLike, fmt: str = OPERATOR_VALUE_FORMAT) -> None:
    """
    Write an operator's stored entries to a coordinate file.

    Entries are written in storage order; no particular ordering is promised.

    Args:
        operator: The operator to export.
        path: Destination file.
        fmt: printf-style format of each value.

    Raises:
        CoordinateFileError: If the destination cannot be written.
    """
    logger.debug(f"Exporting {operator!r} to: {path}")
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"{OPERATOR_HEADER}\n")
            f.write(f"{SIZE_PREFIX}{operator.dimension}\n")
            for row, col, value in operator.triplets():
                f.write(f"{row} {col} {fmt % value}\n")
    except OSError as e:
        logger.error(f"Could not save sparse matrix to '{path}': {e}")
        raise CoordinateFileError(f"Could not write operator to '{path}'.") from e
    logger.info(f"Sparse matrix saved to {path}")


def export_vector(vector: npt.NDArray[np.float64], path: PathLike, fmt: str = VECTOR_VALUE_FORMAT) -> None:
    """
    Write a flattened vector to a coordinate file.

    Args:
        vector: 1D array of values.
        path: Destination file.
        fmt: printf-style format of each value. The default keeps six decimals.

    Raises:
        CoordinateFileError: If the destination cannot be written.
    """
    vector = np.asarray(vector, dtype=np.float64).ravel()
    logger.debug(f"Exporting vector of length {vector.size} to: {path}")
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"{VECTOR_HEADER}\n")
            f.write(f"{SIZE_PREFIX}{vector.size}\n")
            f.write(" ".join(fmt % value for value in vector))
            f.write("\n")
    except OSError as e:
        logger.error(f"Could not save vector to '{path}': {e}")
        raise CoordinateFileError(f"Could not write vector to '{path}'.") from e
    logger.info(f"Vector saved to {path}")


def _read_header(f: TextIO, path: PathLike) -> int:
    """Consume the comment and size lines, return the size."""
    comment = f.readline()
    if not comment.startswith("%"):
        raise CoordinateFileError(f"File '{path}' does not start with a comment header.")
    size_line = f.readline().strip()
    if not size_line.startswith(SIZE_PREFIX):
        raise CoordinateFileError(f"File '{path}' has no '{SIZE_PREFIX}' line, found '{size_line}'.")
    try:
        size = int(size_line[len(SIZE_PREFIX):])
    except ValueError as e:
        raise CoordinateFileError(f"Invalid size line '{size_line}' in '{path}'.") from e
    if size < 0:
        raise CoordinateFileError(f"Negative size {size} in '{path}'.")
    return size


def read_size(path: PathLike) -> int:
    """Return the size declared in a coordinate file's header."""
    with open(path, "r", encoding="utf-8") as f:
        return _read_header(f, path)


def read_operator(path: PathLike) -> SparseOperator:
    """
    Read an operator written by :func:`export_operator`.

    Raises:
        CoordinateFileError: If the file is malformed or an index is out of range.
    """
    rows: list[int] = []
    cols: list[int] = []
    values: list[float] = []
    with open(path, "r", encoding="utf-8") as f:
        size = _read_header(f, path)
        for line_number, line in enumerate(f, start=3):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 3:
                raise CoordinateFileError(f"Line {line_number} of '{path}' is not a 'row col value' triple.")
            try:
                row, col, value = int(fields[0]), int(fields[1]), float(fields[2])
            except ValueError as e:
                raise CoordinateFileError(f"Line {line_number} of '{path}' cannot be parsed: {line.strip()}") from e
            if not (0 <= row < size and 0 <= col < size):
                raise CoordinateFileError(
                    f"Entry ({row}, {col}) on line {line_number} of '{path}' is outside a {size}x{size} operator."
                )
            rows.append(row)
            cols.append(col)
            values.append(value)

    logger.debug(f"Read {len(values)} entries from: {path}")
    return SparseOperator.from_triplets(
        np.array(rows, dtype=np.int64),
        np.array(cols, dtype=np.int64),
        np.array(values, dtype=np.float64),
        dimension=size,
    )


def read_vector(path: PathLike) -> npt.NDArray[np.float64]:
    """
    Read a vector written by :func:`export_vector`.

    Raises:
        CoordinateFileError: If the number of values differs from the declared size.
    """
    with open(path, "r", encoding="utf-8") as f:
        size = _read_header(f, path)
        try:
            vector = np.array(f.read().split(), dtype=np.float64)
        except ValueError as e:
            raise CoordinateFileError(f"Vector values in '{path}' cannot be parsed.") from e

    if vector.size != size:
        raise CoordinateFileError(f"File '{path}' declares size {size} but holds {vector.size} values.")
    return vector
