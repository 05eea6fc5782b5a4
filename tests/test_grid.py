"""
Unit tests for the row-major flattening of grids.
"""

import numpy as np
import pytest

from sparseconv.errors import DimensionMismatchError
from sparseconv.model.grid import GridShape, flatten, reshape


class TestGridShape:
    """Test suite for the GridShape index mapping."""

    def test_size(self):
        assert GridShape(4, 6).size == 24

    def test_to_flat_is_row_major(self):
        shape = GridShape(3, 4)
        assert shape.to_flat(0, 0) == 0
        assert shape.to_flat(0, 3) == 3
        assert shape.to_flat(1, 0) == 4
        assert shape.to_flat(2, 3) == 11

    def test_to_grid_inverts_to_flat(self):
        shape = GridShape(3, 4)
        for index in range(shape.size):
            assert shape.to_flat(*shape.to_grid(index)) == index

    def test_out_of_range_indices(self):
        shape = GridShape(3, 4)
        with pytest.raises(IndexError):
            shape.to_flat(3, 0)
        with pytest.raises(IndexError):
            shape.to_flat(0, -1)
        with pytest.raises(IndexError):
            shape.to_grid(12)

    def test_contains(self):
        shape = GridShape(2, 2)
        assert shape.contains(1, 1)
        assert not shape.contains(2, 0)
        assert not shape.contains(-1, 0)

    @pytest.mark.parametrize("height, width", [(0, 3), (3, 0), (-1, 2)])
    def test_non_positive_dimensions(self, height, width):
        with pytest.raises(DimensionMismatchError):
            GridShape(height, width)

    def test_of_rejects_non_2d(self):
        with pytest.raises(DimensionMismatchError):
            GridShape.of(np.zeros(5))


class TestFlattenReshape:
    """Test suite for flatten/reshape."""

    def test_round_trip_identity(self, random_grid):
        height, width = random_grid.shape
        restored = reshape(flatten(random_grid), height, width)
        assert np.array_equal(restored, random_grid)

    def test_flatten_index_convention(self):
        grid = np.arange(12, dtype=np.float64).reshape(3, 4)
        vector = flatten(grid)
        shape = GridShape(3, 4)
        for i in range(3):
            for j in range(4):
                assert vector[shape.to_flat(i, j)] == grid[i, j]

    def test_flatten_is_a_view_for_contiguous_grids(self, random_grid):
        vector = flatten(random_grid)
        assert np.shares_memory(vector, random_grid)

    def test_flatten_copies_non_contiguous_grids(self, random_grid):
        transposed = random_grid.T
        vector = flatten(transposed)
        assert np.array_equal(vector, np.ascontiguousarray(transposed).ravel())

    def test_reshape_rejects_wrong_length(self):
        with pytest.raises(DimensionMismatchError):
            reshape(np.zeros(11), 3, 4)

    def test_reshape_rejects_2d_input(self):
        with pytest.raises(DimensionMismatchError):
            reshape(np.zeros((3, 4)), 3, 4)

    def test_shape_flatten_rejects_other_shape(self):
        with pytest.raises(DimensionMismatchError):
            GridShape(4, 3).flatten(np.zeros((3, 4)))
