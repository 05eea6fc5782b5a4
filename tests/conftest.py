import matplotlib
import numpy as np
import pytest

from sparseconv.logging_config import reset_logging

matplotlib.use("Agg")


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def random_grid(rng):
    """A 7x5 grid of intensities in [0, 1]."""
    return rng.random((7, 5))


@pytest.fixture
def reset_package_logger():
    """Close handlers installed by setup_logging so they do not outlive pytest's captured streams."""
    yield
    reset_logging()
