"""Exceptions raised by the sparse convolution package."""


class DimensionMismatchError(ValueError):
    """
    Raised when sizes do not agree.

    Covers kernels that are not square with an odd, positive size, grids that
    are not 2D, and vectors whose length differs from ``height * width`` or
    from the dimension of the operator they are multiplied with.
    """


class CoordinateFileError(OSError):
    """Raised when a coordinate file cannot be written or parsed."""


class ImageLoadError(OSError):
    """Raised when a raster image cannot be read."""


class ImageSaveError(OSError):
    """Raised when a raster image cannot be written."""
