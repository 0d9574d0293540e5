"""
Array validation shared by the initializer and the clustering engine.

Pixels travel as a flat (N, 3) uint8 array in row-major order
(index = y * width + x). Centroids travel as a (K, 3) float64 array.
"""

from typing import Sequence, Union

import numpy as np

from ..exceptions import InvalidParameter


PixelsLike = Union[np.ndarray, Sequence[Sequence[int]]]
CentroidsLike = Union[np.ndarray, Sequence[Sequence[float]]]

N_CHANNELS = 3


def as_pixel_array(pixels: PixelsLike) -> np.ndarray:
    """
    Convert a pixel sequence to a read-only (N, 3) uint8 array.

    Args:
        pixels: Array of shape (N, 3) or any sequence of RGB triples

    Returns:
        pixels: Read-only view, shape (N, 3), dtype uint8

    Raises:
        InvalidParameter: If the sequence is empty, does not have exactly
            three channels, or holds values outside the integers [0, 255]
    """
    try:
        arr = np.asarray(pixels)
    except (ValueError, TypeError) as e:
        raise InvalidParameter(f"pixels must have shape (N, {N_CHANNELS}): {e}") from e

    if arr.size == 0:
        raise InvalidParameter("pixel sequence is empty")
    if arr.ndim != 2 or arr.shape[1] != N_CHANNELS:
        raise InvalidParameter(
            f"pixels must have shape (N, {N_CHANNELS}), got {arr.shape}"
        )
    if not np.issubdtype(arr.dtype, np.number):
        raise InvalidParameter(f"pixels must be numeric, got dtype {arr.dtype}")

    if arr.dtype != np.uint8:
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidParameter(
                f"pixel values must be in [0, 255], got range "
                f"[{arr.min()}, {arr.max()}]"
            )
        if not np.issubdtype(arr.dtype, np.integer) and not np.all(arr == np.round(arr)):
            raise InvalidParameter("pixel values must be integers")
        arr = arr.astype(np.uint8)

    view = arr.view()
    view.flags.writeable = False
    return view


def as_centroid_array(centroids: CentroidsLike, n_clusters: int) -> np.ndarray:
    """
    Convert a centroid table to a writable (K, 3) float64 array.

    A float64 ndarray is returned as-is so that updates are visible to the
    caller; anything else is copied into a new array.

    Args:
        centroids: Centroid table, shape (K, 3)
        n_clusters: Expected number of centroids (K)

    Returns:
        centroids: Array of shape (K, 3), dtype float64

    Raises:
        InvalidParameter: If the table length differs from K, the channel
            count is not 3, or a coordinate is not finite or lies
            outside [0, 255]
    """
    try:
        arr = np.asarray(centroids, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise InvalidParameter(f"centroids must have shape (K, {N_CHANNELS}): {e}") from e
    if not arr.flags.writeable:
        arr = arr.copy()

    if arr.ndim != 2 or arr.shape[1] != N_CHANNELS:
        raise InvalidParameter(
            f"centroids must have shape (K, {N_CHANNELS}), got {arr.shape}"
        )
    if arr.shape[0] != n_clusters:
        raise InvalidParameter(
            f"expected {n_clusters} centroids, got {arr.shape[0]}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidParameter("centroid coordinates must be finite")
    if arr.min() < 0 or arr.max() > 255:
        raise InvalidParameter(
            f"centroid coordinates must be in [0, 255], got range "
            f"[{arr.min()}, {arr.max()}]"
        )

    return arr
