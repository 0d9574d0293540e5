"""
Centroid initialization by uniform sampling of image pixels.
"""

import logging
from typing import Union

import numpy as np

from ..exceptions import InvalidParameter
from .arrays import PixelsLike, as_pixel_array


logger = logging.getLogger(__name__)

RandomState = Union[None, int, np.random.Generator]


def make_rng(random_state: RandomState = None) -> np.random.Generator:
    """
    Normalize a seed or generator into a numpy Generator.

    Args:
        random_state: None for fresh entropy, an int seed, or an existing
            Generator (returned unchanged)

    Returns:
        rng: numpy random Generator
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def initialize_centroids(
    pixels: PixelsLike,
    n_clusters: int,
    rng: RandomState = None
) -> np.ndarray:
    """
    Pick K starting centroids by sampling pixels with replacement.

    Each centroid is the exact color of a uniformly drawn pixel. Draws are
    independent, so the same pixel (or two pixels of the same color) can
    seed several centroids; those duplicates may end up as empty clusters.

    Args:
        pixels: RGB pixels, shape (N, 3)
        n_clusters: Number of centroids to draw (K)
        rng: Seed or Generator. Pass a fixed seed for reproducible runs.

    Returns:
        centroids: Initial centroids, shape (K, 3), dtype float64

    Raises:
        InvalidParameter: If K < 1, K > N, or the pixel sequence is empty

    Example:
        >>> pixels = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
        >>> centroids = initialize_centroids(pixels, 2, rng=7)
        >>> centroids.shape
        (2, 3)
    """
    pixels = as_pixel_array(pixels)
    n_pixels = len(pixels)

    if n_clusters < 1:
        raise InvalidParameter(f"n_clusters must be >= 1, got {n_clusters}")
    if n_clusters > n_pixels:
        raise InvalidParameter(
            f"n_clusters ({n_clusters}) cannot exceed the number of pixels ({n_pixels})"
        )

    indices = make_rng(rng).integers(0, n_pixels, size=n_clusters)
    logger.debug("Initial centroids sampled from pixel indices %s", indices.tolist())

    return pixels[indices].astype(np.float64)
