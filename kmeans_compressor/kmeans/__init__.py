"""
K-Means clustering module for color compression.
"""

from .initializer import initialize_centroids, make_rng
from .kmeans import (
    KMeans,
    KMeansResult,
    assign_pixels,
    update_centroids,
    compute_inertia,
    run_kmeans,
)

__all__ = [
    'KMeans',
    'KMeansResult',
    'initialize_centroids',
    'make_rng',
    'assign_pixels',
    'update_centroids',
    'compute_inertia',
    'run_kmeans',
]
