"""
K-Means Clustering Engine for Color Compression

Lloyd iterations over RGB pixel vectors with a fixed iteration count.

Objective Function: J(V) = Σ Σ ||xn - vl||²

Each iteration runs two strictly ordered steps:
    1. Assignment: every pixel goes to its nearest centroid (Euclidean
       distance in RGB, lowest index wins ties).
    2. Update: every non-empty cluster's centroid becomes the mean of its
       pixels. Empty clusters keep their previous centroid.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..config import CompressionConfig
from ..exceptions import InvalidParameter
from .arrays import (
    CentroidsLike,
    PixelsLike,
    as_centroid_array,
    as_pixel_array,
)
from .initializer import RandomState, initialize_centroids


logger = logging.getLogger(__name__)

# callback(iteration, labels, centroids) -> True to stop after this iteration
IterationCallback = Callable[[int, np.ndarray, np.ndarray], Optional[bool]]


# ============================================================================
# Results
# ============================================================================

@dataclass
class KMeansResult:
    """
    Results from a clustering run.
    """
    labels: np.ndarray
    """Cluster index of each pixel. Shape: (N,)"""

    centroids: np.ndarray
    """Final means, unrounded. Shape: (K, 3), dtype float64"""

    inertia: float
    """Objective function J(V) for the final labels and centroids."""

    n_iter: int
    """Number of assignment/update iterations actually run."""

    converged: bool
    """Whether the last assignment step left every label unchanged."""

    inertia_history: List[float] = field(default_factory=list)
    """Inertia after each completed iteration."""

    def cluster_sizes(self) -> np.ndarray:
        """
        Count pixels assigned to each cluster.

        Returns:
            counts: Pixel count per cluster, shape (K,)
        """
        return np.bincount(self.labels, minlength=len(self.centroids))

    def reshape_labels(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Reshape flat labels to 2D image shape.

        Args:
            shape: (H, W) image dimensions

        Returns:
            labels_2d: (H, W) cluster labels
        """
        return self.labels.reshape(shape)


# ============================================================================
# Algorithm Steps
# ============================================================================

def assign_pixels(
    pixels: np.ndarray,
    centroids: np.ndarray,
    return_distances: bool = False
):
    """
    Assignment step: label each pixel with its nearest centroid.

    Centroids are scanned in index order and a centroid only replaces the
    current best when strictly closer, so equal distances keep the lower
    index. Only one distance column is held at a time, keeping memory at
    O(N + K) rather than O(N * K).

    Args:
        pixels: Pixel colors as float64, shape (N, 3)
        centroids: Current centroids, shape (K, 3). Not modified.
        return_distances: Also return the distance to the chosen centroid

    Returns:
        labels: Cluster index per pixel, shape (N,)
        distances: Euclidean distance to the assigned centroid, shape (N,).
            Only returned when return_distances is True.
    """
    n_pixels = len(pixels)
    best = np.full(n_pixels, np.inf)
    labels = np.zeros(n_pixels, dtype=np.intp)

    for k, centroid in enumerate(centroids):
        diff = pixels - centroid
        distance = np.sqrt(np.einsum('ij,ij->i', diff, diff))
        closer = distance < best
        best[closer] = distance[closer]
        labels[closer] = k

    if return_distances:
        return labels, best
    return labels


def update_centroids(
    pixels: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray
) -> np.ndarray:
    """
    Update step: move each non-empty centroid to the mean of its pixels.

    Modifies centroids in place. A centroid with no assigned pixels keeps
    its previous coordinates; it is not reseeded.

    Args:
        pixels: Pixel colors as float64, shape (N, 3)
        labels: Cluster index per pixel, shape (N,)
        centroids: Centroid table to update, shape (K, 3)

    Returns:
        counts: Number of pixels per cluster, shape (K,)
    """
    n_clusters = len(centroids)
    counts = np.bincount(labels, minlength=n_clusters)

    sums = np.empty((n_clusters, pixels.shape[1]))
    for channel in range(pixels.shape[1]):
        sums[:, channel] = np.bincount(
            labels, weights=pixels[:, channel], minlength=n_clusters
        )

    non_empty = counts > 0
    centroids[non_empty] = sums[non_empty] / counts[non_empty, np.newaxis]

    return counts


def compute_inertia(
    pixels: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray
) -> float:
    """
    Compute the k-means objective J(V).

    Args:
        pixels: Pixel colors, shape (N, 3)
        labels: Cluster assignments, shape (N,)
        centroids: Cluster centers, shape (K, 3)

    Returns:
        inertia: Sum of squared distances from each pixel to its centroid
    """
    diff = np.asarray(pixels, dtype=np.float64) - centroids[labels]
    return float(np.einsum('ij,ij->', diff, diff))


# ============================================================================
# Iteration Loop
# ============================================================================

def run_kmeans(
    pixels: PixelsLike,
    centroids: CentroidsLike,
    n_clusters: int,
    n_iter: int,
    stop_on_convergence: bool = False,
    callback: Optional[IterationCallback] = None
) -> KMeansResult:
    """
    Run exactly n_iter assignment/update iterations.

    The centroid table is threaded through the whole run and updated in
    place: when a float64 ndarray is passed, the caller's array holds the
    final means afterwards and is the same object as result.centroids.

    With n_iter = 0 no update happens and the labels come from a single
    assignment pass against the initial centroids.

    Args:
        pixels: RGB pixels, shape (N, 3), values in [0, 255]
        centroids: Initial centroids, shape (K, 3)
        n_clusters: Number of clusters (K)
        n_iter: Number of iterations (T), >= 0
        stop_on_convergence: Stop early once an assignment step reproduces
            the previous labels. The result equals a full n_iter run.
        callback: Called after each iteration with (iteration, labels,
            centroids). Returning True stops the run.

    Returns:
        result: KMeansResult with labels, centroids and run statistics

    Raises:
        InvalidParameter: If n_iter < 0, K < 1, the centroid table length
            differs from K, or pixels/centroids do not have 3 channels

    Example:
        >>> pixels = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
        >>> centroids = np.array([[10.0, 10.0, 10.0], [200.0, 200.0, 200.0]])
        >>> result = run_kmeans(pixels, centroids, n_clusters=2, n_iter=3)
        >>> result.labels
        array([0, 1])
        >>> result.centroids is centroids
        True
    """
    if n_iter < 0:
        raise InvalidParameter(f"n_iter must be >= 0, got {n_iter}")
    if n_clusters < 1:
        raise InvalidParameter(f"n_clusters must be >= 1, got {n_clusters}")

    pixels = as_pixel_array(pixels)
    centroids = as_centroid_array(centroids, n_clusters)

    # Float copy made once; read-only for the whole run
    points = pixels.astype(np.float64)

    labels: Optional[np.ndarray] = None
    converged = False
    completed = 0
    history: List[float] = []

    for iteration in range(n_iter):
        new_labels = assign_pixels(points, centroids)
        converged = labels is not None and np.array_equal(new_labels, labels)
        labels = new_labels

        if converged and stop_on_convergence:
            logger.debug("Assignments stable at iteration %d, stopping", iteration + 1)
            break

        counts = update_centroids(points, labels, centroids)
        completed += 1
        history.append(compute_inertia(points, labels, centroids))

        logger.debug(
            "Iteration %d/%d: inertia=%.2f, empty clusters=%d",
            completed, n_iter, history[-1], int(np.sum(counts == 0))
        )

        if callback is not None and callback(completed, labels, centroids):
            logger.info("Run stopped by callback after %d iterations", completed)
            break

    if labels is None:
        labels = assign_pixels(points, centroids)

    inertia = compute_inertia(points, labels, centroids)

    return KMeansResult(
        labels=labels,
        centroids=centroids,
        inertia=inertia,
        n_iter=completed,
        converged=converged,
        inertia_history=history
    )


# ============================================================================
# Estimator Interface
# ============================================================================

class KMeans:
    """
    K-Means color clusterer: random initialization followed by a fixed
    number of Lloyd iterations.

    Example:
        >>> kmeans = KMeans(CompressionConfig(n_clusters=8, random_state=0))
        >>> kmeans.fit(pixels)  # pixels shape: (N, 3)
        >>> labels = kmeans.labels
        >>> means = kmeans.centroids
    """

    def __init__(
        self,
        config: Optional[CompressionConfig] = None,
        rng: RandomState = None
    ):
        """
        Initialize K-Means clusterer.

        Args:
            config: Configuration parameters. If None, uses defaults.
            rng: Seed or Generator for centroid sampling. Falls back to
                config.random_state when None.
        """
        self.config = config or CompressionConfig()
        self._rng = rng if rng is not None else self.config.random_state
        self._result: Optional[KMeansResult] = None
        self._initial_centroids: Optional[np.ndarray] = None

    def fit(
        self,
        pixels: PixelsLike,
        callback: Optional[IterationCallback] = None
    ) -> 'KMeans':
        """
        Sample initial centroids and run the iterations.

        Args:
            pixels: RGB pixels, shape (N, 3)
            callback: Optional per-iteration hook, see run_kmeans

        Returns:
            self: For method chaining
        """
        centroids = initialize_centroids(pixels, self.config.n_clusters, self._rng)
        self._initial_centroids = centroids.copy()

        self._result = run_kmeans(
            pixels,
            centroids,
            n_clusters=self.config.n_clusters,
            n_iter=self.config.n_iter,
            stop_on_convergence=self.config.stop_on_convergence,
            callback=callback
        )

        logger.info(
            "K-means finished: K=%d, iterations=%d, inertia=%.2f, converged=%s",
            self.config.n_clusters, self._result.n_iter,
            self._result.inertia, self._result.converged
        )
        return self

    @property
    def result(self) -> KMeansResult:
        """Full clustering result."""
        if self._result is None:
            raise RuntimeError("Must call fit() before accessing the result")
        return self._result

    @property
    def initial_centroids(self) -> np.ndarray:
        """Centroids as sampled, before the first update step."""
        if self._initial_centroids is None:
            raise RuntimeError("Must call fit() before accessing initial centroids")
        return self._initial_centroids

    @property
    def labels(self) -> np.ndarray:
        """Cluster assignments, shape (N,)."""
        return self.result.labels

    @property
    def centroids(self) -> np.ndarray:
        """Final means, shape (n_clusters, 3)."""
        return self.result.centroids

    @property
    def inertia(self) -> float:
        """Sum of squared distances to the assigned centroid."""
        return self.result.inertia
