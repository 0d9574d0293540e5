"""
Color Compression Pipeline

Maps K-means results back to pixel colors and wires the image codec,
the initializer and the clustering engine into a single run.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .config import CompressionConfig
from .data_loader import load_pixels, save_pixels
from .exceptions import InvalidParameter
from .kmeans import KMeans, KMeansResult
from .kmeans.arrays import PixelsLike, as_pixel_array
from .kmeans.initializer import RandomState
from .kmeans.kmeans import IterationCallback


logger = logging.getLogger(__name__)


# ============================================================================
# Output Color Mapping
# ============================================================================

def palette_from_centroids(centroids: np.ndarray) -> np.ndarray:
    """
    Round centroids to displayable colors.

    Channels are rounded half-up to the nearest integer and clamped to
    [0, 255].

    Args:
        centroids: Final means, shape (K, 3)

    Returns:
        palette: One color per cluster, shape (K, 3), dtype uint8
    """
    centroids = np.asarray(centroids, dtype=np.float64)
    rounded = np.floor(centroids + 0.5)
    return np.clip(rounded, 0, 255).astype(np.uint8)


def map_colors(labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Replace every pixel by its cluster's rounded color.

    Pure function: the same (labels, centroids) pair always gives the
    same bytes.

    Args:
        labels: Cluster index per pixel, shape (N,)
        centroids: Final means (or an already rounded palette), shape (K, 3)

    Returns:
        pixels: Output colors, shape (N, 3), dtype uint8

    Raises:
        InvalidParameter: If a label does not index a centroid
    """
    palette = palette_from_centroids(centroids)
    labels = np.asarray(labels)

    if labels.size and (labels.min() < 0 or labels.max() >= len(palette)):
        raise InvalidParameter(
            f"labels must be in [0, {len(palette) - 1}], got range "
            f"[{labels.min()}, {labels.max()}]"
        )

    return palette[labels]


# ============================================================================
# Results
# ============================================================================

@dataclass
class CompressionResult:
    """
    Output of a compression run.
    """
    pixels: np.ndarray
    """Compressed pixels, row-major. Shape: (N, 3), dtype uint8"""

    palette: np.ndarray
    """Rounded cluster colors. Shape: (K, 3), dtype uint8"""

    kmeans: KMeansResult
    """Clustering result with unrounded centroids and run statistics."""

    width: Optional[int] = None
    height: Optional[int] = None
    output_path: Optional[Path] = None

    @property
    def labels(self) -> np.ndarray:
        """Cluster index per pixel, shape (N,)."""
        return self.kmeans.labels

    @property
    def n_colors(self) -> int:
        """Number of distinct colors actually present in the output."""
        return len(np.unique(self.pixels, axis=0))

    def color_usage(self) -> List[Dict[str, Any]]:
        """
        Pixel count and share of every cluster.

        Returns:
            usage: One dict per cluster with keys 'color_label',
                'color_rgb', 'count' and 'percentage', sorted by label
        """
        counts = self.kmeans.cluster_sizes()
        total = counts.sum()

        usage = []
        for label, count in enumerate(counts):
            usage.append({
                'color_label': label,
                'color_rgb': self.palette[label].astype(int).tolist(),
                'count': int(count),
                'percentage': float(count) / total * 100
            })
        return usage


# ============================================================================
# Pipeline
# ============================================================================

def default_output_path(
    n_clusters: int,
    directory: Union[str, Path] = '.',
    ext: str = 'png'
) -> Path:
    """
    Build the conventional output name, compressed_<K>_colors.<ext>.

    Args:
        n_clusters: Number of colors (K)
        directory: Directory for the file
        ext: File extension without dot

    Returns:
        path: Output path
    """
    return Path(directory) / f"compressed_{n_clusters}_colors.{ext.lstrip('.')}"


def compress_pixels(
    pixels: PixelsLike,
    config: Optional[CompressionConfig] = None,
    rng: RandomState = None,
    callback: Optional[IterationCallback] = None
) -> CompressionResult:
    """
    Cluster pixel colors and map every pixel to its cluster color.

    Args:
        pixels: RGB pixels, shape (N, 3)
        config: Compression parameters. If None, uses defaults.
        rng: Seed or Generator; overrides config.random_state
        callback: Optional per-iteration hook, see run_kmeans

    Returns:
        result: CompressionResult with output pixels and palette

    Raises:
        InvalidParameter: If K exceeds the number of pixels or the
            pixels are malformed

    Example:
        >>> pixels = np.array([[100, 150, 200]], dtype=np.uint8)
        >>> result = compress_pixels(pixels, CompressionConfig(n_clusters=1, n_iter=1))
        >>> result.pixels
        array([[100, 150, 200]], dtype=uint8)
    """
    config = config or CompressionConfig()
    pixels = as_pixel_array(pixels)

    if config.n_clusters > len(pixels):
        raise InvalidParameter(
            f"n_clusters ({config.n_clusters}) cannot exceed the number of pixels ({len(pixels)})"
        )

    kmeans = KMeans(config, rng=rng).fit(pixels, callback=callback)
    palette = palette_from_centroids(kmeans.centroids)

    return CompressionResult(
        pixels=map_colors(kmeans.labels, palette),
        palette=palette,
        kmeans=kmeans.result
    )


def compress_image(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[CompressionConfig] = None,
    rng: RandomState = None
) -> CompressionResult:
    """
    Load an image, compress its colors and save the result.

    Nothing is written unless loading and clustering both succeed.

    Args:
        input_path: Image to compress
        output_path: Destination. Defaults to compressed_<K>_colors.<ext>
            in the current directory.
        config: Compression parameters. If None, uses defaults.
        rng: Seed or Generator; overrides config.random_state

    Returns:
        result: CompressionResult with width, height and output_path set

    Raises:
        ImageIOError: If the input cannot be read or the output written
        InvalidParameter: If the parameters do not fit the image
    """
    config = config or CompressionConfig()
    if output_path is None:
        output_path = default_output_path(config.n_clusters, ext=config.output_format)

    width, height, pixels = load_pixels(input_path)
    result = compress_pixels(pixels, config, rng=rng)

    result.width = width
    result.height = height
    result.output_path = save_pixels(output_path, width, height, result.pixels)

    logger.info(
        "Compressed %s to %d colors in %d iterations",
        input_path, result.n_colors, result.kmeans.n_iter
    )
    return result
