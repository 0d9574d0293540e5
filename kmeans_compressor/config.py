"""
Compression Configuration

Parameters for a single K-means color compression run.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidParameter


# Encoders accepted for the compressed output. All of them are lossless.
LOSSLESS_FORMATS = ('png', 'bmp', 'tiff', 'tif', 'ppm')


@dataclass
class CompressionConfig:
    """
    Configuration for K-means color compression.

    Attributes:
        n_clusters: Number of colors (K) in the compressed image
        n_iter: Number of assignment/update iterations (T)
        random_state: Seed for centroid sampling. None draws fresh entropy.
        stop_on_convergence: Stop once assignments no longer change
        output_format: Extension of the compressed image file
    """
    n_clusters: int = 16
    """Number of clusters (K). Must be >= 1 and <= number of pixels."""

    n_iter: int = 10
    """Fixed number of iterations. 0 only assigns against the initial centroids."""

    random_state: Optional[int] = None
    """Random seed for reproducible centroid initialization."""

    stop_on_convergence: bool = False
    """Opt-in early stop when an iteration leaves every assignment unchanged."""

    output_format: str = 'png'
    """Lossless output encoder: 'png', 'bmp', 'tiff' or 'ppm'."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.n_clusters < 1:
            raise InvalidParameter(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.n_iter < 0:
            raise InvalidParameter(f"n_iter must be >= 0, got {self.n_iter}")

        self.output_format = self.output_format.lower().lstrip('.')
        if self.output_format not in LOSSLESS_FORMATS:
            raise InvalidParameter(
                f"output_format must be one of {LOSSLESS_FORMATS}, got '{self.output_format}'"
            )
