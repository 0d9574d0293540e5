"""
kmeans_compressor - K-Means color quantization for raster images.

Reduces the number of distinct colors in an image by clustering its pixels
in RGB space and replacing each pixel with its cluster's centroid color.

Example:
    >>> from kmeans_compressor import CompressionConfig, compress_image
    >>> config = CompressionConfig(n_clusters=16, n_iter=10, random_state=0)
    >>> result = compress_image('image.png', 'compressed_16_colors.png', config)
    >>> print(result.palette)
"""

from .config import CompressionConfig
from .exceptions import InvalidParameter, ImageIOError
from .compression import (
    CompressionResult,
    compress_pixels,
    compress_image,
    default_output_path,
    map_colors,
    palette_from_centroids,
)

__version__ = "0.1.0"

__all__ = [
    'CompressionConfig',
    'CompressionResult',
    'InvalidParameter',
    'ImageIOError',
    'compress_pixels',
    'compress_image',
    'default_output_path',
    'map_colors',
    'palette_from_centroids',
]
