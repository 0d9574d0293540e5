"""
Módulo de entrada/salida de imágenes.

Proporciona las dos operaciones que conectan K-Means con el disco:
- load_pixels: archivo de imagen -> (width, height, pixels)
- save_pixels: (width, height, pixels) -> archivo PNG/BMP/TIFF/PPM

Example:
    >>> from kmeans_compressor.data_loader import load_pixels, save_pixels
    >>>
    >>> width, height, pixels = load_pixels('image.png')
    >>> save_pixels('copy.png', width, height, pixels)
"""

from .image_codec import LOSSLESS_ENCODERS, load_pixels, save_pixels

__all__ = [
    'LOSSLESS_ENCODERS',
    'load_pixels',
    'save_pixels',
]
