"""
Módulo de visualización para la compresión por K-Means.

Proporciona utilidades para comparar imágenes originales y comprimidas
y para mostrar la paleta de colores resultante.
"""

from .image_grid import plot_image_grid, plot_compression_result, plot_palette

__all__ = ['plot_image_grid', 'plot_compression_result', 'plot_palette']
