"""
Utilidades de visualización para resultados de compresión.

Proporciona funciones para comparar la imagen original con la imagen
comprimida y para mostrar la paleta de colores encontrada por K-Means.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import List, Optional, Tuple

from ..compression import CompressionResult


def plot_image_grid(
    images: List[np.ndarray],
    titles: List[str],
    figsize: Tuple[int, int] = (12, 6)
) -> plt.Figure:
    """
    Crea un grid de imágenes en una sola fila.

    Args:
        images: Lista de arrays de imágenes RGB con shape (H, W, 3).
        titles: Lista de títulos para cada imagen. Debe tener la misma
                longitud que images.
        figsize: Tamaño de la figura (ancho, alto) en pulgadas.

    Returns:
        fig: Figura de matplotlib con el grid de imágenes, sin ejes visibles.

    Raises:
        ValueError: Si la longitud de images y titles no coincide.
    """
    if len(images) != len(titles):
        raise ValueError(
            f"El número de imágenes ({len(images)}) debe coincidir "
            f"con el número de títulos ({len(titles)})"
        )

    n_images = len(images)
    fig, axes = plt.subplots(1, n_images, figsize=figsize)

    # Si solo hay una imagen, axes no es un array
    if n_images == 1:
        axes = [axes]

    for ax, img, title in zip(axes, images, titles):
        ax.imshow(img)
        ax.axis('off')
        ax.set_title(title, fontsize=14, pad=10)

    plt.tight_layout()

    return fig


def plot_compression_result(
    original: np.ndarray,
    result: CompressionResult,
    width: Optional[int] = None,
    height: Optional[int] = None,
    figsize: Tuple[int, int] = (18, 6)
) -> plt.Figure:
    """
    Compara la imagen original con la comprimida.

    Muestra en una fila:
    - Columna 1: Imagen original
    - Columna 2: Imagen comprimida con K colores
    - Columna 3: Gráfico de barras con la frecuencia de cada cluster,
      coloreado con la paleta

    Args:
        original: Píxeles originales con shape (N, 3) o imagen (H, W, 3).
        result: Resultado de compress_pixels o compress_image.
        width: Ancho de la imagen. Por defecto result.width.
        height: Alto de la imagen. Por defecto result.height.
        figsize: Tamaño de la figura (ancho, alto) en pulgadas.

    Returns:
        fig: Figura de matplotlib con la comparación.

    Raises:
        ValueError: Si no se conocen las dimensiones de la imagen.

    Example:
        >>> width, height, pixels = load_pixels('image.png')
        >>> result = compress_pixels(pixels, CompressionConfig(n_clusters=8))
        >>> fig = plot_compression_result(pixels, result, width, height)
        >>> fig  # Mostrar en Marimo
    """
    width = width if width is not None else result.width
    height = height if height is not None else result.height
    if width is None or height is None:
        raise ValueError("Se requieren width y height para reconstruir la imagen")

    original_img = np.asarray(original).reshape(height, width, 3)
    compressed_img = result.pixels.reshape(height, width, 3)
    n_clusters = len(result.palette)

    fig, (ax_original, ax_compressed, ax_colors) = plt.subplots(1, 3, figsize=figsize)

    # === COLUMNA 1: Imagen Original ===
    ax_original.imshow(original_img)
    ax_original.axis('off')
    ax_original.set_title('Original', fontsize=12, pad=10)

    # === COLUMNA 2: Imagen Comprimida ===
    ax_compressed.imshow(compressed_img)
    ax_compressed.axis('off')
    ax_compressed.set_title(f'Comprimida (K={n_clusters})', fontsize=12, pad=10)

    # === COLUMNA 3: Frecuencia de cada color ===
    usage = result.color_usage()
    percentages = [entry['percentage'] for entry in usage]
    x_pos = np.arange(n_clusters)

    bars = ax_colors.bar(
        x_pos,
        percentages,
        color=result.palette / 255.0,
        edgecolor='black',
        linewidth=1.5
    )

    ax_colors.set_xlabel('Cluster', fontsize=10)
    ax_colors.set_ylabel('Frecuencia (%)', fontsize=10)
    ax_colors.set_title('Paleta', fontsize=12, pad=10)
    ax_colors.set_xticks(x_pos)
    ax_colors.set_xticklabels([f'{i}' for i in range(n_clusters)])
    ax_colors.set_ylim(0, max(percentages) * 1.1)

    for bar, percentage in zip(bars, percentages):
        ax_colors.text(
            bar.get_x() + bar.get_width() / 2.,
            bar.get_height(),
            f'{percentage:.1f}%',
            ha='center',
            va='bottom',
            fontsize=8
        )

    plt.tight_layout()

    return fig


def plot_palette(
    palette: np.ndarray,
    counts: Optional[np.ndarray] = None,
    figsize: Tuple[int, int] = (10, 2)
) -> plt.Figure:
    """
    Dibuja la paleta como una fila de muestras de color.

    Args:
        palette: Colores con shape (K, 3), valores uint8 [0-255].
        counts: Píxeles por color, shape (K,). Si se indica, se muestra
                debajo de cada muestra.
        figsize: Tamaño de la figura (ancho, alto) en pulgadas.

    Returns:
        fig: Figura de matplotlib con la paleta.
    """
    palette = np.asarray(palette, dtype=np.uint8)
    n_colors = len(palette)

    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(palette.reshape(1, n_colors, 3), aspect='auto')
    ax.set_yticks([])
    ax.set_xticks(np.arange(n_colors))

    if counts is not None:
        ax.set_xticklabels([f'#{i}\n{int(c)}' for i, c in enumerate(counts)], fontsize=8)
    else:
        ax.set_xticklabels([f'#{i}' for i in range(n_colors)], fontsize=8)

    ax.set_title(f'Paleta ({n_colors} colores)', fontsize=12)
    plt.tight_layout()

    return fig
