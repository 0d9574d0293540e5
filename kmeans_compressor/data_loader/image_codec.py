"""
Lectura y escritura de imágenes como arreglos planos de píxeles.

Convierte archivos de imagen en la secuencia de píxeles RGB que consume
K-Means, en orden row-major (índice = y * width + x), y la operación
inversa para guardar la imagen comprimida en un formato sin pérdida.
"""

import io
import logging
import os
from pathlib import Path
from typing import Dict, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..exceptions import ImageIOError, InvalidParameter
from ..kmeans.arrays import PixelsLike, as_pixel_array


logger = logging.getLogger(__name__)

# Extensión -> formato de Pillow. Solo codificadores sin pérdida.
LOSSLESS_ENCODERS: Dict[str, str] = {
    '.png': 'PNG',
    '.bmp': 'BMP',
    '.tif': 'TIFF',
    '.tiff': 'TIFF',
    '.ppm': 'PPM',
}


def load_pixels(path: Union[str, Path]) -> Tuple[int, int, np.ndarray]:
    """
    Carga una imagen y la aplana a una lista de píxeles RGB.

    Las imágenes con canal alfa o paleta se convierten a RGB; el alfa
    se descarta.

    Args:
        path: Ruta al archivo de imagen.

    Returns:
        Tupla (width, height, pixels) donde pixels tiene shape
        (width * height, 3) y dtype uint8.

    Raises:
        ImageIOError: Si el archivo no existe o el formato no se reconoce
                      o está corrupto.

    Example:
        >>> width, height, pixels = load_pixels('image.png')
        >>> pixels.shape == (width * height, 3)
        True
    """
    path = Path(path)

    if not path.is_file():
        raise ImageIOError("Image file not found", path)

    try:
        with Image.open(path) as img:
            rgb = img.convert('RGB')
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise ImageIOError("Cannot read image", path, e) from e

    width, height = rgb.size
    pixels = np.asarray(rgb, dtype=np.uint8).reshape(-1, 3)

    logger.info("Loaded %s (%dx%d, %d pixels)", path, width, height, len(pixels))
    return width, height, pixels


def save_pixels(
    path: Union[str, Path],
    width: int,
    height: int,
    pixels: PixelsLike
) -> Path:
    """
    Guarda una lista de píxeles RGB como imagen sin pérdida.

    El formato se deduce de la extensión (.png, .bmp, .tif/.tiff, .ppm).
    La imagen se codifica completa en memoria y se escribe en un archivo
    temporal que luego reemplaza al destino, de modo que un fallo nunca
    deja un archivo parcial.

    Args:
        path: Ruta de salida.
        width: Ancho de la imagen en píxeles.
        height: Alto de la imagen en píxeles.
        pixels: Píxeles en orden row-major, shape (width * height, 3).

    Returns:
        Ruta del archivo escrito.

    Raises:
        InvalidParameter: Si el número de píxeles no coincide con
                          width * height o la extensión no es sin pérdida.
        ImageIOError: Si no se puede escribir el archivo.
    """
    path = Path(path)

    if width < 1 or height < 1:
        raise InvalidParameter(f"Image dimensions must be positive, got {width}x{height}")

    pixels = as_pixel_array(pixels)
    if len(pixels) != width * height:
        raise InvalidParameter(
            f"Pixel count ({len(pixels)}) does not match {width}x{height} = {width * height}"
        )

    encoder = LOSSLESS_ENCODERS.get(path.suffix.lower())
    if encoder is None:
        raise InvalidParameter(
            f"Unsupported output extension '{path.suffix}', "
            f"expected one of {sorted(LOSSLESS_ENCODERS)}"
        )

    # Codificar en memoria antes de tocar el disco
    image = Image.fromarray(np.ascontiguousarray(pixels.reshape(height, width, 3)))
    buffer = io.BytesIO()
    image.save(buffer, format=encoder)

    tmp_path = path.with_name(path.name + '.tmp')
    try:
        tmp_path.write_bytes(buffer.getvalue())
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise ImageIOError("Cannot write image", path, e) from e

    logger.info("Saved %s (%dx%d, %s)", path, width, height, encoder)
    return path
