import numpy as np
import pytest
from PIL import Image

from kmeans_compressor import ImageIOError, InvalidParameter
from kmeans_compressor.data_loader import load_pixels, save_pixels


def test_load_flattens_row_major(image_file):
    path, data = image_file

    width, height, pixels = load_pixels(path)

    assert (width, height) == (8, 8)
    assert pixels.shape == (64, 3)
    assert pixels.dtype == np.uint8
    # index = y * width + x
    np.testing.assert_array_equal(pixels[2 * 8 + 5], data[2, 5])


def test_load_drops_alpha(tmp_path):
    rgba = np.zeros((2, 3, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 10
    path = tmp_path / 'alpha.png'
    Image.fromarray(rgba).save(path)

    width, height, pixels = load_pixels(path)

    assert (width, height) == (3, 2)
    assert pixels.shape == (6, 3)
    assert np.all(pixels[:, 0] == 200)


def test_save_then_load_is_lossless(tmp_path, random_pixels):
    pixels = random_pixels[:50]
    path = tmp_path / 'out.png'

    written = save_pixels(path, 10, 5, pixels)
    width, height, loaded = load_pixels(written)

    assert (width, height) == (10, 5)
    np.testing.assert_array_equal(loaded, pixels)


def test_load_missing_file(tmp_path):
    missing = tmp_path / 'nope.png'

    with pytest.raises(ImageIOError) as excinfo:
        load_pixels(missing)

    assert excinfo.value.path == missing
    assert isinstance(excinfo.value, OSError)


def test_load_corrupt_file(tmp_path):
    path = tmp_path / 'broken.png'
    path.write_bytes(b'this is not an image')

    with pytest.raises(ImageIOError) as excinfo:
        load_pixels(path)

    assert excinfo.value.cause is not None
    assert 'broken.png' in str(excinfo.value)


def test_save_rejects_pixel_count_mismatch(tmp_path, random_pixels):
    path = tmp_path / 'out.png'

    with pytest.raises(InvalidParameter):
        save_pixels(path, 4, 4, random_pixels[:15])

    assert not path.exists()


def test_save_rejects_lossy_extension(tmp_path, random_pixels):
    with pytest.raises(InvalidParameter):
        save_pixels(tmp_path / 'out.jpg', 2, 2, random_pixels[:4])


def test_save_to_missing_directory(tmp_path, random_pixels):
    target = tmp_path / 'missing' / 'out.png'

    with pytest.raises(ImageIOError):
        save_pixels(target, 2, 2, random_pixels[:4])

    assert not target.parent.exists()


def test_save_rejects_ragged_pixels(tmp_path):
    path = tmp_path / 'out.png'

    with pytest.raises(InvalidParameter):
        save_pixels(path, 2, 1, [(0, 0, 0), (1, 2)])

    assert not path.exists()


def test_load_oversized_image(image_file, monkeypatch):
    path, _ = image_file
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 10)

    with pytest.raises(ImageIOError) as excinfo:
        load_pixels(path)

    assert isinstance(excinfo.value.cause, Image.DecompressionBombError)
