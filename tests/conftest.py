import matplotlib

matplotlib.use('Agg')

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def checkerboard():
    """2x2 image alternating black and white, row-major."""
    return np.array(
        [[0, 0, 0], [255, 255, 255], [0, 0, 0], [255, 255, 255]],
        dtype=np.uint8
    )


@pytest.fixture
def random_pixels():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(500, 3), dtype=np.uint8)


@pytest.fixture
def blobs():
    """Three well separated color groups of 50 pixels each."""
    rng = np.random.default_rng(7)
    centers = np.array([[30, 30, 30], [128, 200, 60], [220, 40, 180]])
    groups = [
        np.clip(center + rng.integers(-10, 11, size=(50, 3)), 0, 255)
        for center in centers
    ]
    return np.vstack(groups).astype(np.uint8)


@pytest.fixture
def image_file(tmp_path):
    """8x8 PNG filled with random colors."""
    rng = np.random.default_rng(99)
    data = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
    path = tmp_path / 'image.png'
    Image.fromarray(data).save(path)
    return path, data
