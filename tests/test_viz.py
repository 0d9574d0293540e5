import matplotlib.pyplot as plt
import numpy as np
import pytest

from kmeans_compressor import CompressionConfig, compress_pixels
from kmeans_compressor.viz import plot_compression_result, plot_image_grid, plot_palette


@pytest.fixture
def result(random_pixels):
    return compress_pixels(random_pixels[:64], CompressionConfig(n_clusters=4, random_state=0))


def test_plot_compression_result_has_three_panels(random_pixels, result):
    fig = plot_compression_result(random_pixels[:64], result, width=8, height=8)

    assert len(fig.axes) == 3
    plt.close(fig)


def test_plot_compression_result_needs_dimensions(random_pixels, result):
    with pytest.raises(ValueError):
        plot_compression_result(random_pixels[:64], result)


def test_plot_palette(result):
    fig = plot_palette(result.palette, result.kmeans.cluster_sizes())

    assert fig.axes[0].get_title() == 'Paleta (4 colores)'
    plt.close(fig)


def test_plot_image_grid_checks_titles():
    with pytest.raises(ValueError):
        plot_image_grid([np.zeros((2, 2, 3))], ['a', 'b'])
