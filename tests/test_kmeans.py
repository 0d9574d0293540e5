import numpy as np
import pytest

from kmeans_compressor import CompressionConfig, InvalidParameter
from kmeans_compressor.kmeans import (
    KMeans,
    assign_pixels,
    compute_inertia,
    run_kmeans,
    update_centroids,
)


# ============================================================================
# Assignment step
# ============================================================================

def test_assign_picks_nearest_centroid():
    pixels = np.array([[0, 0, 0], [250, 250, 250], [10, 200, 10]], dtype=np.float64)
    centroids = np.array([[255.0, 255.0, 255.0], [0.0, 0.0, 0.0], [0.0, 255.0, 0.0]])

    labels, distances = assign_pixels(pixels, centroids, return_distances=True)

    np.testing.assert_array_equal(labels, [1, 0, 2])
    assert distances[0] == 0.0
    assert distances[1] == pytest.approx(np.sqrt(3 * 5 ** 2))


def test_assign_ties_go_to_lowest_index():
    pixels = np.array([[0.0, 0.0, 0.0]])
    centroids = np.array([[10.0, 0.0, 0.0], [0.0, 10.0, 0.0], [0.0, 0.0, 10.0]])

    assert assign_pixels(pixels, centroids)[0] == 0


def test_assign_duplicate_centroids_use_first():
    pixels = np.array([[5.0, 5.0, 5.0], [200.0, 200.0, 200.0]])
    centroids = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])

    np.testing.assert_array_equal(assign_pixels(pixels, centroids), [0, 0])


# ============================================================================
# Update step
# ============================================================================

def test_update_sets_mean_of_assigned_pixels():
    pixels = np.array([[0, 0, 0], [10, 20, 30], [255, 255, 255]], dtype=np.float64)
    labels = np.array([0, 0, 1])
    centroids = np.zeros((2, 3))

    counts = update_centroids(pixels, labels, centroids)

    np.testing.assert_array_equal(counts, [2, 1])
    np.testing.assert_allclose(centroids[0], [5.0, 10.0, 15.0])
    np.testing.assert_allclose(centroids[1], [255.0, 255.0, 255.0])


def test_update_keeps_empty_cluster_centroid():
    pixels = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.float64)
    labels = np.array([0, 0])
    centroids = np.array([[1.0, 1.0, 1.0], [42.0, 43.0, 44.0]])

    counts = update_centroids(pixels, labels, centroids)

    assert counts[1] == 0
    np.testing.assert_array_equal(centroids[1], [42.0, 43.0, 44.0])
    assert not np.any(np.isnan(centroids))


def test_update_does_not_round_means():
    pixels = np.array([[0, 0, 0], [1, 1, 1]], dtype=np.float64)
    centroids = np.zeros((1, 3))

    update_centroids(pixels, np.array([0, 0]), centroids)

    np.testing.assert_array_equal(centroids[0], [0.5, 0.5, 0.5])


def test_compute_inertia():
    pixels = np.array([[0, 0, 0], [3, 4, 0]], dtype=np.float64)
    centroids = np.array([[0.0, 0.0, 0.0]])

    assert compute_inertia(pixels, np.array([0, 0]), centroids) == 25.0


# ============================================================================
# Iteration loop
# ============================================================================

def test_checkerboard_scenario(checkerboard):
    centroids = np.array([[0.0, 0.0, 0.0], [255.0, 255.0, 255.0]])

    result = run_kmeans(checkerboard, centroids, n_clusters=2, n_iter=5)

    np.testing.assert_array_equal(result.labels, [0, 1, 0, 1])
    np.testing.assert_array_equal(result.centroids, [[0, 0, 0], [255, 255, 255]])
    assert result.n_iter == 5
    assert result.inertia == 0.0
    assert result.converged


def test_single_pixel_scenario():
    result = run_kmeans([(100, 150, 200)], [(100.0, 150.0, 200.0)], n_clusters=1, n_iter=1)

    np.testing.assert_array_equal(result.labels, [0])
    np.testing.assert_array_equal(result.centroids[0], [100.0, 150.0, 200.0])


def test_single_cluster_is_mean_of_all_pixels(random_pixels):
    start = random_pixels[:1].astype(np.float64)

    result = run_kmeans(random_pixels, start, n_clusters=1, n_iter=3)

    assert np.all(result.labels == 0)
    np.testing.assert_allclose(result.centroids[0], random_pixels.mean(axis=0))


def test_labels_cover_every_pixel(random_pixels):
    centroids = random_pixels[:6].astype(np.float64)

    result = run_kmeans(random_pixels, centroids, n_clusters=6, n_iter=4)

    assert result.labels.shape == (len(random_pixels),)
    assert result.labels.min() >= 0
    assert result.labels.max() <= 5


def test_non_empty_centroids_are_means_of_their_pixels(random_pixels):
    centroids = random_pixels[:10].astype(np.float64)

    result = run_kmeans(random_pixels, centroids, n_clusters=10, n_iter=7)

    for k, count in enumerate(result.cluster_sizes()):
        if count:
            members = random_pixels[result.labels == k]
            np.testing.assert_allclose(result.centroids[k], members.mean(axis=0))


def test_more_clusters_than_colors_leaves_empty_cluster_untouched(checkerboard):
    centroids = np.array([[0.0, 0.0, 0.0], [255.0, 255.0, 255.0], [0.0, 0.0, 0.0]])

    result = run_kmeans(checkerboard, centroids, n_clusters=3, n_iter=4)

    assert result.cluster_sizes()[2] == 0
    np.testing.assert_array_equal(result.centroids[2], [0.0, 0.0, 0.0])
    assert np.all(np.isfinite(result.centroids))


def test_centroids_are_updated_in_place(checkerboard):
    centroids = np.array([[10.0, 10.0, 10.0], [240.0, 240.0, 240.0]])

    result = run_kmeans(checkerboard, centroids, n_clusters=2, n_iter=1)

    assert result.centroids is centroids
    np.testing.assert_array_equal(centroids, [[0, 0, 0], [255, 255, 255]])


def test_list_centroids_are_copied(checkerboard):
    centroids = [[10.0, 10.0, 10.0], [240.0, 240.0, 240.0]]

    result = run_kmeans(checkerboard, centroids, n_clusters=2, n_iter=1)

    assert centroids[0] == [10.0, 10.0, 10.0]
    np.testing.assert_array_equal(result.centroids[0], [0, 0, 0])


def test_zero_iterations_only_assigns(checkerboard):
    centroids = np.array([[10.0, 10.0, 10.0], [240.0, 240.0, 240.0]])

    result = run_kmeans(checkerboard, centroids, n_clusters=2, n_iter=0)

    np.testing.assert_array_equal(result.labels, [0, 1, 0, 1])
    np.testing.assert_array_equal(centroids, [[10, 10, 10], [240, 240, 240]])
    assert result.n_iter == 0
    assert result.inertia_history == []


def test_inertia_never_increases(random_pixels):
    centroids = random_pixels[:8].astype(np.float64)

    result = run_kmeans(random_pixels, centroids, n_clusters=8, n_iter=10)

    history = np.array(result.inertia_history)
    assert len(history) == 10
    assert np.all(np.diff(history) <= 1e-6 * history[0])


def test_stop_on_convergence_matches_full_run(blobs):
    start = blobs[[0, 60, 120]].astype(np.float64)

    full = run_kmeans(blobs, start.copy(), n_clusters=3, n_iter=20)
    early = run_kmeans(blobs, start.copy(), n_clusters=3, n_iter=20, stop_on_convergence=True)

    assert early.converged
    assert early.n_iter < full.n_iter
    np.testing.assert_array_equal(early.labels, full.labels)
    np.testing.assert_array_equal(early.centroids, full.centroids)


def test_callback_can_stop_run(random_pixels):
    seen = []

    def stop_after_two(iteration, labels, centroids):
        seen.append(iteration)
        return iteration == 2

    result = run_kmeans(
        random_pixels, random_pixels[:4].astype(np.float64),
        n_clusters=4, n_iter=10, callback=stop_after_two
    )

    assert seen == [1, 2]
    assert result.n_iter == 2


def test_matches_sklearn_lloyd(blobs):
    sklearn_cluster = pytest.importorskip("sklearn.cluster")
    start = blobs[[5, 55, 105]].astype(np.float64)

    ours = run_kmeans(blobs, start.copy(), n_clusters=3, n_iter=10)
    reference = sklearn_cluster.KMeans(
        n_clusters=3, init=start.copy(), n_init=1, max_iter=10, algorithm='lloyd'
    ).fit(blobs.astype(np.float64))

    np.testing.assert_array_equal(ours.labels, reference.labels_)
    np.testing.assert_allclose(ours.centroids, reference.cluster_centers_)


# ============================================================================
# Validation
# ============================================================================

def test_rejects_negative_iterations(checkerboard):
    with pytest.raises(InvalidParameter):
        run_kmeans(checkerboard, [[0, 0, 0]], n_clusters=1, n_iter=-1)


def test_rejects_centroid_count_mismatch(checkerboard):
    with pytest.raises(InvalidParameter):
        run_kmeans(checkerboard, [[0, 0, 0]], n_clusters=2, n_iter=1)


def test_rejects_malformed_centroids(checkerboard):
    with pytest.raises(InvalidParameter):
        run_kmeans(checkerboard, [[0, 0], [1, 1]], n_clusters=2, n_iter=1)


def test_rejects_malformed_pixels():
    with pytest.raises(InvalidParameter):
        run_kmeans([[0, 0, 0, 0]], [[0, 0, 0]], n_clusters=1, n_iter=1)


def test_rejects_out_of_range_pixels():
    with pytest.raises(InvalidParameter):
        run_kmeans([[0, 300, 0]], [[0, 0, 0]], n_clusters=1, n_iter=1)


# ============================================================================
# Estimator
# ============================================================================

def test_estimator_is_deterministic_with_seed(random_pixels):
    config = CompressionConfig(n_clusters=6, n_iter=5, random_state=11)

    first = KMeans(config).fit(random_pixels)
    second = KMeans(config).fit(random_pixels)

    np.testing.assert_array_equal(first.labels, second.labels)
    np.testing.assert_array_equal(first.centroids, second.centroids)
    np.testing.assert_array_equal(first.initial_centroids, second.initial_centroids)


def test_estimator_requires_fit():
    with pytest.raises(RuntimeError):
        KMeans().labels


def test_rejects_ragged_pixels():
    with pytest.raises(InvalidParameter):
        run_kmeans([(0, 0, 0), (1, 2)], [[0, 0, 0]], n_clusters=1, n_iter=1)


def test_rejects_ragged_centroids():
    with pytest.raises(InvalidParameter):
        run_kmeans([(0, 0, 0)], [[0, 0, 0], [1, 2]], n_clusters=2, n_iter=1)


def test_rejects_out_of_range_centroids(checkerboard):
    with pytest.raises(InvalidParameter):
        run_kmeans(checkerboard, [[-1000, 0, 0], [900, 0, 0]], n_clusters=2, n_iter=1)
