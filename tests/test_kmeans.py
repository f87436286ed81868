import numpy as np
import pytest

from palette_extract.core_types import Cluster
from palette_extract.kmeans import (
    kmeans_cluster,
    nearest_centroid_indices,
    run_kmeans,
)


def test_empty_samples_give_no_clusters() -> None:
    assert kmeans_cluster(np.zeros((0, 3), dtype=np.uint8), 5, seed=0) == []


def test_k_zero_gives_no_clusters() -> None:
    samples = np.array([[1, 2, 3]], dtype=np.uint8)
    assert kmeans_cluster(samples, 0, seed=0) == []


def test_negative_k_raises() -> None:
    with pytest.raises(ValueError):
        kmeans_cluster(np.array([[1, 2, 3]], dtype=np.uint8), -1)


@pytest.mark.parametrize("k", [1, 3, 8])
def test_identical_samples_collapse_to_one_cluster(k: int) -> None:
    samples = np.tile(np.array([[10, 20, 30]], dtype=np.uint8), (100, 1))
    result = run_kmeans(samples, k, seed=1)
    assert result.clusters == [Cluster(centroid=(10.0, 20.0, 30.0), count=100)]
    assert result.converged
    assert result.iterations == 1


def test_single_sample() -> None:
    clusters = kmeans_cluster(np.array([[7, 8, 9]], dtype=np.uint8), 4, seed=3)
    assert clusters == [Cluster(centroid=(7.0, 8.0, 9.0), count=1)]


def test_two_colours_separate(two_colour_samples: np.ndarray) -> None:
    # Seeds whose initial draws hit both colours must split them cleanly.
    found = 0
    for seed in range(20):
        clusters = kmeans_cluster(two_colour_samples, 2, seed=seed)
        if len(clusters) == 2:
            found += 1
            centroids = sorted(c.centroid for c in clusters)
            assert centroids == [(0.0, 0.0, 255.0), (255.0, 0.0, 0.0)]
            assert [c.count for c in clusters] == [50, 50]
        else:
            assert clusters[0].count == 100
    assert found > 0


def test_counts_cover_every_sample() -> None:
    rng = np.random.default_rng(42)
    samples = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
    for k in (1, 2, 5, 12):
        clusters = kmeans_cluster(samples, k, seed=k)
        assert 1 <= len(clusters) <= k
        assert all(c.count >= 1 for c in clusters)
        assert sum(c.count for c in clusters) == 500


def test_fixed_seed_is_deterministic() -> None:
    rng = np.random.default_rng(7)
    samples = rng.integers(0, 256, size=(300, 3), dtype=np.uint8)
    a = kmeans_cluster(samples, 5, seed=123)
    b = kmeans_cluster(samples, 5, seed=123)
    assert a == b


def test_generator_seed_is_accepted() -> None:
    samples = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
    clusters = kmeans_cluster(samples, 2, seed=np.random.default_rng(0))
    assert sum(c.count for c in clusters) == 2


def test_centroids_stay_in_range() -> None:
    rng = np.random.default_rng(11)
    samples = rng.integers(0, 256, size=(200, 3), dtype=np.uint8)
    for c in kmeans_cluster(samples, 6, seed=5):
        assert all(0.0 <= ch <= 255.0 for ch in c.centroid)


def test_ties_go_to_lowest_index() -> None:
    points = np.array([[5.0, 5.0, 5.0]])
    centroids = np.array([[0.0, 5.0, 5.0], [10.0, 5.0, 5.0]])
    assert nearest_centroid_indices(points, centroids).tolist() == [0]


def test_accepts_list_of_triples() -> None:
    clusters = kmeans_cluster([(1, 1, 1), (1, 1, 1)], 1, seed=0)
    assert clusters == [Cluster(centroid=(1.0, 1.0, 1.0), count=2)]


def _on_red_axis(values: list[int]) -> np.ndarray:
    return np.array([[v, 0, 0] for v in values], dtype=np.uint8)


def test_cluster_emptied_mid_run_keeps_stale_centroid_and_is_dropped() -> None:
    # Pass 1: {8, 8} | {10, 20} | {22, 22}. Pass 2 the middle centroid (15)
    # loses 10 to the first cluster and 20 to the last, and is never reseeded.
    samples = _on_red_axis([8, 8, 10, 20, 22, 22])
    result = run_kmeans(
        samples,
        3,
        initial_centroids=[(6.0, 0.0, 0.0), (12.0, 0.0, 0.0), (30.0, 0.0, 0.0)],
    )
    assert result.iterations == 2
    assert result.converged
    assert [c.count for c in result.clusters] == [3, 3]
    assert result.clusters[0].centroid == pytest.approx((26 / 3, 0.0, 0.0))
    assert result.clusters[1].centroid == pytest.approx((64 / 3, 0.0, 0.0))


def test_cluster_empty_from_start_is_not_reseeded() -> None:
    samples = _on_red_axis([0, 2])
    result = run_kmeans(
        samples, 2, initial_centroids=[(0.0, 0.0, 0.0), (200.0, 200.0, 200.0)]
    )
    assert result.clusters == [Cluster(centroid=(1.0, 0.0, 0.0), count=2)]


def test_shift_of_exactly_tolerance_converges() -> None:
    result = run_kmeans(
        _on_red_axis([0, 2]), 1, initial_centroids=[(1.0, 1.0, 0.0)]
    )
    assert result.iterations == 1
    assert result.converged


def test_shift_just_over_tolerance_keeps_iterating() -> None:
    result = run_kmeans(
        _on_red_axis([0, 2]), 1, initial_centroids=[(1.0, 1.001, 0.0)]
    )
    assert result.iterations == 2
    assert result.converged
    assert result.clusters == [Cluster(centroid=(1.0, 0.0, 0.0), count=2)]


def test_iteration_cap_stops_unconverged_loop() -> None:
    result = run_kmeans(
        _on_red_axis([0, 2]),
        1,
        initial_centroids=[(1.0, 1.001, 0.0)],
        max_iterations=1,
    )
    assert result.iterations == 1
    assert result.converged is False
    assert sum(c.count for c in result.clusters) == 2


def test_initial_centroids_shape_checked() -> None:
    with pytest.raises(ValueError, match="initial_centroids"):
        run_kmeans(_on_red_axis([0, 2]), 2, initial_centroids=[(0.0, 0.0, 0.0)])
