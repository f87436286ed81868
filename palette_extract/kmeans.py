# palette_extract/kmeans.py
from __future__ import annotations

"""
K-means over RGB samples.

Exports:
- nearest_centroid_indices(points, centroids) -> (N,) int64 labels
- run_kmeans(samples, k, *, seed=None, ...) -> KMeansResult
- kmeans_cluster(samples, k, *, seed=None, ...) -> list[Cluster]

Notes:
- Initial centroids are k draws *with replacement* from the samples, so two
  seeds may coincide. Clusters that receive no members keep their previous
  centroid and are never reseeded; they are dropped from the final result.
- Convergence: every non-empty cluster moved by <= tolerance in the last pass.
- `seed` accepts None (fresh entropy), an int, or a numpy Generator.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np

from .constants import KMEANS_MAX_ITERATIONS, KMEANS_TOLERANCE
from .core_types import Cluster, SampleSet, as_sample_set
from .utils import debug_log, key_value_pairs_to_string

SeedLike = Union[None, int, np.random.Generator]


@dataclass(frozen=True)
class KMeansResult:
    """Clusters plus loop bookkeeping for debug output."""

    clusters: List[Cluster]
    iterations: int
    converged: bool


def _euclidean(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    d0 = a[..., 0] - b[..., 0]
    d1 = a[..., 1] - b[..., 1]
    d2 = a[..., 2] - b[..., 2]
    return np.sqrt(d0 * d0 + d1 * d1 + d2 * d2)


def nearest_centroid_indices(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    For each point, index of the closest centroid by plain L2 distance in RGB.
    Ties go to the lowest centroid index.
    """
    dist = _euclidean(points[:, None, :], centroids[None, :, :])
    return np.argmin(dist, axis=1)


def _initial_centroids(
    points: np.ndarray, k: int, rng: np.random.Generator
) -> np.ndarray:
    picks = rng.integers(0, points.shape[0], size=k)
    return points[picks].copy()


def run_kmeans(
    samples: SampleSet,
    k: int,
    *,
    seed: SeedLike = None,
    max_iterations: int = KMEANS_MAX_ITERATIONS,
    tolerance: float = KMEANS_TOLERANCE,
    initial_centroids: Optional[Sequence[Sequence[float]]] = None,
    debug: bool = False,
) -> KMeansResult:
    """
    Partition RGB samples into at most k clusters.

    `initial_centroids` (k rows of RGB) replaces the random draws; `seed` is
    then unused.

    Returns:
      KMeansResult with non-empty clusters in centroid index order, the number
      of assignment/update passes run, and whether the loop converged before
      the iteration cap.
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

    pts = as_sample_set(samples)
    n = int(pts.shape[0])
    if n == 0 or k == 0:
        return KMeansResult(clusters=[], iterations=0, converged=True)

    rng = np.random.default_rng(seed)
    points = pts.astype(np.float64)
    if initial_centroids is None:
        centroids = _initial_centroids(points, k, rng)
    else:
        centroids = np.array(initial_centroids, dtype=np.float64)
        if centroids.shape != (k, 3):
            raise ValueError(
                f"initial_centroids must have shape ({k}, 3), got {centroids.shape}"
            )
    counts = np.zeros(k, dtype=np.int64)

    iterations = 0
    converged = False
    while iterations < max_iterations:
        labels = nearest_centroid_indices(points, centroids)
        counts = np.bincount(labels, minlength=k)
        sums = np.stack(
            [np.bincount(labels, weights=points[:, c], minlength=k) for c in range(3)],
            axis=1,
        )
        filled = counts > 0

        updated = centroids.copy()
        updated[filled] = sums[filled] / counts[filled, None]
        shift = _euclidean(updated, centroids)
        centroids = updated
        iterations += 1

        if not np.any(shift[filled] > tolerance):
            converged = True
            break

    clusters = [
        Cluster(
            centroid=(float(c[0]), float(c[1]), float(c[2])),
            count=int(counts[i]),
        )
        for i, c in enumerate(centroids)
        if counts[i] > 0
    ]

    if debug:
        debug_log(
            "kmeans  "
            + key_value_pairs_to_string(
                [
                    ("Samples", n),
                    ("K", k),
                    ("Clusters", len(clusters)),
                    ("Iterations", iterations),
                    ("Converged", converged),
                ]
            )
        )

    return KMeansResult(clusters=clusters, iterations=iterations, converged=converged)


def kmeans_cluster(
    samples: SampleSet,
    k: int,
    *,
    seed: SeedLike = None,
    max_iterations: int = KMEANS_MAX_ITERATIONS,
    tolerance: float = KMEANS_TOLERANCE,
    initial_centroids: Optional[Sequence[Sequence[float]]] = None,
) -> List[Cluster]:
    """Convenience wrapper returning only the clusters of run_kmeans()."""
    return run_kmeans(
        samples,
        k,
        seed=seed,
        max_iterations=max_iterations,
        tolerance=tolerance,
        initial_centroids=initial_centroids,
    ).clusters


__all__ = [
    "SeedLike",
    "KMeansResult",
    "nearest_centroid_indices",
    "run_kmeans",
    "kmeans_cluster",
]
