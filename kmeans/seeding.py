"""
Initial centroid selection.

Both seeders draw from an explicit ``numpy.random.Generator`` so a run can be
reproduced by passing the same seed; the global numpy and ``random`` states
are never touched.
"""

from numbers import Integral
from typing import Optional, Union

import numpy as np

from .exceptions import InvalidClusterCount
from .points import PointSet

RandomState = Union[None, int, np.random.Generator]


def check_random_state(seed: RandomState) -> np.random.Generator:
    """Turn ``None``, an int seed or an existing Generator into a Generator."""
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None or isinstance(seed, Integral):
        return np.random.default_rng(seed)
    raise ValueError(f"{seed!r} cannot be used to seed a numpy Generator")


def validate_cluster_count(k, n_points: int) -> int:
    if isinstance(k, bool) or not isinstance(k, Integral):
        raise InvalidClusterCount(k, n_points)
    if n_points == 0 or k < 1 or k > n_points:
        raise InvalidClusterCount(k, n_points)
    return int(k)


def kmeans_plus_plus(
    points: PointSet,
    k: int,
    rng: Optional[np.random.Generator] = None,
    n_local_trials: Optional[int] = None
) -> np.ndarray:
    """
    Greedy k-means++ initialization.

    The first centroid is a uniformly chosen point. For every following
    centroid, ``n_local_trials`` candidate points are sampled with
    probability proportional to their squared distance to the nearest
    centroid chosen so far, and the candidate that lowers the total squared
    distance the most is kept. With ``n_local_trials=1`` this is the
    classic k-means++ scheme.

    Args:
        points: Input points
        k: Number of centroids to pick (1 <= k <= len(points))
        rng: Random generator; a fresh unseeded one is used when omitted
        n_local_trials: Candidates per centroid, defaults to 2 + int(log(k))

    Returns:
        Array of shape (k, n_features) holding k distinct points

    Raises:
        InvalidClusterCount: If k is out of range or the point set is empty
    """
    points = points if isinstance(points, PointSet) else PointSet(points)
    k = validate_cluster_count(k, len(points))
    rng = check_random_state(rng)
    if n_local_trials is None:
        n_local_trials = 2 + int(np.log(k))
    elif n_local_trials < 1:
        raise ValueError(f"n_local_trials must be >= 1, got {n_local_trials}")

    X = points.data
    n_samples = len(points)
    chosen = [int(rng.integers(n_samples))]
    min_distances_squared = np.sum((X - X[chosen[0]]) ** 2, axis=1)

    for _ in range(1, k):
        cumulative = np.cumsum(min_distances_squared)
        total = cumulative[-1]
        if total <= 0:
            # Fewer distinct positions than k: fall back to any unused index
            remaining = np.setdiff1d(np.arange(n_samples), chosen)
            next_idx = int(rng.choice(remaining))
            chosen.append(next_idx)
            continue

        # side='right' never lands on a zero-weight (already chosen) index
        r = rng.random(n_local_trials) * total
        candidates = np.minimum(np.searchsorted(cumulative, r, side='right'), n_samples - 1)

        best_potential = np.inf
        for candidate in candidates:
            distances = np.minimum(
                min_distances_squared, np.sum((X - X[candidate]) ** 2, axis=1)
            )
            potential = distances.sum()
            if potential < best_potential:
                best_potential = potential
                next_idx = int(candidate)
                best_distances = distances

        chosen.append(next_idx)
        min_distances_squared = best_distances

    return X[chosen].copy()


def random_init(points: PointSet, k: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Pick k distinct points uniformly at random."""
    points = points if isinstance(points, PointSet) else PointSet(points)
    k = validate_cluster_count(k, len(points))
    rng = check_random_state(rng)
    random_indices = rng.choice(len(points), k, replace=False)
    return points.data[random_indices].copy()
