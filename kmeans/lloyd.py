"""
Lloyd's k-means: the building blocks and the sequential engine.

One iteration is AssignmentStep -> UpdateStep -> ConvergenceCheck. The
parallel engine in :mod:`kmeans.parallel` reuses every function here and
only changes how the assignment and the accumulation are scheduled.
"""

from typing import Optional, Tuple, Union

import numpy as np

from .params import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, ClusteringParameters
from .points import PointSet
from .seeding import (
    RandomState,
    check_random_state,
    kmeans_plus_plus,
    random_init,
    validate_cluster_count,
)

Init = Union[str, np.ndarray]


def initial_centroids(points: PointSet, k: int, init: Init, rng: np.random.Generator) -> np.ndarray:
    """Initialize centroids using k-means++, random selection or a given array."""
    if isinstance(init, str):
        if init == 'k-means++':
            return kmeans_plus_plus(points, k, rng)
        elif init == 'random':
            return random_init(points, k, rng)
        raise ValueError(f"Unknown initialization method: {init}")

    k = validate_cluster_count(k, len(points))
    centroids = np.array(init, dtype=np.float64)
    if centroids.shape != (k, points.dimension):
        raise ValueError(
            f"Initial centroids must have shape {(k, points.dimension)}, got {centroids.shape}"
        )
    return centroids


def assign_clusters(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Assign each point to the nearest centroid by squared Euclidean distance.

    Ties go to the lowest cluster id (``np.argmin`` keeps the first minimum).
    Each row's distance depends only on that row, so any contiguous slice of
    ``X`` gets exactly the labels it would get as part of the whole array.
    """
    distances = np.empty((X.shape[0], centroids.shape[0]), dtype=np.float64)
    for cluster_id, centroid in enumerate(centroids):
        distances[:, cluster_id] = np.sum((X - centroid) ** 2, axis=1)
    return np.argmin(distances, axis=1)


def accumulate(X: np.ndarray, labels: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
    """Per-cluster coordinate sums and point counts in a single pass."""
    sums = np.zeros((k, X.shape[1]), dtype=np.float64)
    np.add.at(sums, labels, X)
    counts = np.bincount(labels, minlength=k).astype(np.int64)
    return sums, counts


def update_centroids(sums: np.ndarray, counts: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """
    Mean of the points assigned to each cluster.

    A cluster that received no points keeps its previous centroid.
    """
    centroids = previous.copy()
    populated = counts > 0
    centroids[populated] = sums[populated] / counts[populated, np.newaxis]
    return centroids


def has_converged(previous: np.ndarray, current: np.ndarray, tolerance: float) -> bool:
    """True when every centroid moved less than ``tolerance`` or not at all."""
    shifts = np.sqrt(np.sum((current - previous) ** 2, axis=1))
    return bool(np.all((shifts < tolerance) | (shifts == 0)))


def calculate_inertia(X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> float:
    """Within-cluster sum of squares."""
    assigned_centroids = centroids[labels]
    return float(np.sum((X - assigned_centroids) ** 2))


def lloyd(
    points: Union[PointSet, np.ndarray],
    parameters: ClusteringParameters,
    init: Init = 'k-means++',
    verbose: bool = False
) -> Tuple[np.ndarray, np.ndarray, float, int]:
    """
    Single-threaded k-means run.

    Args:
        points: Input points
        parameters: Cluster count, iteration cap, tolerance and seed
        init: 'k-means++', 'random' or an explicit (k, n_features) array
        verbose: Whether to print progress information

    Returns:
        (centroids, labels, inertia, n_iter) where labels is the assignment
        made in the last completed iteration

    Raises:
        InvalidClusterCount: Before any iteration, if k is out of range
    """
    points = points if isinstance(points, PointSet) else PointSet(points)
    k = parameters.k
    rng = check_random_state(parameters.random_seed)
    centroids = initial_centroids(points, k, init, rng)
    X = points.data

    if verbose:
        print(f"Fitting K-means with {k} clusters on {len(points)} samples...")

    for iteration in range(parameters.max_iterations):
        labels = assign_clusters(X, centroids)
        sums, counts = accumulate(X, labels, k)
        new_centroids = update_centroids(sums, counts, centroids)

        converged = has_converged(centroids, new_centroids, parameters.tolerance)
        centroids = new_centroids
        if converged:
            if verbose:
                print(f"Converged after {iteration + 1} iterations")
            break

        if verbose and (iteration + 1) % 50 == 0:
            print(f"Iteration {iteration + 1}, Inertia: {calculate_inertia(X, labels, centroids):.2f}")

    return centroids, labels, calculate_inertia(X, labels, centroids), iteration + 1


def kmeans(
    points: Union[PointSet, np.ndarray],
    k: int,
    rng_seed: RandomState = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
    init: Init = 'k-means++',
    verbose: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Cluster ``points`` into ``k`` groups with Lloyd's algorithm.

    Returns:
        (centroids, labels): a (k, n_features) array and one cluster id per
        input point, in input order
    """
    parameters = ClusteringParameters(
        k=k, max_iterations=max_iterations, tolerance=tolerance, random_seed=rng_seed
    )
    centroids, labels, _, _ = lloyd(points, parameters, init=init, verbose=verbose)
    return centroids, labels


def kmeans_lloyd(
    points: Union[PointSet, np.ndarray],
    parameters: ClusteringParameters,
    init: Optional[Init] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Same as :func:`kmeans`, configured through a ClusteringParameters object."""
    centroids, labels, _, _ = lloyd(points, parameters, init='k-means++' if init is None else init)
    return centroids, labels
