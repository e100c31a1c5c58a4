"""
Data-parallel Lloyd's k-means.

Each iteration forks the assignment and the accumulation across a fixed pool
of worker threads, one contiguous range of points per worker:

1. assignment: every worker labels its own range, writing only to its own
   slice of the shared label array;
2. accumulation: every worker sums its range into a private
   ``(sums, counts)`` pair.

Both phases end with a join. The private accumulators are then reduced on
the calling thread and the centroids are updated exactly as in the
sequential engine, so no locking is needed anywhere.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .lloyd import (
    Init,
    accumulate,
    assign_clusters,
    calculate_inertia,
    has_converged,
    initial_centroids,
    update_centroids,
)
from .params import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, ClusteringParameters
from .points import PointSet
from .seeding import RandomState, check_random_state

Accumulator = Tuple[np.ndarray, np.ndarray]


def split_ranges(n_points: int, n_workers: int) -> List[Tuple[int, int]]:
    """
    Split ``[0, n_points)`` into at most ``n_workers`` contiguous ranges.

    Ranges never overlap, are never empty and differ in length by at most one.
    """
    if n_workers < 1:
        raise ValueError(f"n_workers must be >= 1, got {n_workers}")
    n_chunks = min(n_workers, n_points)
    if n_chunks == 0:
        return []

    base, extra = divmod(n_points, n_chunks)
    ranges = []
    start = 0
    for i in range(n_chunks):
        stop = start + base + (1 if i < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def reduce_accumulators(partials: Sequence[Accumulator], k: int, n_features: int) -> Accumulator:
    """Sum per-worker accumulators, in worker order."""
    sums = np.zeros((k, n_features), dtype=np.float64)
    counts = np.zeros(k, dtype=np.int64)
    for partial_sums, partial_counts in partials:
        sums += partial_sums
        counts += partial_counts
    return sums, counts


def resolve_n_jobs(n_jobs: Optional[int]) -> int:
    if n_jobs is None:
        return os.cpu_count() or 1
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be >= 1, got {n_jobs}")
    return n_jobs


def parallel_lloyd(
    points: Union[PointSet, np.ndarray],
    parameters: ClusteringParameters,
    init: Init = 'k-means++',
    verbose: bool = False
) -> Tuple[np.ndarray, np.ndarray, float, int]:
    """
    Multi-threaded k-means run.

    Seeding is identical to :func:`kmeans.lloyd.lloyd`, so for the same seed
    both engines start from the same centroids and produce the same labels
    and (up to summation order) the same centroids.

    Returns:
        (centroids, labels, inertia, n_iter)
    """
    points = points if isinstance(points, PointSet) else PointSet(points)
    k = parameters.k
    rng = check_random_state(parameters.random_seed)
    centroids = initial_centroids(points, k, init, rng)
    X = points.data
    n_samples, n_features = X.shape

    ranges = split_ranges(n_samples, resolve_n_jobs(parameters.n_jobs))

    if verbose:
        print(f"Fitting K-means with {k} clusters on {n_samples} samples "
              f"using {len(ranges)} workers...")

    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        for iteration in range(parameters.max_iterations):
            labels = np.empty(n_samples, dtype=np.intp)

            def assign_range(bounds, current=centroids, labels=labels):
                start, stop = bounds
                labels[start:stop] = assign_clusters(points.chunk(start, stop), current)

            def accumulate_range(bounds, labels=labels):
                start, stop = bounds
                return accumulate(points.chunk(start, stop), labels[start:stop], k)

            # list() waits for every worker and re-raises the first failure
            list(pool.map(assign_range, ranges))
            partials = list(pool.map(accumulate_range, ranges))

            sums, counts = reduce_accumulators(partials, k, n_features)
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
    n_jobs: Optional[int] = None,
    init: Init = 'k-means++',
    verbose: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Parallel counterpart of :func:`kmeans.lloyd.kmeans`.

    Args:
        n_jobs: Number of worker threads (defaults to ``os.cpu_count()``)
    """
    parameters = ClusteringParameters(
        k=k, max_iterations=max_iterations, tolerance=tolerance,
        random_seed=rng_seed, n_jobs=n_jobs
    )
    centroids, labels, _, _ = parallel_lloyd(points, parameters, init=init, verbose=verbose)
    return centroids, labels


def kmeans_lloyd(
    points: Union[PointSet, np.ndarray],
    parameters: ClusteringParameters,
    init: Optional[Init] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Same as :func:`kmeans`, configured through a ClusteringParameters object."""
    centroids, labels, _, _ = parallel_lloyd(
        points, parameters, init='k-means++' if init is None else init
    )
    return centroids, labels
