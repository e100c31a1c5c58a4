#!/usr/bin/env python3
"""
Speed test for the sequential and parallel K-means engines
"""

import argparse
import os
import sys
import time
import numpy as np
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from kmeans.lloyd import lloyd
from kmeans.parallel import parallel_lloyd
from kmeans.params import ClusteringParameters


def create_blobs(n_samples: int, n_features: int, n_centers: int, seed: int) -> np.ndarray:
    """Gaussian blobs around uniformly placed centers."""
    rng = np.random.default_rng(seed)
    centers = rng.uniform(-10, 10, size=(n_centers, n_features))
    assignment = rng.integers(n_centers, size=n_samples)
    return centers[assignment] + rng.normal(scale=1.0, size=(n_samples, n_features))


def profile(name, engine, X, parameters, runs):
    """Run an engine ``runs`` times and return the mean wall-clock time in seconds."""
    print(f"--- Profiling {name} kmeans ---")
    start_time = time.time()
    for _ in range(runs):
        centroids, _, inertia, n_iter = engine(X, parameters)
    elapsed_time = (time.time() - start_time) / runs

    print("centers: " + ", ".join("(" + ", ".join(f"{v:.3f}" for v in c) + ")" for c in centroids))
    print(f"   Final inertia: {inertia:.2f}")
    print(f"   Iterations: {n_iter}")
    return elapsed_time


def main():
    parser = argparse.ArgumentParser(description="Compare sequential and parallel K-means speed")
    parser.add_argument('--samples', type=int, default=100000, help='Number of points')
    parser.add_argument('--features', type=int, default=2, help='Point dimension')
    parser.add_argument('--clusters', type=int, default=3, help='Number of clusters (k)')
    parser.add_argument('--runs', type=int, default=10, help='Runs averaged per engine')
    parser.add_argument('--jobs', type=int, default=None, help='Worker threads (default: all cores)')
    parser.add_argument('--tol', type=float, default=0.01, help='Convergence tolerance')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    args = parser.parse_args()

    print("# BEGINNING PROFILING #\n")
    X = create_blobs(args.samples, args.features, args.clusters, args.seed)
    parameters = ClusteringParameters(
        k=args.clusters,
        tolerance=args.tol,
        random_seed=args.seed,
        n_jobs=args.jobs,
    )

    time_sequential = profile("sequential", lloyd, X, parameters, args.runs)
    time_parallel = profile("parallel", parallel_lloyd, X, parameters, args.runs)

    print()
    print(f"Sequential: {time_sequential * 1000:.2f}ms")
    print(f"Parallel: {time_parallel * 1000:.2f}ms")
    print(f"Speedup: {time_sequential / time_parallel:.2f}x")


if __name__ == "__main__":
    main()
