"""Simple examples of the sequential and parallel K-means engines."""

import numpy as np
import sys
import os

# Add current directory to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from kmeans import KMeans, InvalidClusterCount, parallel_kmeans, sequential_kmeans


def simple_example():
    """Cluster four points into two well separated groups."""
    print("🎯 Simple K-means Example")
    print("=" * 50)

    points = [(0, 0), (0, 1), (10, 0), (10, 1)]
    centroids, labels = sequential_kmeans(points, 2, rng_seed=42, max_iterations=10)

    for cluster_id, centroid in enumerate(centroids):
        members = [p for p, label in zip(points, labels) if label == cluster_id]
        print(f"Cluster {cluster_id}: centroid={tuple(centroid)} points={members}")


def estimator_example():
    """Fit the estimator on synthetic blobs with and without worker threads."""
    print("\n🎯 KMeans Estimator Example")
    print("=" * 50)

    rng = np.random.default_rng(0)
    X = np.vstack([
        rng.normal(loc=center, scale=0.5, size=(500, 16))
        for center in (-5.0, 0.0, 5.0, 10.0)
    ])
    print(f"Using {X.shape[0]} samples with {X.shape[1]} features")

    for n_jobs in (1, 4):
        model = KMeans(n_clusters=4, n_init=3, random_state=42, n_jobs=n_jobs)
        model.fit(X)
        info = model.get_cluster_info()
        print(f"\nn_jobs={n_jobs}")
        print(f"  Inertia: {info['inertia']:.2f}")
        print(f"  Iterations: {info['n_iterations']}")
        print(f"  Cluster sizes: {info['cluster_sizes']}")

    centroids, labels = parallel_kmeans(X, 4, rng_seed=42, n_jobs=4)
    print(f"\nparallel_kmeans: centroids shape {centroids.shape}, {len(labels)} labels")


def error_example():
    """Asking for more clusters than points is reported, never clamped."""
    print("\n🎯 Invalid Cluster Count Example")
    print("=" * 50)
    try:
        sequential_kmeans([(0, 0), (1, 1)], 3)
    except InvalidClusterCount as e:
        print(f"❌ {e}")


if __name__ == "__main__":
    simple_example()
    estimator_example()
    error_example()
