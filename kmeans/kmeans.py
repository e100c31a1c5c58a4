"""
K-means clustering estimator.
Wraps the sequential and parallel Lloyd engines behind a fit/predict API.
"""

import numpy as np
from typing import Optional, Union

from .lloyd import Init, assign_clusters, lloyd
from .parallel import parallel_lloyd
from .params import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, ClusteringParameters
from .points import PointSet
from .seeding import RandomState, check_random_state


class KMeans:
    """
    K-means clustering with Lloyd's algorithm.

    Features:
    - K-means++ initialization for better initial centroids
    - Multiple initialization attempts, keeping the lowest inertia
    - Early stopping when centroids stop moving
    - Optional multi-threaded assignment and accumulation
    - Reproducible runs through an explicit random seed or Generator
    """

    def __init__(
        self,
        n_clusters: int,
        max_iters: int = DEFAULT_MAX_ITERATIONS,
        tol: float = DEFAULT_TOLERANCE,
        n_init: int = 1,
        init: Init = 'k-means++',
        random_state: RandomState = None,
        n_jobs: Optional[int] = 1,
        verbose: bool = False
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            max_iters: Maximum number of iterations
            tol: Maximum centroid movement still treated as converged
            n_init: Number of different initializations to try
            init: Initialization method ('k-means++' or 'random') or an
                explicit (n_clusters, n_features) array
            random_state: Seed or numpy Generator for reproducibility
            n_jobs: Worker threads; 1 runs the sequential engine, None uses
                every core
            verbose: Whether to print progress information
        """
        if n_init < 1:
            raise ValueError(f"n_init must be >= 1, got {n_init}")

        self.n_clusters = n_clusters
        self.max_iters = max_iters
        self.tol = tol
        self.n_init = n_init
        self.init = init
        self.random_state = random_state
        self.n_jobs = n_jobs
        self.verbose = verbose

        # Results
        self.cluster_centers_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = None

    @classmethod
    def from_parameters(cls, parameters: ClusteringParameters, **kwargs) -> 'KMeans':
        """Build an estimator from a ClusteringParameters object."""
        return cls(
            n_clusters=parameters.k,
            max_iters=parameters.max_iterations,
            tol=parameters.tolerance,
            random_state=parameters.random_seed,
            n_jobs=parameters.n_jobs,
            **kwargs
        )

    def _fit_single(self, points: PointSet, rng: np.random.Generator):
        parameters = ClusteringParameters(
            k=self.n_clusters,
            max_iterations=self.max_iters,
            tolerance=self.tol,
            random_seed=rng,
            n_jobs=self.n_jobs,
        )
        if self.n_jobs == 1:
            return lloyd(points, parameters, init=self.init, verbose=self.verbose)
        return parallel_lloyd(points, parameters, init=self.init, verbose=self.verbose)

    def fit(self, X: Union[np.ndarray, PointSet]) -> 'KMeans':
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            self
        """
        points = X if isinstance(X, PointSet) else PointSet(X)
        rng = check_random_state(self.random_state)

        best_inertia = float('inf')
        best_centroids = None
        best_labels = None
        best_n_iter = 0

        # An explicit init array gives the same result every time
        n_init = self.n_init if isinstance(self.init, str) else 1
        for init_run in range(n_init):
            if self.verbose and n_init > 1:
                print(f"Initialization {init_run + 1}/{n_init}")

            centroids, labels, inertia, n_iter = self._fit_single(points, rng)

            if inertia < best_inertia or best_centroids is None:
                best_inertia = inertia
                best_centroids = centroids
                best_labels = labels
                best_n_iter = n_iter

        self.cluster_centers_ = best_centroids
        self.labels_ = best_labels
        self.inertia_ = best_inertia
        self.n_iter_ = best_n_iter

        if self.verbose:
            print(f"Final inertia: {self.inertia_:.2f}")

        return self

    def predict(self, X: Union[np.ndarray, PointSet]) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        if self.cluster_centers_ is None:
            raise ValueError("Model must be fitted before prediction")

        points = X if isinstance(X, PointSet) else PointSet(X)
        if points.dimension != self.cluster_centers_.shape[1]:
            raise ValueError(
                f"Expected {self.cluster_centers_.shape[1]} features, got {points.dimension}"
            )
        return assign_clusters(points.data, self.cluster_centers_)

    def fit_predict(self, X: Union[np.ndarray, PointSet]) -> np.ndarray:
        """Fit the model and return the cluster label of every sample."""
        return self.fit(X).labels_

    def get_cluster_info(self) -> dict:
        """Get information about the clustering results."""
        if self.cluster_centers_ is None:
            raise ValueError("Model must be fitted first")

        cluster_sizes = np.bincount(self.labels_, minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'inertia': self.inertia_,
            'n_iterations': self.n_iter_,
            'cluster_sizes': {k: int(size) for k, size in enumerate(cluster_sizes)},
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'std_cluster_size': float(np.std(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes)),
            'empty_clusters': [k for k, size in enumerate(cluster_sizes) if size == 0]
        }
