import numpy as np
import os, sys
import pytest
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from kmeans.exceptions import InvalidClusterCount
from kmeans.lloyd import (
    accumulate,
    assign_clusters,
    has_converged,
    kmeans,
    kmeans_lloyd,
    lloyd,
    update_centroids,
)
from kmeans.params import ClusteringParameters

SQUARE = [[0, 0], [0, 1], [10, 0], [10, 1]]


def make_blobs(n_per_cluster=100, centers=((0, 0), (10, 10), (-10, 10)), scale=0.5, seed=0):
    rng = np.random.default_rng(seed)
    return np.vstack([
        rng.normal(loc=c, scale=scale, size=(n_per_cluster, len(c))) for c in centers
    ])


def test_assignment_picks_nearest_centroid():
    rng = np.random.default_rng(1)
    X = rng.normal(size=(200, 4))
    centroids = rng.normal(size=(6, 4))
    labels = assign_clusters(X, centroids)
    expected = [
        int(np.argmin([np.sum((x - c) ** 2) for c in centroids])) for x in X
    ]
    assert labels.tolist() == expected


def test_assignment_ties_go_to_lowest_cluster_id():
    centroids = np.array([[10.0, 10.0], [-1.0, 0.0], [1.0, 0.0]])
    X = np.array([[0.0, 0.0], [0.0, 3.0], [0.0, -2.0]])
    assert assign_clusters(X, centroids).tolist() == [1, 1, 1]

    # Identical centroids: always the first one
    same = np.array([[5.0, 5.0], [5.0, 5.0]])
    assert assign_clusters(X, same).tolist() == [0, 0, 0]


def test_assignment_is_independent_of_chunking():
    X = make_blobs(seed=4)
    centroids = X[[0, 150, 250]]
    whole = assign_clusters(X, centroids)
    pieces = np.concatenate([assign_clusters(X[a:b], centroids) for a, b in [(0, 7), (7, 123), (123, 300)]])
    assert np.array_equal(whole, pieces)


def test_accumulate_counts_every_point_once():
    X = make_blobs(seed=2)
    labels = assign_clusters(X, X[[0, 100, 200, 5]])
    sums, counts = accumulate(X, labels, 4)
    assert counts.sum() == len(X)
    for cluster_id in range(4):
        assert np.allclose(sums[cluster_id], X[labels == cluster_id].sum(axis=0))


def test_update_is_mean_of_assigned_points():
    X = np.array([[0.0, 0.0], [0.0, 2.0], [4.0, 4.0]])
    labels = np.array([0, 0, 1])
    sums, counts = accumulate(X, labels, 2)
    centroids = update_centroids(sums, counts, np.zeros((2, 2)))
    assert np.array_equal(centroids, [[0.0, 1.0], [4.0, 4.0]])


def test_empty_cluster_keeps_previous_centroid():
    X = np.array([[0.0, 0.0], [0.0, 2.0]])
    previous = np.array([[1.0, 1.0], [7.0, -3.0]])
    sums, counts = accumulate(X, np.array([0, 0]), 2)
    centroids = update_centroids(sums, counts, previous)
    assert np.array_equal(centroids[1], [7.0, -3.0])
    assert not np.any(np.isnan(centroids))
    # The previous centroids are not modified in place
    assert np.array_equal(previous, [[1.0, 1.0], [7.0, -3.0]])


def test_update_at_fixed_point_is_unchanged():
    X = make_blobs(seed=3)
    centroids, labels, _, _ = lloyd(X, ClusteringParameters(k=3, random_seed=3, tolerance=0))
    sums, counts = accumulate(X, assign_clusters(X, centroids), 3)
    assert np.allclose(update_centroids(sums, counts, centroids), centroids)


def test_has_converged():
    a = np.array([[0.0, 0.0], [5.0, 5.0]])
    assert has_converged(a, a.copy(), 0.0)
    assert has_converged(a, a + 1e-6, 1e-4)
    assert not has_converged(a, a + [[0.0, 0.0], [0.0, 1.0]], 1e-4)
    assert not has_converged(a, a + 1e-6, 0.0)


@pytest.mark.parametrize("seed", range(10))
def test_two_well_separated_clusters(seed):
    centroids, labels = kmeans(SQUARE, 2, rng_seed=seed, max_iterations=10, tolerance=1e-6)
    assert sorted(map(tuple, centroids)) == [(0.0, 0.5), (10.0, 0.5)]
    assert labels[0] == labels[1]
    assert labels[2] == labels[3]
    assert labels[0] != labels[2]
    assert np.bincount(labels).tolist() == [2, 2]


def test_one_label_per_point_in_range():
    X = make_blobs(seed=5)
    for k in (1, 2, 5, 17):
        centroids, labels = kmeans(X, k, rng_seed=k)
        assert centroids.shape == (k, 2)
        assert labels.shape == (len(X),)
        assert labels.min() >= 0 and labels.max() < k


def test_final_assignment_is_nearest_after_convergence():
    X = make_blobs(seed=6)
    centroids, labels = kmeans(X, 3, rng_seed=6, tolerance=0)
    assert np.array_equal(labels, assign_clusters(X, centroids))


def test_same_seed_is_reproducible():
    X = make_blobs(seed=7)
    first = kmeans(X, 4, rng_seed=11)
    second = kmeans(X, 4, rng_seed=11)
    assert np.array_equal(first[0], second[0])
    assert np.array_equal(first[1], second[1])


def test_stranded_centroid_is_retained():
    X = [[0.0, 0.0], [0.0, 1.0], [0.0, 2.0]]
    init = np.array([[0.0, 1.0], [100.0, 100.0]])
    centroids, labels = kmeans(X, 2, init=init)
    assert np.array_equal(centroids[1], [100.0, 100.0])
    assert np.array_equal(centroids[0], [0.0, 1.0])
    assert labels.tolist() == [0, 0, 0]


def test_stops_at_max_iterations():
    # Centroids creep along the line one step per iteration
    X = np.arange(100, dtype=float).reshape(-1, 1)
    params = ClusteringParameters(k=2, max_iterations=3, tolerance=1e-4)
    _, _, _, n_iter = lloyd(X, params, init=np.array([[0.0], [1.0]]))
    assert n_iter == 3

    params = ClusteringParameters(k=2, max_iterations=1)
    centroids, labels, _, n_iter = lloyd(X, params, init=np.array([[0.0], [1.0]]))
    assert n_iter == 1
    assert np.array_equal(centroids, [[0.0], [50.0]])
    assert labels[0] == 0 and np.all(labels[1:] == 1)


def test_converges_before_cap():
    X = make_blobs(seed=8)
    _, _, inertia, n_iter = lloyd(X, ClusteringParameters(k=3, random_seed=8, max_iterations=300))
    assert n_iter < 300
    assert inertia > 0


def test_seeding_failure_aborts_run():
    with pytest.raises(InvalidClusterCount):
        kmeans([[0, 0], [1, 1], [2, 2]], 5, rng_seed=0)
    with pytest.raises(InvalidClusterCount):
        kmeans([], 1)
    with pytest.raises(InvalidClusterCount):
        kmeans(SQUARE, 0)


def test_invalid_configuration():
    with pytest.raises(ValueError):
        kmeans(SQUARE, 2, max_iterations=0)
    with pytest.raises(ValueError):
        kmeans(SQUARE, 2, tolerance=-1.0)
    with pytest.raises(ValueError):
        kmeans(SQUARE, 2, init='farthest')
    with pytest.raises(ValueError):
        kmeans(SQUARE, 2, init=np.zeros((3, 2)))


def test_kmeans_lloyd_with_parameters():
    params = ClusteringParameters(k=2, max_iterations=20, tolerance=0, random_seed=1)
    centroids, labels = kmeans_lloyd(SQUARE, params)
    assert sorted(map(tuple, centroids)) == [(0.0, 0.5), (10.0, 0.5)]
    assert len(labels) == 4


def test_verbose_reports_convergence(capsys):
    kmeans(SQUARE, 2, rng_seed=0, verbose=True)
    out = capsys.readouterr().out
    assert "Fitting K-means with 2 clusters on 4 samples" in out
    assert "Converged after" in out
