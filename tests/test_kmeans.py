import logging
import os
import sys

import numpy as np
import pytest
from sklearn.cluster import KMeans as SklearnKMeans

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from kmeans import (
    Cluster,
    DegeneratePartitionError,
    DimensionMismatchError,
    KMeans,
    create_sample_dataset,
    evaluate_clustering,
    partition,
)
from kmeans.kmeans import _reassign

SEEDS = [[0.0], [10.0]]
DATA = [[1.0], [2.0], [8.0], [9.0], [11.0]]


def _member_values(cluster):
    return sorted(float(m.data[0]) for m in cluster.get_members())


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_two_groups_on_a_line(mode):
    result = partition(DATA, SEEDS, max_iters=10, mode=mode)

    assert result.converged
    assert result.n_iter <= 10
    low, high = result.clusters
    assert _member_values(low) == [1.0, 2.0]
    assert _member_values(high) == [8.0, 9.0, 11.0]
    assert low.get_centroid()[0] == pytest.approx(1.5)
    assert high.get_centroid()[0] == pytest.approx(28.0 / 3.0)
    assert result.labels.tolist() == [0, 0, 1, 1, 1]
    assert result.inertia == pytest.approx(0.5 + (8 - 28 / 3) ** 2 + (9 - 28 / 3) ** 2 + (11 - 28 / 3) ** 2)
    assert result.n_refused == 0
    assert result.n_relocated == 0


def test_every_point_in_exactly_one_cluster():
    X, _ = create_sample_dataset(n_samples=300, n_features=3, n_centers=4, random_state=3)
    result = partition(X, X[:4], max_iters=50)

    assert sum(cluster.size() for cluster in result.clusters) == len(X)
    for label, cluster in enumerate(result.clusters):
        members = np.vstack([m.data for m in cluster.get_members()])
        expected = X[result.labels == label]
        assert len(members) == len(expected)
        assert np.allclose(np.sort(members, axis=0), np.sort(expected, axis=0))
        assert np.allclose(cluster.get_centroid(), expected.mean(axis=0))


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_repeated_runs_are_identical(mode):
    rng = np.random.default_rng(5)
    X = rng.normal(size=(200, 5))
    seeds = X[[0, 50, 100, 150]]

    first = partition(X, seeds, max_iters=100, mode=mode)
    second = partition(X, seeds, max_iters=100, mode=mode)

    assert np.array_equal(first.labels, second.labels)
    assert first.n_iter == second.n_iter
    for a, b in zip(first.clusters, second.clusters):
        assert np.array_equal(a.get_centroid(), b.get_centroid())


@pytest.mark.parametrize("max_iters", [1, 2, 3])
def test_stops_at_iteration_cap(max_iters, caplog):
    rng = np.random.default_rng(11)
    X = rng.uniform(size=(500, 2))
    with caplog.at_level(logging.WARNING, logger="kmeans.kmeans"):
        result = partition(X, X[:20], max_iters=max_iters)
    assert result.n_iter <= max_iters
    if max_iters == 1:
        assert not result.converged
        assert "without converging" in caplog.text


def test_point_equidistant_goes_to_first_cluster():
    result = partition([[5.0], [0.0], [10.0]], [[0.0], [10.0]], max_iters=10)
    assert result.labels.tolist() == [0, 0, 1]


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_empty_cluster_raises(mode):
    with pytest.raises(DegeneratePartitionError) as excinfo:
        partition([[1.0], [2.0]], [[0.0], [100.0]], mode=mode, empty_cluster='raise')
    assert excinfo.value.cluster_index == 1


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_tied_points_raise(mode):
    # Both points land in the first cluster, leaving the second without data
    with pytest.raises(DegeneratePartitionError) as excinfo:
        partition([[5.0], [5.0]], [[0.0], [10.0]], mode=mode, empty_cluster='raise')
    assert excinfo.value.cluster_index == 1


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_empty_cluster_gets_farthest_point(mode):
    result = partition([[1.0], [2.0]], [[0.0], [100.0]], max_iters=10, mode=mode)
    assert result.converged
    assert result.labels.tolist() == [0, 1]
    assert _member_values(result.clusters[0]) == [1.0]
    assert _member_values(result.clusters[1]) == [2.0]
    assert result.n_relocated == 1
    assert result.n_refused == 0


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_last_member_stays_in_its_cluster(mode, caplog):
    with caplog.at_level(logging.WARNING, logger="kmeans.kmeans"):
        result = partition([[5.0], [5.0]], [[0.0], [10.0]], max_iters=10, mode=mode)
    # Both points tie; the one in the second cluster is its only member
    assert result.converged
    assert result.labels.tolist() == [1, 0]
    assert all(cluster.size() == 1 for cluster in result.clusters)
    assert result.n_relocated == 1
    assert result.n_refused == 1
    assert "only member" in caplog.text
    for cluster in result.clusters:
        assert not np.any(np.isnan(cluster.get_centroid()))


def _singleton_clusters():
    clusters = [Cluster([5.0]), Cluster([5.0])]
    members = [cluster.get_members()[0] for cluster in clusters]
    return clusters, members, np.array([0, 1], dtype=np.intp)


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_round_raises_instead_of_emptying_cluster(mode):
    clusters, members, labels = _singleton_clusters()
    with pytest.raises(DegeneratePartitionError) as excinfo:
        _reassign(clusters, members, labels, mode, 'raise')
    assert excinfo.value.cluster_index == 1
    assert [cluster.size() for cluster in clusters] == [1, 1]


@pytest.mark.parametrize("mode", ["online", "batch"])
def test_round_refuses_move_that_empties_cluster(mode):
    clusters, members, labels = _singleton_clusters()
    moved, refused = _reassign(clusters, members, labels, mode, 'keep')
    assert (moved, refused) == (0, 1)
    assert labels.tolist() == [0, 1]
    assert [cluster.size() for cluster in clusters] == [1, 1]


def test_invalid_arguments():
    with pytest.raises(DimensionMismatchError):
        partition([[1.0, 2.0]], [[1.0]])
    with pytest.raises(ValueError):
        partition([[1.0]], [[0.0], [1.0]])
    with pytest.raises(ValueError):
        partition(DATA, SEEDS, max_iters=0)
    with pytest.raises(ValueError):
        partition(DATA, SEEDS, mode='parallel')
    with pytest.raises(ValueError):
        partition(DATA, SEEDS, empty_cluster='merge')
    with pytest.raises(ValueError):
        partition([1.0, 2.0], SEEDS)
    with pytest.raises(ValueError):
        partition(np.empty((0, 1)), SEEDS)


def test_kmeans_with_given_seeds():
    model = KMeans(n_clusters=2, max_iters=10).fit(DATA, seeds=SEEDS)
    assert model.converged_
    assert np.allclose(model.cluster_centers_, [[1.5], [28.0 / 3.0]])
    assert model.labels_.tolist() == [0, 0, 1, 1, 1]
    assert model.predict([[0.0], [7.0], [100.0]]).tolist() == [0, 1, 1]

    with pytest.raises(ValueError):
        KMeans(n_clusters=3).fit(DATA, seeds=SEEDS)


@pytest.mark.parametrize("init", ["k-means++", "random"])
def test_kmeans_on_blobs(init):
    X, _ = create_sample_dataset(n_samples=600, n_features=2, n_centers=3, cluster_std=0.5, random_state=42)
    model = KMeans(n_clusters=3, n_init=5, init=init, random_state=0)
    labels = model.fit_predict(X)

    assert model.converged_
    assert model.cluster_centers_.shape == (3, 2)
    assert np.array_equal(model.predict(X), labels)

    info = model.get_cluster_info()
    assert sum(info['cluster_sizes'].values()) == len(X)
    assert info['min_cluster_size'] >= 1
    assert info['converged']


def test_kmeans_inertia_close_to_sklearn():
    X, _ = create_sample_dataset(n_samples=600, n_features=8, n_centers=4, cluster_std=1.0, random_state=7)
    ours = KMeans(n_clusters=4, n_init=5, random_state=42).fit(X)
    reference = SklearnKMeans(n_clusters=4, n_init=5, random_state=42).fit(X)

    rel_diff = (ours.inertia_ - reference.inertia_) / reference.inertia_
    assert rel_diff < 0.05, f"Inertia too high relative to sklearn KMeans: rel_diff={rel_diff:.3f}"


def test_kmeans_is_reproducible():
    X, _ = create_sample_dataset(n_samples=300, n_features=4, n_centers=5, random_state=1)
    first = KMeans(n_clusters=5, n_init=3, random_state=123, mode='batch').fit(X)
    second = KMeans(n_clusters=5, n_init=3, random_state=123, mode='batch').fit(X)
    assert np.array_equal(first.labels_, second.labels_)
    assert np.array_equal(first.cluster_centers_, second.cluster_centers_)


def test_kmeans_validation():
    with pytest.raises(ValueError):
        KMeans(n_clusters=0)
    with pytest.raises(ValueError):
        KMeans(n_clusters=2, n_init=0)
    with pytest.raises(ValueError):
        KMeans(n_clusters=2, init='forgy')
    with pytest.raises(ValueError):
        KMeans(n_clusters=2).predict(DATA)
    with pytest.raises(ValueError):
        KMeans(n_clusters=2).get_cluster_info()
    with pytest.raises(ValueError):
        KMeans(n_clusters=10).fit(DATA)

    model = KMeans(n_clusters=2).fit(DATA, seeds=SEEDS)
    with pytest.raises(DimensionMismatchError):
        model.predict([[1.0, 2.0]])


def test_evaluate_clustering():
    X, _ = create_sample_dataset(n_samples=300, n_features=2, n_centers=3, cluster_std=0.4, random_state=0)
    model = KMeans(n_clusters=3, n_init=3, random_state=0).fit(X)
    scores = evaluate_clustering(X, model.labels_, model.cluster_centers_)

    assert scores['inertia'] == pytest.approx(model.inertia_)
    assert scores['n_clusters'] == 3
    assert scores['silhouette'] > 0.5
    assert scores['davies_bouldin'] >= 0

    single = evaluate_clustering(X, np.zeros(len(X), dtype=int), X.mean(axis=0, keepdims=True))
    assert single['silhouette'] is None
