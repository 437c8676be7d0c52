"""
K-means clustering with incrementally maintained centroids.

The partition loop keeps every point in exactly one :class:`Cluster` and moves
points between clusters one at a time, so a centroid update costs O(dimension)
instead of a pass over the whole dataset.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from .cluster import Cluster
from .exceptions import DegeneratePartitionError, DimensionMismatchError
from .member import Member

logger = logging.getLogger(__name__)

MODES = ('online', 'batch')
EMPTY_CLUSTER_POLICIES = ('keep', 'raise')


class PartitionResult(NamedTuple):
    """
    Outcome of one run of :func:`partition`.

    ``n_refused`` counts moves skipped because they would have emptied a
    cluster, and ``n_relocated`` counts points handed to clusters that got no
    data in the first round. Both stay 0 unless the 'keep' policy stepped in.
    """
    clusters: List[Cluster]
    labels: np.ndarray
    n_iter: int
    converged: bool
    inertia: float
    n_refused: int = 0
    n_relocated: int = 0


def _as_matrix(X, name: str) -> np.ndarray:
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"{name} must be 2-D (n_samples, n_features), got shape {X.shape}")
    if X.shape[0] == 0:
        raise ValueError(f"{name} must not be empty")
    return X


def _nearest(clusters: List[Cluster], vector: np.ndarray) -> int:
    """Index of the closest cluster; ties go to the lowest index."""
    best_index = 0
    best_distance = clusters[0].distance_to(vector)
    for index in range(1, len(clusters)):
        distance = clusters[index].distance_to(vector)
        if distance < best_distance:
            best_index = index
            best_distance = distance
    return best_index


def _assign_to_centroids(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Assign each point to the nearest of a fixed set of centroids."""
    # Shape: (n_samples, n_clusters); argmin returns the first minimum
    distances = np.sum((X[:, np.newaxis] - centroids[np.newaxis, :]) ** 2, axis=2)
    return np.argmin(distances, axis=1)


def _snapshot(clusters: List[Cluster]) -> np.ndarray:
    return np.vstack([cluster.get_centroid() for cluster in clusters])


def _fill_empty_clusters(
    clusters: List[Cluster],
    members: List[Member],
    labels: np.ndarray,
    empty_cluster: str,
) -> int:
    """
    Give every cluster holding only its seed one data point.

    Returns:
        Number of points relocated
    """
    position = {id(member): i for i, member in enumerate(members)}

    relocated = 0
    for index, cluster in enumerate(clusters):
        if cluster.size() > 1:
            continue
        if empty_cluster == 'raise':
            raise DegeneratePartitionError(
                f"Cluster {index} received no data points", cluster_index=index
            )

        # Donors must keep at least one data point besides their seed.
        best = None
        best_distance = -1.0
        for donor_index, donor in enumerate(clusters):
            if donor.size() < 3:
                continue
            for member in donor.get_members()[1:]:
                distance = donor.distance_to(member.data)
                if distance > best_distance:
                    best = (donor_index, member)
                    best_distance = distance
        if best is None:
            raise DegeneratePartitionError(
                f"Cluster {index} received no data points and no cluster can spare one",
                cluster_index=index,
            )

        donor_index, member = best
        clusters[donor_index].remove(lambda data, own=member.data: data is own)
        cluster.add(member)
        labels[position[id(member)]] = index
        relocated += 1
        logger.warning(
            "Cluster %d received no data points; relocated a point from cluster %d",
            index, donor_index,
        )
    return relocated


def _reassign(
    clusters: List[Cluster],
    members: List[Member],
    labels: np.ndarray,
    mode: str,
    empty_cluster: str,
) -> Tuple[int, int]:
    """
    Run one round moving every member to its nearest cluster.

    ``labels[i]`` must be the index of the cluster holding ``members[i]``.

    Returns:
        Tuple of (members moved, moves refused to keep a cluster non-empty)
    """
    targets = None
    if mode == 'batch':
        X = np.vstack([member.data for member in members])
        targets = _assign_to_centroids(X, _snapshot(clusters))

    moved = 0
    refused = 0
    for i, member in enumerate(members):
        current = labels[i]
        target = targets[i] if targets is not None else _nearest(clusters, member.data)
        if target == current:
            continue
        if clusters[current].size() == 1:
            if empty_cluster == 'raise':
                raise DegeneratePartitionError(
                    f"Moving sample {i} would leave cluster {current} empty",
                    cluster_index=int(current),
                )
            logger.warning(
                "Sample %d stays in cluster %d, its only member", i, current
            )
            refused += 1
            continue
        clusters[current].remove(lambda vector, own=member.data: vector is own)
        clusters[target].add(member)
        labels[i] = target
        moved += 1
    return moved, refused


def partition(
    data,
    seeds,
    max_iters: int = 300,
    mode: str = 'online',
    empty_cluster: str = 'keep',
    verbose: bool = False,
) -> PartitionResult:
    """
    Partition ``data`` into one cluster per seed.

    The first round adds every point to its nearest cluster and then drops the
    seeds, so the final clusters only hold data points. Each later round moves
    the points whose nearest cluster changed. The loop stops after a round
    without moves (converged) or after ``max_iters`` rounds.

    Args:
        data: points of shape (n_samples, n_features)
        seeds: initial centroids of shape (n_clusters, n_features)
        max_iters: maximum number of rounds, the first assignment included
        mode: 'online' measures distances against centroids that move after
            every reassignment; 'batch' measures every point of a round
            against the centroids as they were when the round started
        empty_cluster: what to do when a cluster would lose its last point.
            'keep' leaves the point where it is (and, after the first round,
            hands a cluster without data the point farthest from its own
            centroid); 'raise' raises :class:`DegeneratePartitionError`
        verbose: log progress at INFO instead of DEBUG

    Returns:
        :class:`PartitionResult`

    Raises:
        DimensionMismatchError: if seeds and data have different dimensions
        DegeneratePartitionError: if ``empty_cluster='raise'`` and a cluster
            would end up with no data points
    """
    X = _as_matrix(data, "data")
    S = _as_matrix(seeds, "seeds")
    if S.shape[1] != X.shape[1]:
        raise DimensionMismatchError(S.shape[1], X.shape[1])
    if S.shape[0] > X.shape[0]:
        raise ValueError(
            f"Cannot form {S.shape[0]} clusters from {X.shape[0]} samples"
        )
    if max_iters < 1:
        raise ValueError(f"max_iters must be at least 1, got {max_iters}")
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    if empty_cluster not in EMPTY_CLUSTER_POLICIES:
        raise ValueError(f"Unknown empty cluster policy: {empty_cluster}")

    level = logging.INFO if verbose else logging.DEBUG
    members = [Member(row) for row in X]
    clusters = [Cluster(seed) for seed in S]
    seed_members = [cluster.get_members()[0] for cluster in clusters]
    labels = np.empty(len(members), dtype=np.intp)

    # Round 1: initial assignment
    if mode == 'batch':
        labels[:] = _assign_to_centroids(X, _snapshot(clusters))
        for member, label in zip(members, labels):
            clusters[label].add(member)
    else:
        for i, member in enumerate(members):
            labels[i] = _nearest(clusters, member.data)
            clusters[labels[i]].add(member)

    n_relocated = _fill_empty_clusters(clusters, members, labels, empty_cluster)
    for cluster, seed in zip(clusters, seed_members):
        cluster.remove(lambda vector, own=seed.data: vector is own)

    logger.log(level, "Initial assignment of %d samples to %d clusters", len(members), len(clusters))

    n_iter = 1
    n_refused = 0
    converged = False
    while n_iter < max_iters and not converged:
        n_iter += 1
        moved, refused = _reassign(clusters, members, labels, mode, empty_cluster)
        n_refused += refused
        logger.log(level, "Iteration %d, reassigned %d samples", n_iter, moved)
        converged = moved == 0

    inertia = float(sum(cluster.inertia() for cluster in clusters))
    if converged:
        logger.log(level, "Converged after %d iterations", n_iter)
    else:
        logger.warning("Stopped after %d iterations without converging", n_iter)
    return PartitionResult(clusters, labels, n_iter, converged, inertia, n_refused, n_relocated)


class KMeans:
    """
    K-means clustering on top of the incremental partition loop.

    Features:
    - K-means++ or random seeding, or caller supplied seeds
    - Multiple seedings, keeping the run with the lowest inertia
    - Stops as soon as a round reassigns no sample
    - Reports whether the best run converged or ran out of iterations
    """

    def __init__(
        self,
        n_clusters: int,
        max_iters: int = 300,
        n_init: int = 10,
        init: str = 'k-means++',
        mode: str = 'online',
        empty_cluster: str = 'keep',
        random_state: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            max_iters: Maximum number of rounds per run
            n_init: Number of different seedings to try
            init: Seeding method ('k-means++' or 'random')
            mode: Assignment mode passed to :func:`partition`
            empty_cluster: Empty cluster policy passed to :func:`partition`
            random_state: Random seed for reproducibility
            verbose: Whether to log progress at INFO level
        """
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be at least 1, got {n_clusters}")
        if n_init < 1:
            raise ValueError(f"n_init must be at least 1, got {n_init}")
        if init not in ('k-means++', 'random'):
            raise ValueError(f"Unknown initialization method: {init}")

        self.n_clusters = n_clusters
        self.max_iters = max_iters
        self.n_init = n_init
        self.init = init
        self.mode = mode
        self.empty_cluster = empty_cluster
        self.random_state = random_state
        self.verbose = verbose

        # Results
        self.cluster_centers_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = None
        self.converged_ = None
        self.clusters_ = None

    def _init_centroids(self, X: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """Pick initial centroids using k-means++ or random initialization."""
        if self.init == 'k-means++':
            return self._kmeans_plus_plus_init(X, rng)
        random_indices = rng.choice(X.shape[0], self.n_clusters, replace=False)
        return X[random_indices].copy()

    def _kmeans_plus_plus_init(self, X: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """K-means++ initialization with vectorized distance computation."""
        n_samples, n_features = X.shape
        centroids = np.zeros((self.n_clusters, n_features))

        # Choose first centroid randomly
        centroids[0] = X[rng.integers(n_samples)]

        for c_id in range(1, self.n_clusters):
            existing_centroids = centroids[:c_id]
            # Squared distance from every point to its closest chosen centroid
            min_distances_squared = np.min(
                np.sum((X[:, np.newaxis] - existing_centroids[np.newaxis, :]) ** 2, axis=2),
                axis=1,
            )

            total = min_distances_squared.sum()
            if total == 0:
                # Every point coincides with a chosen centroid
                centroids[c_id] = X[rng.integers(n_samples)]
                continue

            # Choose next centroid with probability proportional to squared distance
            cumulative_probs = np.cumsum(min_distances_squared / total)
            next_centroid_idx = np.searchsorted(cumulative_probs, rng.random())
            centroids[c_id] = X[min(next_centroid_idx, n_samples - 1)]

        return centroids

    def _run(self, X: np.ndarray, seeds: np.ndarray) -> PartitionResult:
        return partition(
            X,
            seeds,
            max_iters=self.max_iters,
            mode=self.mode,
            empty_cluster=self.empty_cluster,
            verbose=self.verbose,
        )

    def fit(self, X, seeds=None) -> 'KMeans':
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)
            seeds: Optional initial centroids of shape (n_clusters, n_features).
                When given, a single run starts from them and ``init`` and
                ``n_init`` are ignored.

        Returns:
            self
        """
        X = _as_matrix(X, "X")
        if X.shape[0] < self.n_clusters:
            raise ValueError(
                f"n_samples={X.shape[0]} should be >= n_clusters={self.n_clusters}"
            )

        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, "Fitting K-means with %d clusters on %d samples...", self.n_clusters, X.shape[0])

        if seeds is not None:
            seeds = _as_matrix(seeds, "seeds")
            if seeds.shape[0] != self.n_clusters:
                raise ValueError(
                    f"Expected {self.n_clusters} seeds, got {seeds.shape[0]}"
                )
            best = self._run(X, seeds)
        else:
            rng = np.random.default_rng(self.random_state)
            best = None
            # Try multiple initializations
            for init_run in range(self.n_init):
                if self.n_init > 1:
                    logger.log(level, "Initialization %d/%d", init_run + 1, self.n_init)
                result = self._run(X, self._init_centroids(X, rng))
                if best is None or result.inertia < best.inertia:
                    best = result

        self.clusters_ = best.clusters
        self.cluster_centers_ = np.vstack([cluster.get_centroid() for cluster in best.clusters])
        self.labels_ = best.labels
        self.inertia_ = best.inertia
        self.n_iter_ = best.n_iter
        self.converged_ = best.converged

        logger.log(level, "Final inertia: %.2f", self.inertia_)
        return self

    def predict(self, X) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        if self.cluster_centers_ is None:
            raise ValueError("Model must be fitted before prediction")

        X = _as_matrix(X, "X")
        if X.shape[1] != self.cluster_centers_.shape[1]:
            raise DimensionMismatchError(self.cluster_centers_.shape[1], X.shape[1])
        return _assign_to_centroids(X, self.cluster_centers_)

    def fit_predict(self, X, seeds=None) -> np.ndarray:
        """Fit the model and return the cluster label of every sample."""
        return self.fit(X, seeds=seeds).labels_

    def get_cluster_info(self) -> Dict:
        """Get information about the clustering results."""
        if self.clusters_ is None:
            raise ValueError("Model must be fitted first")

        cluster_sizes = np.array([cluster.size() for cluster in self.clusters_])

        return {
            'n_clusters': self.n_clusters,
            'inertia': self.inertia_,
            'n_iterations': self.n_iter_,
            'converged': self.converged_,
            'cluster_sizes': {k: int(size) for k, size in enumerate(cluster_sizes)},
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'std_cluster_size': float(np.std(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes))
        }
