"""
Helpers for generating test data and scoring clustering results.
"""

from typing import Dict, Optional, Tuple

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.metrics import calinski_harabasz_score, davies_bouldin_score, silhouette_score


def create_sample_dataset(
    n_samples: int = 1000,
    n_features: int = 2,
    n_centers: int = 3,
    cluster_std: float = 1.0,
    random_state: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Create Gaussian blobs for clustering experiments.

    Returns:
        Tuple of (X, y) where y holds the index of the blob each sample came from
    """
    X, y = make_blobs(
        n_samples=n_samples,
        n_features=n_features,
        centers=n_centers,
        cluster_std=cluster_std,
        random_state=random_state,
    )
    return X.astype(np.float64), y


def evaluate_clustering(X, labels, centers) -> Dict[str, Optional[float]]:
    """
    Score a clustering result.

    Args:
        X: Input data of shape (n_samples, n_features)
        labels: Cluster index of every sample
        centers: Cluster centroids of shape (n_clusters, n_features)

    Returns:
        Dictionary with inertia and, when at least two clusters are populated
        and not every sample is its own cluster, the silhouette,
        Calinski-Harabasz and Davies-Bouldin scores (None otherwise)
    """
    X = np.asarray(X, dtype=np.float64)
    labels = np.asarray(labels)
    centers = np.asarray(centers, dtype=np.float64)

    inertia = float(np.sum((X - centers[labels]) ** 2))
    n_labels = len(np.unique(labels))

    scores = {
        'inertia': inertia,
        'n_clusters': n_labels,
        'silhouette': None,
        'calinski_harabasz': None,
        'davies_bouldin': None,
    }
    if 2 <= n_labels < len(X):
        scores['silhouette'] = float(silhouette_score(X, labels))
        scores['calinski_harabasz'] = float(calinski_harabasz_score(X, labels))
        scores['davies_bouldin'] = float(davies_bouldin_score(X, labels))
    return scores
