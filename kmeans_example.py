"""Simple example of incremental K-means on synthetic blobs.

Clusters Gaussian blobs with the local KMeans, scores the result, and shows
the partition loop on a handful of one-dimensional points.
"""

import logging
import os
import sys

import numpy as np

# Add current directory to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from kmeans import KMeans, create_sample_dataset, evaluate_clustering, partition


def simple_example():
    """Simple example demonstrating K-means usage."""
    print("Simple K-means Example")
    print("=" * 50)

    X, _ = create_sample_dataset(n_samples=2000, n_features=16, n_centers=20, random_state=42)
    print(f"Using {X.shape[0]} samples with {X.shape[1]} features")

    print("\nFitting K-means with k=20...")
    kmeans = KMeans(n_clusters=20, max_iters=200, n_init=3, random_state=42, verbose=True)
    kmeans.fit(X)

    print("\nResults:")
    print(f"  Final inertia: {kmeans.inertia_:.2f}")
    print(f"  Iterations: {kmeans.n_iter_}")
    print(f"  Converged: {kmeans.converged_}")
    print(f"  Cluster centers shape: {kmeans.cluster_centers_.shape}")

    info = kmeans.get_cluster_info()
    print("\nCluster distribution:")
    print(f"  Average cluster size: {info['avg_cluster_size']:.1f}")
    print(f"  Largest cluster: {info['max_cluster_size']}")
    print(f"  Smallest cluster: {info['min_cluster_size']}")

    scores = evaluate_clustering(X, kmeans.labels_, kmeans.cluster_centers_)
    print(f"  Silhouette: {scores['silhouette']:.3f}")

    print("\nTesting prediction on new data...")
    queries = X[:100] + np.random.default_rng(0).normal(scale=0.1, size=(100, X.shape[1]))
    predicted_labels = kmeans.predict(queries)
    print(f"Predicted {len(predicted_labels)} labels")
    print(f"Label distribution: {np.bincount(predicted_labels, minlength=20)}")


def partition_example():
    """Partition five points on a line starting from two seeds."""
    print("\nPartition loop on a line")
    print("=" * 50)

    result = partition([[1.0], [2.0], [8.0], [9.0], [11.0]], [[0.0], [10.0]], max_iters=10)
    for index, cluster in enumerate(result.clusters):
        values = sorted(float(member.data[0]) for member in cluster.get_members())
        print(f"  Cluster {index}: members={values} centroid={cluster.get_centroid()[0]:.3f}")
    print(f"  Rounds: {result.n_iter}, converged: {result.converged}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    simple_example()
    partition_example()
