#!/usr/bin/env python3
"""
Benchmark the incremental K-means against scikit-learn's KMeans.

Runs the online and batch partition modes and sklearn on Gaussian blobs of
growing size, records time, inertia and rounds, and plots the results.
"""

import argparse
import json
import os
import sys
import time
from pathlib import Path

import matplotlib.pyplot as plt
from sklearn.cluster import KMeans as SklearnKMeans

sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))
from kmeans import KMeans, create_sample_dataset


def run_benchmark(sizes, n_features, n_clusters, n_init, seed):
    """Time every implementation on every dataset size."""
    results = []
    for n_samples in sizes:
        X, _ = create_sample_dataset(
            n_samples=n_samples, n_features=n_features, n_centers=n_clusters, random_state=seed
        )
        print(f"\nDataset: {n_samples} samples, {n_features} features, {n_clusters} clusters")
        print("-" * 50)

        runs = {
            'online': lambda: KMeans(n_clusters, n_init=n_init, mode='online', random_state=seed).fit(X),
            'batch': lambda: KMeans(n_clusters, n_init=n_init, mode='batch', random_state=seed).fit(X),
            'sklearn': lambda: SklearnKMeans(n_clusters=n_clusters, n_init=n_init, random_state=seed).fit(X),
        }
        for name, run in runs.items():
            start = time.time()
            model = run()
            elapsed = time.time() - start
            print(f"  {name:8s} {elapsed:8.3f}s  inertia={model.inertia_:.2f}  iterations={model.n_iter_}")
            results.append({
                'implementation': name,
                'n_samples': n_samples,
                'seconds': elapsed,
                'inertia': float(model.inertia_),
                'n_iter': int(model.n_iter_),
            })
    return results


def plot_results(results, output_dir: Path):
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    for name in sorted({r['implementation'] for r in results}):
        rows = [r for r in results if r['implementation'] == name]
        sizes = [r['n_samples'] for r in rows]
        axes[0].plot(sizes, [r['seconds'] for r in rows], marker='o', label=name)
        axes[1].plot(sizes, [r['inertia'] for r in rows], marker='o', label=name)
    axes[0].set_xlabel('n_samples')
    axes[0].set_ylabel('seconds')
    axes[0].set_title('Fit time')
    axes[1].set_xlabel('n_samples')
    axes[1].set_ylabel('inertia')
    axes[1].set_title('Final inertia')
    for ax in axes:
        ax.legend()
    plt.tight_layout()
    plt.savefig(output_dir / 'kmeans_benchmark.png', dpi=150, bbox_inches='tight')
    plt.close()


def main():
    parser = argparse.ArgumentParser(description='Incremental K-means benchmark')
    parser.add_argument('--sizes', type=int, nargs='+', default=[1000, 5000, 10000],
                        help='Dataset sizes to test (default: 1000 5000 10000)')
    parser.add_argument('--dim', type=int, default=32,
                        help='Vector dimension (default: 32)')
    parser.add_argument('--n_clusters', type=int, default=10,
                        help='Number of clusters (default: 10)')
    parser.add_argument('--n_init', type=int, default=3,
                        help='Seedings per fit (default: 3)')
    parser.add_argument('--output_dir', type=str, default='benchmark_results',
                        help='Output directory for results (default: benchmark_results)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed (default: 42)')
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = run_benchmark(args.sizes, args.dim, args.n_clusters, args.n_init, args.seed)
    with open(output_dir / 'kmeans_benchmark.json', 'w') as f:
        json.dump(results, f, indent=2)
    plot_results(results, output_dir)
    print(f"\nResults saved to {output_dir}")


if __name__ == "__main__":
    main()
