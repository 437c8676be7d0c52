"""
Incremental K-means clustering for vector data.
"""

from .cluster import Cluster
from .exceptions import DegeneratePartitionError, DimensionMismatchError, KMeansError
from .kmeans import KMeans, PartitionResult, partition
from .member import Member
from .utils import create_sample_dataset, evaluate_clustering
from .version import __version__

__all__ = [
    "Member",
    "Cluster",
    "KMeans",
    "PartitionResult",
    "partition",
    "KMeansError",
    "DimensionMismatchError",
    "DegeneratePartitionError",
    "create_sample_dataset",
    "evaluate_clustering",
    "__version__",
]
