"""
Exceptions raised by the K-means clustering engine.
"""

from typing import Optional


class KMeansError(Exception):
    """Base class for clustering errors."""


class DimensionMismatchError(KMeansError, ValueError):
    """A vector does not have the dimension of the cluster it meets."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a vector of dimension {expected}, got {actual}")


class DegeneratePartitionError(KMeansError):
    """A cluster would be left without any members."""

    def __init__(self, message: str, cluster_index: Optional[int] = None):
        self.cluster_index = cluster_index
        super().__init__(message)
