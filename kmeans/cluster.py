"""
Cluster with an incrementally maintained centroid.
"""

from typing import Callable, List, Tuple, Union

import numpy as np

from .exceptions import DegeneratePartitionError, DimensionMismatchError
from .member import Member


class Cluster:
    """
    A cluster of members whose centroid is kept equal to their mean.

    The cluster keeps the coordinate-wise sum of its members, so adding or
    removing a member only costs O(dimension): the new centroid is the sum
    divided by the new size, with no rescan of the other members.

    A cluster is created from a seed (usually an initial centroid guess) that
    also becomes its first member, and it never drops to zero members:
    :meth:`remove` refuses to evict everything.

    Two clusters compare equal when their centroids are equal by value. The
    hash follows the centroid, so it changes whenever the cluster does.

    Args:
        seed: initial centroid, either a :class:`Member` or a 1-D array-like
    """

    def __init__(self, seed: Union[Member, np.ndarray, List[float]]):
        data = seed.data if isinstance(seed, Member) else seed
        first = Member(data)
        # Buffers are owned by the cluster and never handed out directly.
        self._sum = np.array(first.data, dtype=np.float64)
        self._centroid = self._sum.copy()
        self._members: List[Member] = [first]

    @property
    def dimension(self) -> int:
        return self._centroid.shape[0]

    def _check_dimension(self, vector: np.ndarray) -> None:
        if vector.ndim != 1 or vector.shape[0] != self.dimension:
            raise DimensionMismatchError(self.dimension, vector.shape[-1] if vector.ndim else 0)

    def add(self, member: Member) -> None:
        """
        Add a member and move the centroid towards it.

        Args:
            member: member to add; must have the cluster's dimension
        """
        self._check_dimension(member.data)
        self._members.append(member)
        self._sum += member.data
        self._centroid = self._sum / len(self._members)

    def remove(self, predicate: Callable[[np.ndarray], bool]) -> List[np.ndarray]:
        """
        Remove every member whose data satisfies ``predicate``.

        Matches are collected before anything is changed, then the member list
        is rebuilt without them and only the removed vectors are subtracted
        from the running sum.

        Args:
            predicate: called once per member with its read-only data vector

        Returns:
            Data vectors of the removed members, empty list if none matched

        Raises:
            DegeneratePartitionError: if every member matches. The cluster is
                left unchanged in that case.
        """
        keep: List[Member] = []
        removed: List[Member] = []
        for member in self._members:
            if predicate(member.data):
                removed.append(member)
            else:
                keep.append(member)

        if not removed:
            return []
        if not keep:
            raise DegeneratePartitionError(
                f"Removing all {len(removed)} members would leave the cluster empty"
            )

        for member in removed:
            self._sum -= member.data
        self._members = keep
        self._centroid = self._sum / len(self._members)
        return [member.data for member in removed]

    def distance_to(self, data) -> float:
        """Squared euclidean distance between ``data`` and the centroid."""
        vector = np.asarray(data, dtype=np.float64)
        self._check_dimension(vector)
        delta = vector - self._centroid
        return float(np.dot(delta, delta))

    def size(self) -> int:
        """Number of members in this cluster."""
        return len(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def get_members(self) -> Tuple[Member, ...]:
        """Read-only view of the members."""
        return tuple(self._members)

    def get_centroid(self) -> np.ndarray:
        """Copy of the mean of all members."""
        return self._centroid.copy()

    def get_sum(self) -> np.ndarray:
        """Copy of the coordinate-wise sum of all members."""
        return self._sum.copy()

    def inertia(self) -> float:
        """Sum of squared distances from the members to the centroid."""
        data = np.vstack([member.data for member in self._members])
        return float(np.sum((data - self._centroid) ** 2))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Cluster):
            return NotImplemented
        return np.array_equal(self._centroid, other._centroid)

    def __hash__(self) -> int:
        return hash(self._centroid.tobytes())

    def __repr__(self) -> str:
        return f"Cluster(size={len(self._members)}, centroid={self._centroid.tolist()})"
