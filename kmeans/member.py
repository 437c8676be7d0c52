"""
Data point wrapper used by the incremental K-means engine.
"""

import numpy as np


class Member:
    """
    A single data point taking part in a clustering run.

    The vector is copied on construction and frozen, so neither the caller
    nor a cluster can change it afterwards. Every member of one run must have
    the same dimension; this is checked where the member meets a cluster.

    Args:
        data: 1-D sequence of numbers (the feature vector)
    """

    __slots__ = ('_data',)

    def __init__(self, data):
        vector = np.array(data, dtype=np.float64)
        if vector.ndim != 1:
            raise ValueError(f"Member data must be 1-D, got shape {vector.shape}")
        vector.flags.writeable = False
        self._data = vector

    @property
    def data(self) -> np.ndarray:
        """Read-only feature vector."""
        return self._data

    def __len__(self) -> int:
        return self._data.shape[0]

    def __array__(self, dtype=None, copy=None):
        # np.asarray may share the read-only buffer, np.array gets its own copy
        if copy:
            return np.array(self._data, dtype=dtype, copy=True)
        if dtype is None or np.dtype(dtype) == self._data.dtype:
            return self._data
        if copy is False:
            raise ValueError(f"Cannot convert member data to {dtype} without a copy")
        return self._data.astype(dtype)

    def __repr__(self) -> str:
        return f"Member({self._data.tolist()})"
