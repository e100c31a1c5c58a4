"""
Read-only container for the fixed-dimension vectors being clustered.
"""

from typing import Iterator, Sequence, Union

import numpy as np


class PointSet:
    """
    Immutable view over M points of dimension N.

    The points are stored once as a ``float64`` array whose buffer is
    flagged read-only, so the engines (and their worker threads) can share
    it without copying. Indices are stable for the lifetime of the object.
    """

    def __init__(self, points: Union[np.ndarray, Sequence[Sequence[float]]]):
        """
        Args:
            points: 2-D array-like of shape (n_points, n_features). A 1-D
                array-like is read as n_points points of dimension 1.

        Raises:
            ValueError: If the rows have different lengths or contain NaN/inf.
        """
        if isinstance(points, PointSet):
            data = points.data
        else:
            try:
                data = np.array(points, dtype=np.float64)
            except ValueError as e:
                raise ValueError(f"Points must share a single dimension: {e}") from e

        if data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise ValueError(f"Expected a 2-D array of points, got shape {data.shape}")
        if data.size and not np.all(np.isfinite(data)):
            raise ValueError("Points must not contain NaN or infinite values")

        data.flags.writeable = False
        self._data = data

    @property
    def data(self) -> np.ndarray:
        """The underlying read-only (n_points, n_features) array."""
        return self._data

    @property
    def dimension(self) -> int:
        return self._data.shape[1]

    def chunk(self, start: int, stop: int) -> np.ndarray:
        """Read-only view of the contiguous rows ``[start, stop)``."""
        return self._data[start:stop]

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, index) -> np.ndarray:
        return self._data[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"PointSet(n_points={len(self)}, dimension={self.dimension})"
