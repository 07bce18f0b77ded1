"""
Distance Kernels: Squared Euclidean

The only metric the indexes support. Squared distance skips the square
root and preserves rank order, which is all nearest-neighbor ranking needs.

Both kernels compute ``sum((a - b) ** 2)`` in float64 with the same
reduction, so a tree search and a linear scan agree bit for bit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

VectorLike = Union[np.ndarray, list[float], "npt.NDArray[np.float64]"]


def as_coordinates(v: VectorLike) -> np.ndarray:
    """Coerce to a contiguous float64 array."""
    return np.ascontiguousarray(v, dtype=np.float64)


def squared_euclidean(a: VectorLike, b: VectorLike) -> float:
    """
    Sum of squared per-dimension differences.

    Complexity: O(d)
    """
    diff = as_coordinates(a) - as_coordinates(b)
    return float(np.sum(diff * diff))


def squared_euclidean_batch(query: VectorLike, vectors: VectorLike) -> np.ndarray:
    """
    Squared distance from ``query`` (shape [d]) to every row of ``vectors``
    (shape [n, d]).

    Rows are reduced one at a time so each entry equals
    ``squared_euclidean(query, row)`` exactly.

    Returns:
        float64 array of shape [n]
    """
    query = as_coordinates(query)
    vectors = as_coordinates(vectors)
    out = np.empty(vectors.shape[0], dtype=np.float64)
    for i, row in enumerate(vectors):
        diff = row - query
        out[i] = np.sum(diff * diff)
    return out


def squared_plane_distance(query_coordinate: float, split_value: float) -> float:
    """Squared distance from a point to an axis-aligned splitting hyperplane."""
    delta = query_coordinate - split_value
    return delta * delta


def euclidean(a: VectorLike, b: VectorLike) -> float:
    """Euclidean distance, for display."""
    return float(np.sqrt(squared_euclidean(a, b)))
