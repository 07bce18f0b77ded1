"""
Shared validation for spatial indexes.

Both KDTreeIndex and FlatIndex accept the same inputs and fail the same
way, so the checks live here.
"""

from __future__ import annotations

import numbers
from typing import Any, Optional, Sequence

import numpy as np

from kd_search.core.config import IndexConfig
from kd_search.core.errors import Err, IndexBuildError, Ok, QueryError, Result
from kd_search.core.types import VectorPoint
from kd_search.index.distance import as_coordinates


def validate_points(
    points: Sequence[VectorPoint],
    config: Optional[IndexConfig] = None,
) -> Result[int, IndexBuildError]:
    """
    Check that ``points`` is non-empty and uniformly dimensioned.

    Returns:
        Ok(dimension) or Err(IndexBuildError)
    """
    config = config or IndexConfig()
    if config.validate() is not None:
        return Err(IndexBuildError.invalid_dimension(config.dimension))  # type: ignore[arg-type]

    if len(points) == 0:
        return Err(IndexBuildError.empty())

    dimension = config.dimension if config.dimension is not None else points[0].dimension
    if dimension < 1:
        return Err(IndexBuildError.invalid_dimension(dimension))

    for position, point in enumerate(points):
        if point.dimension != dimension:
            return Err(IndexBuildError.dimension_mismatch(dimension, point.dimension, position))

    return Ok(dimension)


def coerce_query(query: Any, dimension: int) -> Result[np.ndarray, QueryError]:
    """
    Accept a VectorPoint (payload ignored) or any 1-D array-like.

    Returns:
        Ok(float64 coordinates) or Err(QueryError)
    """
    if isinstance(query, VectorPoint):
        coords = query.vector
    else:
        try:
            coords = as_coordinates(query)
        except (TypeError, ValueError) as e:
            return Err(QueryError.invalid_vector(str(e)))
        if coords.ndim != 1:
            return Err(QueryError.invalid_vector(f"expected 1-D vector, got shape {coords.shape}"))

    if coords.shape[0] != dimension:
        return Err(QueryError.dimension_mismatch(dimension, int(coords.shape[0])))
    return Ok(coords)


def validate_k(k: Any) -> Result[int, QueryError]:
    """k must be a non-negative integer (bools rejected)."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 0:
        return Err(QueryError.invalid_k(k))
    return Ok(int(k))


def coordinate_matrix(points: Sequence[VectorPoint], dimension: int) -> np.ndarray:
    """Stack point coordinates into a fresh (n, dimension) float64 matrix."""
    matrix = np.empty((len(points), dimension), dtype=np.float64)
    for row, point in enumerate(points):
        matrix[row] = point.vector
    return matrix
