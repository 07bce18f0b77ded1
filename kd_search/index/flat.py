"""
Flat (brute-force) index: exact linear scan.

Same contract as KDTreeIndex. Used as the reference answer when checking
the tree and as a baseline for small collections.
"""

from __future__ import annotations

import time
from typing import Any, Optional, Sequence

import numpy as np

from kd_search.core.config import IndexConfig
from kd_search.core.errors import IndexBuildError, Ok, QueryError, Result
from kd_search.core.types import IndexStats, Neighbor, QueryResult, VectorPoint
from kd_search.index.base import (
    coerce_query,
    coordinate_matrix,
    validate_k,
    validate_points,
)
from kd_search.index.distance import squared_euclidean_batch


class FlatIndex:
    """Linear-scan index; points keep their input order."""

    __slots__ = ("_points", "_coords", "_dimension", "_build_time_ms")

    def __init__(
        self,
        points: list[VectorPoint],
        coords: np.ndarray,
        dimension: int,
        build_time_ms: float = 0.0,
    ) -> None:
        self._points = points
        self._coords = coords
        self._dimension = dimension
        self._build_time_ms = build_time_ms

    @classmethod
    def build(
        cls,
        points: Sequence[VectorPoint],
        config: Optional[IndexConfig] = None,
    ) -> Result["FlatIndex", IndexBuildError]:
        checked = validate_points(points, config)
        if checked.is_err():
            return checked  # type: ignore[return-value]
        dimension = checked.unwrap()

        start_time = time.perf_counter()
        coords = coordinate_matrix(points, dimension)
        coords.setflags(write=False)
        build_time_ms = (time.perf_counter() - start_time) * 1000
        return Ok(cls(list(points), coords, dimension, build_time_ms))

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def count(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def k_nearest(self, query: VectorPoint | Any, k: int) -> Result[QueryResult, QueryError]:
        """Scan every point; ties keep input order (stable sort)."""
        checked_k = validate_k(k)
        if checked_k.is_err():
            return checked_k  # type: ignore[return-value]
        coerced = coerce_query(query, self._dimension)
        if coerced.is_err():
            return coerced  # type: ignore[return-value]

        k = checked_k.unwrap()
        if k == 0:
            return Ok(QueryResult())

        start_time = time.perf_counter()
        distances = squared_euclidean_batch(coerced.unwrap(), self._coords)
        ranked = np.argsort(distances, kind="stable")[:k]

        neighbors = [
            Neighbor(
                payload=self._points[position].payload,
                squared_distance=float(distances[position]),
                rank=rank,
            )
            for rank, position in enumerate(ranked)
        ]
        return Ok(QueryResult(
            neighbors=neighbors,
            query_time_ms=(time.perf_counter() - start_time) * 1000,
            nodes_visited=len(self._points),
        ))

    def stats(self) -> IndexStats:
        return IndexStats(
            total_points=len(self._points),
            dimension=self._dimension,
            depth=0,
            build_time_ms=self._build_time_ms,
        )
