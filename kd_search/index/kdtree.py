"""
Implicit k-d Tree Index

Exact k-nearest-neighbor search over a fixed set of VectorPoints.

Layout:
    The caller's point list is permuted in place so that the tree is
    encoded by index arithmetic alone. A sub-range [lo, hi) visited at
    depth d has its node at mid = (lo + hi) // 2, splits on dimension
    d % D, and owns left subtree [lo, mid) and right subtree [mid + 1, hi).
    No node objects are allocated.

Invariant:
    For the node at ``mid`` splitting on ``axis`` with value ``v``:
        coords[lo:mid, axis] <= v <= coords[mid + 1:hi, axis]

Algorithm:
    Build: cycle split dimensions by depth, place the median with
    numpy.argpartition (introselect, expected linear per level).
    O(D * N log N) expected time, O(log N) recursion depth.

    Query: depth-first descent into the side of the splitting hyperplane
    holding the query, keeping the best k in a bounded max-heap; the far
    side is skipped once the heap is full and the hyperplane is farther
    than the current worst candidate.
"""

from __future__ import annotations

import heapq
import time
from collections.abc import MutableSequence
from typing import Any, Optional, Sequence

import numpy as np

from kd_search.core.config import IndexConfig
from kd_search.core.errors import Err, IndexBuildError, Ok, QueryError, Result
from kd_search.core.types import IndexStats, Neighbor, QueryResult, VectorPoint
from kd_search.index.base import (
    coerce_query,
    coordinate_matrix,
    validate_k,
    validate_points,
)
from kd_search.index.distance import squared_euclidean, squared_plane_distance
from kd_search.observability.logging import get_logger

logger = get_logger(__name__)


class _SearchState:
    """Mutable state threaded through one k-nearest descent."""

    __slots__ = ("query", "k", "heap", "visited")

    def __init__(self, query: np.ndarray, k: int) -> None:
        self.query = query
        self.k = k
        # Max-heap of (-squared_distance, -position); heap[0] is the worst kept
        self.heap: list[tuple[float, int]] = []
        self.visited = 0

    @property
    def full(self) -> bool:
        return len(self.heap) >= self.k

    @property
    def worst(self) -> float:
        return -self.heap[0][0]

    def offer(self, squared_distance: float, position: int) -> None:
        if len(self.heap) < self.k:
            heapq.heappush(self.heap, (-squared_distance, -position))
        elif squared_distance < self.worst:
            heapq.heapreplace(self.heap, (-squared_distance, -position))

    def ranked(self) -> list[tuple[float, int]]:
        """(squared_distance, position) ascending; ties by position."""
        return sorted((-neg_dist, -neg_pos) for neg_dist, neg_pos in self.heap)


class KDTreeIndex:
    """
    Read-only k-d tree over VectorPoints.

    Built once with ``KDTreeIndex.build(points)``; there is no insert or
    delete. Safe to query from several threads since queries never mutate
    the index.

    Example:
        index = KDTreeIndex.build(points).unwrap()
        result = index.k_nearest(query_point, k=10).unwrap()
        for neighbor in result:
            print(neighbor.payload, neighbor.squared_distance)
    """

    __slots__ = (
        "_points",
        "_coords",
        "_dimension",
        "_depth",
        "_build_time_ms",
    )

    def __init__(
        self,
        points: list[VectorPoint],
        coords: np.ndarray,
        dimension: int,
        depth: int,
        build_time_ms: float = 0.0,
    ) -> None:
        """Use ``build``; this only wires together an already-laid-out tree."""
        self._points = points
        self._coords = coords
        self._dimension = dimension
        self._depth = depth
        self._build_time_ms = build_time_ms

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================
    @classmethod
    def build(
        cls,
        points: Sequence[VectorPoint],
        config: Optional[IndexConfig] = None,
    ) -> Result["KDTreeIndex", IndexBuildError]:
        """
        Build a balanced tree over ``points``.

        A mutable sequence is permuted in place into the tree layout and
        held by the index; any other sequence is copied into a list first.

        Returns:
            Ok(KDTreeIndex), or Err(IndexBuildError) for an empty input
            (INDEX_EMPTY) or non-uniform dimensionality
            (INDEX_DIMENSION_MISMATCH). Nothing is permuted on error.
        """
        checked = validate_points(points, config)
        if checked.is_err():
            logger.debug("Index build rejected", error=str(checked.error))
            return checked  # type: ignore[return-value]
        dimension = checked.unwrap()

        start_time = time.perf_counter()

        coords = coordinate_matrix(points, dimension)
        order = np.arange(len(points))
        depth = _partition(coords, order, 0, len(points), 0, dimension)

        snapshot = list(points)
        laid_out = [snapshot[i] for i in order.tolist()]
        if isinstance(points, list):
            points[:] = laid_out
            owned = points
        elif isinstance(points, MutableSequence):
            # deque and friends don't take slice assignment
            for position, point in enumerate(laid_out):
                points[position] = point
            owned = laid_out
        else:
            owned = laid_out
        coords.setflags(write=False)

        build_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Built k-d tree",
            points=len(owned),
            dimension=dimension,
            depth=depth,
            build_time_ms=round(build_time_ms, 3),
        )
        return Ok(cls(owned, coords, dimension, depth, build_time_ms))

    # =========================================================================
    # PROPERTIES
    # =========================================================================
    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def count(self) -> int:
        return len(self._points)

    @property
    def depth(self) -> int:
        """Number of levels in the tree."""
        return self._depth

    @property
    def points(self) -> tuple[VectorPoint, ...]:
        """Points in tree layout order."""
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"KDTreeIndex(count={self.count}, dimension={self._dimension}, depth={self._depth})"

    # =========================================================================
    # QUERY
    # =========================================================================
    def k_nearest(self, query: VectorPoint | Any, k: int) -> Result[QueryResult, QueryError]:
        """
        The ``k`` points closest to ``query`` by squared Euclidean distance.

        Args:
            query: VectorPoint (payload ignored) or 1-D array-like of length D
            k: number of neighbors; 0 yields an empty result, k >= count
               yields every point

        Returns:
            Ok(QueryResult) ascending by squared distance, ties ordered by
            tree position; Err(QueryError) on dimension mismatch or bad k.
        """
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

        state = _SearchState(coerced.unwrap(), k)
        self._search(state, 0, len(self._points), 0)

        neighbors = [
            Neighbor(
                payload=self._points[position].payload,
                squared_distance=squared_distance,
                rank=rank,
            )
            for rank, (squared_distance, position) in enumerate(state.ranked())
        ]

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "k-nearest query",
            k=k,
            returned=len(neighbors),
            nodes_visited=state.visited,
            query_time_ms=round(elapsed_ms, 3),
        )
        return Ok(QueryResult(
            neighbors=neighbors,
            query_time_ms=elapsed_ms,
            nodes_visited=state.visited,
        ))

    def _search(self, state: _SearchState, lo: int, hi: int, depth: int) -> None:
        if lo >= hi:
            return

        mid = (lo + hi) // 2
        node = self._coords[mid]
        state.offer(squared_euclidean(node, state.query), mid)
        state.visited += 1

        axis = depth % self._dimension
        split_value = node[axis]
        query_value = state.query[axis]

        if query_value < split_value:
            near, far = (lo, mid), (mid + 1, hi)
        else:
            near, far = (mid + 1, hi), (lo, mid)

        self._search(state, near[0], near[1], depth + 1)

        if not state.full or squared_plane_distance(query_value, split_value) <= state.worst:
            self._search(state, far[0], far[1], depth + 1)

    # =========================================================================
    # STATS
    # =========================================================================
    def stats(self) -> IndexStats:
        return IndexStats(
            total_points=len(self._points),
            dimension=self._dimension,
            depth=self._depth,
            build_time_ms=self._build_time_ms,
        )


# =============================================================================
# PARTITIONING
# =============================================================================
def _partition(
    coords: np.ndarray,
    order: np.ndarray,
    lo: int,
    hi: int,
    depth: int,
    dimension: int,
) -> int:
    """
    Lay out coords[lo:hi] (and the matching ``order`` entries) as a subtree.

    Returns:
        Number of levels in the subtree (0 for an empty range).
    """
    size = hi - lo
    if size <= 1:
        return size

    axis = depth % dimension
    mid = (lo + hi) // 2
    selection = np.argpartition(coords[lo:hi, axis], mid - lo)
    coords[lo:hi] = coords[lo:hi][selection]
    order[lo:hi] = order[lo:hi][selection]

    left = _partition(coords, order, lo, mid, depth + 1, dimension)
    right = _partition(coords, order, mid + 1, hi, depth + 1, dimension)
    return 1 + max(left, right)
