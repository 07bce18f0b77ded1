"""
Core Type Definitions

    EmbeddingVector: float32 embedding as produced by an embedder
    VectorPoint:     fixed-length coordinates + optional payload, the unit
                     stored in (and used to probe) a spatial index
    Neighbor:        one ranked hit (payload, squared distance, rank)
    QueryResult:     ordered neighbors, ascending by squared distance
    IndexStats:      build statistics

Coordinates inside the index are float64 so that the tree and the
brute-force scan compute bit-identical squared distances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

import numpy as np


# =============================================================================
# EMBEDDING VECTOR
# =============================================================================
@dataclass(slots=True)
class EmbeddingVector:
    """
    Embedding returned by an embedder, stored as raw float32 bytes.

    Supported inputs:
        - list[float] via from_list
        - numpy.ndarray via from_numpy (flattened, cast to float32)
    """
    _buffer: bytes
    dimension: int

    # Cached numpy view (lazy-initialized)
    _np_cache: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_list(cls, values: Sequence[float]) -> "EmbeddingVector":
        arr = np.asarray(values, dtype=np.float32)
        return cls(_buffer=arr.tobytes(), dimension=len(arr))

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "EmbeddingVector":
        arr = np.asarray(arr, dtype=np.float32).flatten()
        return cls(_buffer=arr.tobytes(), dimension=len(arr))

    def to_numpy(self) -> np.ndarray:
        """Read-only float32 view over the buffer (cached after first call)."""
        if self._np_cache is None:
            self._np_cache = np.frombuffer(self._buffer, dtype=np.float32)
        return self._np_cache

    def to_list(self) -> list[float]:
        return self.to_numpy().astype(float).tolist()

    def truncate(self, dimensions: int) -> "EmbeddingVector":
        """
        Keep only the leading ``dimensions`` coordinates.

        A no-op copy when the vector is already that short.
        """
        return EmbeddingVector.from_numpy(self.to_numpy()[:dimensions])

    def __len__(self) -> int:
        return self.dimension

    def __getitem__(self, idx: int) -> float:
        return float(self.to_numpy()[idx])

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_list())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmbeddingVector):
            return False
        return self._buffer == other._buffer


# =============================================================================
# VECTOR POINT
# =============================================================================
@dataclass(frozen=True, slots=True, eq=False)
class VectorPoint:
    """
    Immutable point in D-dimensional space with an opaque payload.

    The payload is whatever the caller wants back from a query (a record,
    an id, a dict). Query probes leave it as None.

    Only single coordinates are ever compared, so the point itself defines
    no equality or ordering.
    """
    vector: np.ndarray
    payload: Any = None

    def __post_init__(self) -> None:
        arr = np.array(self.vector, dtype=np.float64).reshape(-1)
        arr.setflags(write=False)
        object.__setattr__(self, "vector", arr)

    @classmethod
    def from_embedding(
        cls, embedding: EmbeddingVector, payload: Any = None
    ) -> "VectorPoint":
        return cls(vector=embedding.to_numpy(), payload=payload)

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])

    def coordinate(self, dimension_index: int) -> float:
        """
        Coordinate along ``dimension_index``.

        Raises:
            IndexError: if ``dimension_index`` is outside [0, dimension).
                Callers guarantee the range by construction.
        """
        if not 0 <= dimension_index < self.vector.shape[0]:
            raise IndexError(
                f"coordinate {dimension_index} out of range for "
                f"dimension {self.vector.shape[0]}"
            )
        return float(self.vector[dimension_index])

    def __len__(self) -> int:
        return self.dimension

    def __repr__(self) -> str:
        return f"VectorPoint(dimension={self.dimension}, payload={self.payload!r})"


# =============================================================================
# QUERY OUTPUT
# =============================================================================
@dataclass(frozen=True, slots=True)
class Neighbor:
    """
    Single ranked hit.

    Attributes:
        payload: payload of the matched point
        squared_distance: sum of squared per-dimension differences to the query
        rank: position in the result (0-indexed)
    """
    payload: Any
    squared_distance: float
    rank: int = 0

    @property
    def distance(self) -> float:
        """Euclidean distance, for display only."""
        return float(np.sqrt(self.squared_distance))

    def to_dict(self) -> dict[str, Any]:
        payload = self.payload
        if hasattr(payload, "to_dict"):
            payload = payload.to_dict()
        return {
            "rank": self.rank,
            "squared_distance": self.squared_distance,
            "payload": payload,
        }


@dataclass(slots=True)
class QueryResult:
    """
    Neighbors ordered ascending by squared distance, at most k long.

    Attributes:
        neighbors: ranked hits
        query_time_ms: time spent inside the index
        nodes_visited: points whose distance was computed
    """
    neighbors: list[Neighbor] = field(default_factory=list)
    query_time_ms: float = 0.0
    nodes_visited: int = 0

    def __len__(self) -> int:
        return len(self.neighbors)

    def __iter__(self) -> Iterator[Neighbor]:
        return iter(self.neighbors)

    def __getitem__(self, idx: int) -> Neighbor:
        return self.neighbors[idx]

    @property
    def payloads(self) -> list[Any]:
        return [n.payload for n in self.neighbors]

    @property
    def distances(self) -> list[float]:
        return [n.squared_distance for n in self.neighbors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "neighbors": [n.to_dict() for n in self.neighbors],
            "query_time_ms": self.query_time_ms,
            "nodes_visited": self.nodes_visited,
        }


# =============================================================================
# INDEX STATISTICS
# =============================================================================
@dataclass(frozen=True, slots=True)
class IndexStats:
    """
    Statistics captured when an index is built.

    Attributes:
        total_points: number of indexed points
        dimension: coordinates per point
        depth: levels in the implicit tree (0 for a flat index)
        build_time_ms: construction time
    """
    total_points: int
    dimension: int
    depth: int = 0
    build_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_points": self.total_points,
            "dimension": self.dimension,
            "depth": self.depth,
            "build_time_ms": self.build_time_ms,
        }
