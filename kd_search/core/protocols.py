"""
Protocol Definitions: Structural Interfaces for Pluggable Parts

    SpatialIndexProtocol: build once, query k nearest
    EmbedderProtocol:     text -> EmbeddingVector
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    Sequence,
    runtime_checkable,
)

if TYPE_CHECKING:
    from kd_search.core.errors import Result
    from kd_search.core.types import (
        EmbeddingVector,
        IndexStats,
        QueryResult,
        VectorPoint,
    )


# =============================================================================
# SPATIAL INDEX PROTOCOL
# =============================================================================
@runtime_checkable
class SpatialIndexProtocol(Protocol):
    """
    Read-only nearest-neighbor index built once over a fixed point set.

    Implementations:
        - KDTreeIndex: implicit k-d tree
        - FlatIndex: exact linear scan
    """

    @property
    def dimension(self) -> int:
        ...

    @property
    def count(self) -> int:
        ...

    def k_nearest(self, query: "VectorPoint | Any", k: int) -> "Result[QueryResult, Any]":
        """The k closest points by squared Euclidean distance."""
        ...

    def stats(self) -> "IndexStats":
        ...


# =============================================================================
# EMBEDDER PROTOCOL
# =============================================================================
@runtime_checkable
class EmbedderProtocol(Protocol):
    """
    Embedding collaborator.

    Errors are returned as plain messages; the pipeline wraps them into
    EmbeddingError and never retries.
    """

    @property
    def dimension(self) -> int:
        ...

    @property
    def model_name(self) -> str:
        ...

    def embed(self, text: str) -> "Result[EmbeddingVector, str]":
        ...

    def embed_batch(self, texts: Sequence[str]) -> "Result[list[EmbeddingVector], str]":
        ...
