"""
kd_search: Semantic Nearest-Neighbor Retrieval over a k-d Tree

Text records are embedded into fixed-dimension vectors, laid out in an
implicit k-d tree, and queried for the k closest records by squared
Euclidean distance.

Usage:
    from kd_search import KDTreeIndex, VectorPoint

    points = [VectorPoint([0.0, 0.0], "A"), VectorPoint([1.0, 1.0], "B")]
    index = KDTreeIndex.build(points).unwrap()
    result = index.k_nearest([0.0, 1.0], k=1).unwrap()

    # From text
    from kd_search.embeddings import HuggingFaceEmbedder
    from kd_search.pipeline import QueryPipeline, load_records

    pipeline = QueryPipeline(HuggingFaceEmbedder())
    index = pipeline.build_index(load_records("data/books.json").unwrap()).unwrap()
    result = pipeline.search(index, "rich", k=10)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core types (numpy only)
from kd_search.core.types import (
    EmbeddingVector,
    VectorPoint,
    Neighbor,
    QueryResult,
    IndexStats,
)
from kd_search.core.errors import (
    Result,
    Ok,
    Err,
    ErrorCode,
    VectorSearchError,
    IndexBuildError,
    QueryError,
    EmbeddingError,
    RecordError,
)
from kd_search.index import KDTreeIndex, FlatIndex


def __getattr__(name: str):
    """Lazy access to the pipeline layer."""
    if name == "QueryPipeline":
        from kd_search.pipeline.query import QueryPipeline
        return QueryPipeline
    if name == "Record":
        from kd_search.pipeline.records import Record
        return Record
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    # Core types
    "EmbeddingVector",
    "VectorPoint",
    "Neighbor",
    "QueryResult",
    "IndexStats",
    # Error handling
    "Result",
    "Ok",
    "Err",
    "ErrorCode",
    "VectorSearchError",
    "IndexBuildError",
    "QueryError",
    "EmbeddingError",
    "RecordError",
    # Indexes
    "KDTreeIndex",
    "FlatIndex",
    # Pipeline (lazy)
    "QueryPipeline",
    "Record",
]
