"""
Core Module: Types, Errors, Configuration and Protocols

Depends on numpy only.
"""

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
    ConfigError,
)
from kd_search.core.config import (
    IndexConfig,
    PipelineConfig,
)
from kd_search.core.protocols import (
    SpatialIndexProtocol,
    EmbedderProtocol,
)

__all__ = [
    # Types
    "EmbeddingVector",
    "VectorPoint",
    "Neighbor",
    "QueryResult",
    "IndexStats",
    # Errors
    "Result",
    "Ok",
    "Err",
    "ErrorCode",
    "VectorSearchError",
    "IndexBuildError",
    "QueryError",
    "EmbeddingError",
    "RecordError",
    "ConfigError",
    # Config
    "IndexConfig",
    "PipelineConfig",
    # Protocols
    "SpatialIndexProtocol",
    "EmbedderProtocol",
]
