"""
Query Pipeline: records -> embeddings -> k-d tree -> ranked neighbors

Orchestration only. All fallible I/O (embedding calls, record
validation) happens here and comes back as ``Err``; nothing is retried
and nothing is swallowed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from kd_search.core.config import PipelineConfig
from kd_search.core.errors import (
    EmbeddingError,
    Err,
    Ok,
    RecordError,
    Result,
    VectorSearchError,
)
from kd_search.core.protocols import EmbedderProtocol, SpatialIndexProtocol
from kd_search.core.types import EmbeddingVector, QueryResult, VectorPoint
from kd_search.index.kdtree import KDTreeIndex
from kd_search.observability.logging import get_logger
from kd_search.pipeline.records import Record

logger = get_logger(__name__)


class QueryPipeline:
    """
    Embed records, build the index, and answer text or vector queries.

    Example:
        pipeline = QueryPipeline(MockEmbedder(dimension=8))
        index = pipeline.build_index(records).unwrap()
        result = pipeline.search(index, "rich", k=3).unwrap()
    """

    __slots__ = ("_embedder", "_config")

    def __init__(
        self,
        embedder: EmbedderProtocol,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self._embedder = embedder
        self._config = config or PipelineConfig()
        if error_msg := self._config.validate():
            raise ValueError(f"Invalid pipeline config: {error_msg}")
        dimensions = self._config.dimensions
        if dimensions is not None and dimensions > embedder.dimension:
            raise ValueError(
                f"Invalid pipeline config: dimensions={dimensions} exceeds "
                f"embedder dimension {embedder.dimension}"
            )

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def embedder(self) -> EmbedderProtocol:
        return self._embedder

    # =========================================================================
    # EMBEDDING
    # =========================================================================
    def _project(self, embedding: EmbeddingVector) -> EmbeddingVector:
        if self._config.dimensions is None:
            return embedding
        return embedding.truncate(self._config.dimensions)

    def _embedding_failed(self, message: str, text: str = "") -> EmbeddingError:
        error = EmbeddingError.failure(self._embedder.model_name, message, text)
        logger.error("Embedding failed", error=error.to_dict())
        return error

    def _dimension_mismatch(self, vector: EmbeddingVector) -> Optional[EmbeddingError]:
        """An error when ``vector`` disagrees with the declared dimension."""
        if vector.dimension == self._embedder.dimension:
            return None
        error = EmbeddingError.dimension_mismatch(
            self._embedder.model_name, self._embedder.dimension, vector.dimension
        )
        logger.error("Embedding dimension mismatch", error=error.to_dict())
        return error

    def embed_text(self, text: str) -> Result[VectorPoint, EmbeddingError]:
        """Embed a query text into a payload-less probe point."""
        result = self._embedder.embed(text)
        if result.is_err():
            return Err(self._embedding_failed(str(result.error), text))
        vector = result.unwrap()
        mismatch = self._dimension_mismatch(vector)
        if mismatch is not None:
            return Err(mismatch)
        return Ok(VectorPoint.from_embedding(self._project(vector)))

    def embed_records(
        self, records: Sequence[Record]
    ) -> Result[list[VectorPoint], VectorSearchError]:
        """
        One VectorPoint per record, in input order, payload = the record.

        Records with blank text are rejected before anything is embedded.
        """
        for position, record in enumerate(records):
            if not record.text or not record.text.strip():
                error = RecordError.missing_text(self._config.text_field, position)
                logger.error("Rejected record", error=error.to_dict())
                return Err(error)

        texts = [record.text for record in records]
        if self._config.embed_workers > 1 and len(texts) > 1:
            embedded = self._embed_parallel(texts)
        else:
            batch = self._embedder.embed_batch(texts)
            embedded = batch.map_err(lambda msg: self._embedding_failed(str(msg)))
        if embedded.is_err():
            return embedded  # type: ignore[return-value]

        vectors = embedded.unwrap()
        if len(vectors) != len(records):
            return Err(self._embedding_failed(
                f"returned {len(vectors)} vectors for {len(records)} texts"
            ))

        # Checked once for both the batch and the thread-pool paths
        for vector in vectors:
            mismatch = self._dimension_mismatch(vector)
            if mismatch is not None:
                return Err(mismatch)

        points = [
            VectorPoint.from_embedding(self._project(vector), payload=record)
            for record, vector in zip(records, vectors)
        ]
        logger.info(
            "Embedded records",
            records=len(points),
            model=self._embedder.model_name,
            dimension=points[0].dimension if points else None,
        )
        return Ok(points)

    def _embed_parallel(
        self, texts: list[str]
    ) -> Result[list[EmbeddingVector], EmbeddingError]:
        with ThreadPoolExecutor(max_workers=self._config.embed_workers) as pool:
            results = list(pool.map(self._embedder.embed, texts))

        vectors: list[EmbeddingVector] = []
        for text, result in zip(texts, results):
            if result.is_err():
                return Err(self._embedding_failed(str(result.error), text))
            vectors.append(result.unwrap())
        return Ok(vectors)

    # =========================================================================
    # INDEX + QUERY
    # =========================================================================
    def build_index(
        self, records: Sequence[Record]
    ) -> Result[KDTreeIndex, VectorSearchError]:
        """Embed ``records`` and build a k-d tree over them."""
        result = self.embed_records(records).and_then(KDTreeIndex.build)
        if result.is_err():
            logger.error("Index build failed", error=result.error.to_dict())
        else:
            logger.info("Index ready", **result.unwrap().stats().to_dict())
        return result

    def query(
        self,
        index: SpatialIndexProtocol,
        query: VectorPoint,
        k: int,
    ) -> Result[QueryResult, VectorSearchError]:
        """Run ``k_nearest`` and hand back the ranked result."""
        result = index.k_nearest(query, k)
        if result.is_err():
            logger.error("Query failed", error=result.error.to_dict())
        return result

    def search(
        self,
        index: SpatialIndexProtocol,
        text: str,
        k: Optional[int] = None,
    ) -> Result[QueryResult, VectorSearchError]:
        """Embed ``text`` and return its ``k`` nearest records."""
        k = self._config.top_k if k is None else k
        with logger.context(query=text[:80], k=k):
            result = self.embed_text(text).and_then(
                lambda point: self.query(index, point, k)
            )
            if result.is_ok():
                hits = result.unwrap()
                logger.info(
                    "Search complete",
                    returned=len(hits),
                    query_time_ms=round(hits.query_time_ms, 3),
                )
        return result
