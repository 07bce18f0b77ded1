"""
Base Embedder: Abstract Base Class and Test Double

Provides:
    - BaseEmbedder: shared dimension/model bookkeeping, batch via single embed
    - MockEmbedder: deterministic vectors derived from a text digest
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from kd_search.core.errors import Ok, Result
from kd_search.core.protocols import EmbedderProtocol
from kd_search.core.types import EmbeddingVector

__all__ = ["BaseEmbedder", "EmbedderProtocol", "MockEmbedder"]


class BaseEmbedder(ABC):
    """
    Abstract base class for embedders.

    Subclasses implement ``embed``; ``embed_batch`` defaults to one call per
    text and stops at the first failure.
    """

    def __init__(self, model_name: str, dimension: int) -> None:
        self._model_name = model_name
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    @abstractmethod
    def embed(self, text: str) -> Result[EmbeddingVector, str]:
        ...

    def embed_batch(self, texts: Sequence[str]) -> Result[list[EmbeddingVector], str]:
        results: list[EmbeddingVector] = []
        for text in texts:
            result = self.embed(text)
            if result.is_err():
                return result  # type: ignore[return-value]
            results.append(result.unwrap())
        return Ok(results)


class MockEmbedder(BaseEmbedder):
    """
    Deterministic embedder for tests and offline runs.

    The generator is seeded from a SHA-256 digest of the text, so the same
    text maps to the same unit vector in every process.
    """

    def __init__(self, dimension: int = 384) -> None:
        super().__init__(model_name="mock", dimension=dimension)

    def embed(self, text: str) -> Result[EmbeddingVector, str]:
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "little")
        rng = np.random.default_rng(seed)
        vec = rng.standard_normal(self._dimension).astype(np.float32)
        vec = vec / np.linalg.norm(vec)
        return Ok(EmbeddingVector.from_numpy(vec))
