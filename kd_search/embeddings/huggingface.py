"""
HuggingFace Embeddings: SentenceTransformers Integration

Default model is all-MiniLM-L12-v2 (384 dimensions), the sentence
embedding model the book search was designed around.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from kd_search.core.config import DEFAULT_MODEL
from kd_search.core.errors import Err, Ok, Result
from kd_search.core.types import EmbeddingVector
from kd_search.embeddings.base import BaseEmbedder


class HuggingFaceEmbedder(BaseEmbedder):
    """
    Sentence embeddings via ``sentence_transformers.SentenceTransformer``.

    Example:
        embedder = HuggingFaceEmbedder()
        result = embedder.embed("A story about a rich family")

    Args:
        model: model name or local path
        device: "cpu", "cuda", "mps", or None for auto
        normalize: L2-normalize embeddings
        encoder: an already-loaded object with ``encode`` and
            ``get_sentence_embedding_dimension``; skips model loading
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        device: Optional[str] = None,
        normalize: bool = False,
        encoder: Optional[Any] = None,
    ) -> None:
        if encoder is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError:
                raise ImportError(
                    "sentence-transformers not installed. "
                    "Run: pip install kd-search[huggingface]"
                )
            encoder = SentenceTransformer(model, device=device)

        self._model = encoder
        self._normalize = normalize

        dim = self._model.get_sentence_embedding_dimension()
        super().__init__(model_name=model, dimension=int(dim))

    def embed(self, text: str) -> Result[EmbeddingVector, str]:
        result = self.embed_batch([text])
        if result.is_err():
            return Err(result.error)  # type: ignore[arg-type]
        return Ok(result.unwrap()[0])

    def embed_batch(self, texts: Sequence[str]) -> Result[list[EmbeddingVector], str]:
        """One ``encode`` call for the whole batch."""
        try:
            embeddings = self._model.encode(
                list(texts),
                normalize_embeddings=self._normalize,
                convert_to_numpy=True,
            )
        except Exception as e:
            return Err(f"HuggingFace embedding failed: {e}")

        return Ok([
            EmbeddingVector.from_numpy(np.asarray(emb, dtype=np.float32))
            for emb in embeddings
        ])
