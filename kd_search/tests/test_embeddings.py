"""
Unit Tests: Embedders

Tests:
    - MockEmbedder determinism and shape
    - BaseEmbedder batch default
    - HuggingFaceEmbedder over an injected encoder
"""

import pytest
import numpy as np

from kd_search.core.errors import Err, Ok
from kd_search.core.protocols import EmbedderProtocol
from kd_search.core.types import EmbeddingVector
from kd_search.embeddings import BaseEmbedder, MockEmbedder
from kd_search.embeddings.huggingface import HuggingFaceEmbedder


class FakeEncoder:
    """Stands in for a loaded SentenceTransformer."""

    def __init__(self, dimension=4, fail=False):
        self.dimension = dimension
        self.fail = fail
        self.calls = []

    def get_sentence_embedding_dimension(self):
        return self.dimension

    def encode(self, texts, normalize_embeddings=False, convert_to_numpy=True):
        self.calls.append(list(texts))
        if self.fail:
            raise RuntimeError("CUDA out of memory")
        return np.array([[float(len(t))] * self.dimension for t in texts])


class PickyEmbedder(BaseEmbedder):
    def __init__(self):
        super().__init__(model_name="picky", dimension=1)
        self.seen = []

    def embed(self, text):
        self.seen.append(text)
        if text == "bad":
            return Err("cannot embed 'bad'")
        return Ok(EmbeddingVector.from_list([1.0]))


class TestMockEmbedder:
    """Tests for MockEmbedder."""

    def test_dimension_and_norm(self):
        embedder = MockEmbedder(dimension=16)
        vec = embedder.embed("hello").unwrap()

        assert vec.dimension == 16
        np.testing.assert_allclose(np.linalg.norm(vec.to_numpy()), 1.0, rtol=1e-5)

    def test_deterministic(self):
        first = MockEmbedder(dimension=8).embed("same text").unwrap()
        second = MockEmbedder(dimension=8).embed("same text").unwrap()

        assert first == second

    def test_different_texts_differ(self):
        embedder = MockEmbedder(dimension=8)
        assert embedder.embed("a").unwrap() != embedder.embed("b").unwrap()

    def test_batch(self):
        vectors = MockEmbedder(dimension=4).embed_batch(["a", "b", "c"]).unwrap()
        assert len(vectors) == 3

    def test_satisfies_protocol(self):
        assert isinstance(MockEmbedder(), EmbedderProtocol)
        assert MockEmbedder().model_name == "mock"


class TestBaseEmbedder:
    """Tests for the default batch implementation."""

    def test_batch_stops_at_first_failure(self):
        embedder = PickyEmbedder()

        result = embedder.embed_batch(["ok", "bad", "never"])

        assert result.is_err()
        assert "bad" in result.error
        assert embedder.seen == ["ok", "bad"]


class TestHuggingFaceEmbedder:
    """Tests for HuggingFaceEmbedder with an injected encoder."""

    def test_dimension_from_encoder(self):
        embedder = HuggingFaceEmbedder(model="tiny", encoder=FakeEncoder(dimension=6))

        assert embedder.dimension == 6
        assert embedder.model_name == "tiny"

    def test_embed(self):
        embedder = HuggingFaceEmbedder(encoder=FakeEncoder(dimension=3))

        vec = embedder.embed("abcd").unwrap()

        assert vec.to_list() == [4.0, 4.0, 4.0]

    def test_batch_is_one_encode_call(self):
        encoder = FakeEncoder(dimension=2)
        embedder = HuggingFaceEmbedder(encoder=encoder)

        vectors = embedder.embed_batch(["a", "bb", "ccc"]).unwrap()

        assert [v.to_list()[0] for v in vectors] == [1.0, 2.0, 3.0]
        assert encoder.calls == [["a", "bb", "ccc"]]

    def test_backend_failure_is_err(self):
        embedder = HuggingFaceEmbedder(encoder=FakeEncoder(fail=True))

        result = embedder.embed("anything")

        assert result.is_err()
        assert "CUDA out of memory" in result.error


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
