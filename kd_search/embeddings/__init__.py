"""
Embeddings Module: the embed(text) -> vector collaborator

    - BaseEmbedder / EmbedderProtocol
    - MockEmbedder: deterministic, no dependencies
    - HuggingFaceEmbedder: sentence-transformers (lazy, optional extra)
"""

from kd_search.embeddings.base import (
    BaseEmbedder,
    EmbedderProtocol,
    MockEmbedder,
)

__all__ = [
    "BaseEmbedder",
    "EmbedderProtocol",
    "MockEmbedder",
    "HuggingFaceEmbedder",
]


def __getattr__(name: str):
    if name == "HuggingFaceEmbedder":
        from kd_search.embeddings.huggingface import HuggingFaceEmbedder
        return HuggingFaceEmbedder
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
