"""
Configuration Classes: Index and Pipeline Settings

Frozen dataclasses with ``validate()`` returning an error message (or None)
and ``from_env()`` for environment overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from kd_search.core.errors import ConfigError, Err, Ok, Result


DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L12-v2"


# =============================================================================
# INDEX CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class IndexConfig:
    """
    Spatial index configuration.

    Parameters:
        dimension: pin D up front; None means "take it from the first point"
    """
    dimension: Optional[int] = None

    def validate(self) -> Optional[str]:
        if self.dimension is not None and self.dimension < 1:
            return f"dimension must be >= 1, got {self.dimension}"
        return None


# =============================================================================
# PIPELINE CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """
    Query pipeline configuration.

    Parameters:
        text_field: record field that gets embedded
        top_k: default number of neighbors for text searches
        dimensions: keep only the leading N embedding coordinates (None = all)
        embed_workers: threads used to embed records (1 = one batch call)
        model_name: sentence-transformers model for the CLI
    """
    text_field: str = "summary"
    top_k: int = 10
    dimensions: Optional[int] = None
    embed_workers: int = 1
    model_name: str = DEFAULT_MODEL

    def validate(self) -> Optional[str]:
        if not self.text_field:
            return "text_field must be non-empty"
        if self.top_k < 0:
            return f"top_k must be >= 0, got {self.top_k}"
        if self.dimensions is not None and self.dimensions < 1:
            return f"dimensions must be >= 1, got {self.dimensions}"
        if self.embed_workers < 1:
            return f"embed_workers must be >= 1, got {self.embed_workers}"
        return None

    @classmethod
    def from_env(cls) -> Result["PipelineConfig", ConfigError]:
        """
        Build from KDSEARCH_* environment variables.

        Variables:
            KDSEARCH_TEXT_FIELD, KDSEARCH_TOP_K, KDSEARCH_DIMENSIONS,
            KDSEARCH_EMBED_WORKERS, KDSEARCH_MODEL
        """
        try:
            dimensions = os.getenv("KDSEARCH_DIMENSIONS")
            config = cls(
                text_field=os.getenv("KDSEARCH_TEXT_FIELD", "summary"),
                top_k=int(os.getenv("KDSEARCH_TOP_K", "10")),
                dimensions=int(dimensions) if dimensions else None,
                embed_workers=int(os.getenv("KDSEARCH_EMBED_WORKERS", "1")),
                model_name=os.getenv("KDSEARCH_MODEL", DEFAULT_MODEL),
            )
        except ValueError as e:
            return Err(ConfigError.invalid("environment", None, str(e)))

        if error_msg := config.validate():
            return Err(ConfigError.invalid("environment", None, error_msg))
        return Ok(config)
