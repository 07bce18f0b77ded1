"""
Unit Tests: Result Type, Error Taxonomy and Configuration
"""

import pytest

from kd_search.core.config import IndexConfig, PipelineConfig
from kd_search.core.errors import (
    ConfigError,
    EmbeddingError,
    Err,
    ErrorCode,
    IndexBuildError,
    Ok,
    QueryError,
    RecordError,
)


class TestResult:
    """Tests for Ok / Err."""

    def test_ok(self):
        result = Ok(21)

        assert result.is_ok() and not result.is_err()
        assert bool(result) is True
        assert result.unwrap() == 21
        assert result.map(lambda x: x * 2).unwrap() == 42
        assert result.and_then(lambda x: Ok(x + 1)).unwrap() == 22
        assert result.error is None

    def test_err(self):
        result = Err("boom")

        assert result.is_err() and not result.is_ok()
        assert bool(result) is False
        assert result.unwrap_or(0) == 0
        assert result.map(lambda x: x * 2) is result
        assert result.map_err(str.upper).error == "BOOM"
        assert result.or_else(lambda e: Ok(len(e))).unwrap() == 4

    def test_unwrap_err_raises(self):
        with pytest.raises(RuntimeError, match="boom"):
            Err("boom").unwrap()

        with pytest.raises(RuntimeError, match="context: boom"):
            Err("boom").expect("context")

    def test_chain_stops_at_first_err(self):
        calls = []

        def step(x):
            calls.append(x)
            return Ok(x)

        result = Err("stop").and_then(step).and_then(step)

        assert result.is_err()
        assert calls == []


class TestErrorTaxonomy:
    """Tests for structured errors."""

    def test_empty_index(self):
        error = IndexBuildError.empty()

        assert error.code == ErrorCode.INDEX_EMPTY
        assert str(error).startswith("[INDEX_EMPTY]")

    def test_dimension_mismatch_details(self):
        error = IndexBuildError.dimension_mismatch(384, 2, 7)

        assert error.code == ErrorCode.INDEX_DIMENSION_MISMATCH
        assert error.details == {"expected": 384, "actual": 2, "position": 7}

    def test_query_errors(self):
        assert QueryError.invalid_k(-1).code == ErrorCode.QUERY_INVALID_K
        assert QueryError.dimension_mismatch(2, 3).code == ErrorCode.QUERY_DIMENSION_MISMATCH

    def test_embedding_failure(self):
        error = EmbeddingError.failure("mock", "backend unavailable", "x" * 200)

        assert error.code == ErrorCode.EMBEDDING_FAILURE
        assert "backend unavailable" in error.message
        assert len(error.details["text_preview"]) == 80

    def test_to_dict_with_cause(self):
        cause = RecordError.load_failed("books.json", "No such file")
        error = ConfigError.invalid("records", "books.json", "unreadable").with_cause(cause)

        data = error.to_dict()

        assert isinstance(error, ConfigError)
        assert data["code_name"] == "CONFIG_INVALID"
        assert data["cause"]["code_name"] == "RECORD_LOAD_FAILED"


class TestConfig:
    """Tests for IndexConfig / PipelineConfig."""

    def test_index_config(self):
        assert IndexConfig().validate() is None
        assert IndexConfig(dimension=2).validate() is None
        assert IndexConfig(dimension=0).validate() is not None

    def test_pipeline_defaults_valid(self):
        config = PipelineConfig()

        assert config.validate() is None
        assert config.text_field == "summary"
        assert config.top_k == 10

    @pytest.mark.parametrize("kwargs", [
        {"text_field": ""},
        {"top_k": -1},
        {"dimensions": 0},
        {"embed_workers": 0},
    ])
    def test_pipeline_invalid(self, kwargs):
        assert PipelineConfig(**kwargs).validate() is not None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("KDSEARCH_TEXT_FIELD", "blurb")
        monkeypatch.setenv("KDSEARCH_TOP_K", "3")
        monkeypatch.setenv("KDSEARCH_DIMENSIONS", "2")
        monkeypatch.setenv("KDSEARCH_EMBED_WORKERS", "4")
        monkeypatch.setenv("KDSEARCH_MODEL", "local-model")

        config = PipelineConfig.from_env().unwrap()

        assert config == PipelineConfig(
            text_field="blurb",
            top_k=3,
            dimensions=2,
            embed_workers=4,
            model_name="local-model",
        )

    def test_from_env_defaults(self, monkeypatch):
        for name in ("KDSEARCH_TEXT_FIELD", "KDSEARCH_TOP_K", "KDSEARCH_DIMENSIONS",
                     "KDSEARCH_EMBED_WORKERS", "KDSEARCH_MODEL"):
            monkeypatch.delenv(name, raising=False)

        assert PipelineConfig.from_env().unwrap() == PipelineConfig()

    @pytest.mark.parametrize("name,value", [
        ("KDSEARCH_TOP_K", "many"),
        ("KDSEARCH_EMBED_WORKERS", "0"),
    ])
    def test_from_env_invalid(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        result = PipelineConfig.from_env()

        assert result.is_err()
        assert result.error.code == ErrorCode.CONFIG_INVALID


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
