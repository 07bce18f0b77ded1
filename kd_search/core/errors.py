"""
Result Type & Error Taxonomy

Fallible operations in kd_search return ``Result[T, E]`` instead of raising:

    Ok(value)   success, carries the value
    Err(error)  failure, carries a VectorSearchError (or a plain message
                from an embedding backend)

Only precondition violations raise: reading a coordinate outside
``[0, dimension)`` and calling ``unwrap()`` on an ``Err``.

Error codes:
    1000-1999: Index construction errors
    2000-2999: Query errors
    3000-3999: Embedding errors
    4000-4999: Record source errors
    5000-5999: Configuration errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    NoReturn,
    Optional,
    TypeVar,
    Union,
    final,
)


T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT: SUCCESS VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant.

    Example:
        result = KDTreeIndex.build(points)
        if result.is_ok():
            index = result.unwrap()
    """
    _value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def expect(self, msg: str) -> T:
        return self._value

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Apply ``fn`` to the wrapped value."""
        return Ok(fn(self._value))

    def map_err(self, fn: Callable[[Any], Any]) -> "Ok[T]":
        return self

    def and_then(self, fn: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        """
        Chain a fallible step.

        Example:
            pipeline.embed_records(records).and_then(KDTreeIndex.build)
        """
        return fn(self._value)

    def or_else(self, fn: Callable[[Any], "Result[T, Any]"]) -> "Ok[T]":
        return self

    @property
    def value(self) -> T:
        return self._value

    @property
    def error(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"

    def __bool__(self) -> Literal[True]:
        return True


# =============================================================================
# RESULT: ERROR VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Error variant. Falsy, so ``if not result:`` reads naturally.
    """
    _error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> NoReturn:
        """
        Raises:
            RuntimeError: always; unwrapping an error is a programming error
        """
        raise RuntimeError(f"Called unwrap() on Err: {self._error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def expect(self, msg: str) -> NoReturn:
        raise RuntimeError(f"{msg}: {self._error}")

    def map(self, fn: Callable[[Any], U]) -> "Err[E]":
        return self

    def map_err(self, fn: Callable[[E], U]) -> "Err[U]":
        """Transform the carried error, e.g. wrap a backend message."""
        return Err(fn(self._error))

    def and_then(self, fn: Callable[[Any], "Result[U, E]"]) -> "Err[E]":
        return self

    def or_else(self, fn: Callable[[E], "Result[T, Any]"]) -> "Result[T, Any]":
        return fn(self._error)

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Err({self._error!r})"

    def __bool__(self) -> Literal[False]:
        return False


Result = Union[Ok[T], Err[E]]


# =============================================================================
# ERROR TAXONOMY
# =============================================================================
class ErrorCode(Enum):
    """Canonical error codes, grouped by the layer that produces them."""
    # Index construction (1000-1999)
    INDEX_EMPTY = 1001
    INDEX_DIMENSION_MISMATCH = 1002
    INDEX_INVALID_DIMENSION = 1003

    # Query (2000-2999)
    QUERY_DIMENSION_MISMATCH = 2001
    QUERY_INVALID_K = 2002
    QUERY_INVALID_VECTOR = 2003

    # Embedding (3000-3999)
    EMBEDDING_FAILURE = 3001
    EMBEDDING_DIMENSION_MISMATCH = 3002

    # Record source (4000-4999)
    RECORD_MISSING_TEXT = 4001
    RECORD_LOAD_FAILED = 4002
    RECORD_MALFORMED = 4003

    # Configuration (5000-5999)
    CONFIG_INVALID = 5001


@dataclass(frozen=True, slots=True)
class VectorSearchError:
    """
    Base error for all kd_search operations.

    Carries a code for programmatic matching, a human-readable message,
    machine-readable details and an optional cause chain.
    """
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    cause: Optional["VectorSearchError"] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details,
            "cause": self.cause.to_dict() if self.cause else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def with_cause(self, cause: "VectorSearchError") -> "VectorSearchError":
        """Return a copy of this error chained to ``cause``."""
        return type(self)(
            code=self.code,
            message=self.message,
            details=self.details,
            cause=cause,
            timestamp=self.timestamp,
        )


# =============================================================================
# SPECIALIZED ERROR TYPES
# =============================================================================
class IndexBuildError(VectorSearchError):
    """Error while constructing a spatial index."""

    @classmethod
    def empty(cls) -> "IndexBuildError":
        return cls(
            code=ErrorCode.INDEX_EMPTY,
            message="Cannot build an index over zero points",
        )

    @classmethod
    def dimension_mismatch(
        cls, expected: int, actual: int, position: int
    ) -> "IndexBuildError":
        return cls(
            code=ErrorCode.INDEX_DIMENSION_MISMATCH,
            message=(
                f"Dimension mismatch at point {position}: "
                f"expected {expected}, got {actual}"
            ),
            details={"expected": expected, "actual": actual, "position": position},
        )

    @classmethod
    def invalid_dimension(cls, dimension: int) -> "IndexBuildError":
        return cls(
            code=ErrorCode.INDEX_INVALID_DIMENSION,
            message=f"Index dimension must be >= 1, got {dimension}",
            details={"dimension": dimension},
        )


class QueryError(VectorSearchError):
    """Error in a k-nearest-neighbor query."""

    @classmethod
    def dimension_mismatch(cls, expected: int, actual: int) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_DIMENSION_MISMATCH,
            message=f"Query dimension mismatch: expected {expected}, got {actual}",
            details={"expected": expected, "actual": actual},
        )

    @classmethod
    def invalid_k(cls, k: Any) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_K,
            message=f"Invalid k={k!r}, must be a non-negative integer",
            details={"k": k},
        )

    @classmethod
    def invalid_vector(cls, reason: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_INVALID_VECTOR,
            message=f"Invalid query vector: {reason}",
            details={"reason": reason},
        )


class EmbeddingError(VectorSearchError):
    """The embedding collaborator could not produce a vector."""

    @classmethod
    def failure(cls, provider: str, message: str, text: str = "") -> "EmbeddingError":
        return cls(
            code=ErrorCode.EMBEDDING_FAILURE,
            message=f"Embedding provider '{provider}' failed: {message}",
            details={
                "provider": provider,
                "provider_message": message,
                "text_preview": text[:80],
            },
        )

    @classmethod
    def dimension_mismatch(
        cls, provider: str, expected: int, actual: int
    ) -> "EmbeddingError":
        return cls(
            code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
            message=(
                f"Embedding provider '{provider}' returned dimension {actual}, "
                f"expected {expected}"
            ),
            details={"provider": provider, "expected": expected, "actual": actual},
        )


class RecordError(VectorSearchError):
    """A record could not be loaded or has no usable text."""

    @classmethod
    def missing_text(cls, text_field: str, position: int) -> "RecordError":
        return cls(
            code=ErrorCode.RECORD_MISSING_TEXT,
            message=f"Record {position} has no text in field '{text_field}'",
            details={"text_field": text_field, "position": position},
        )

    @classmethod
    def load_failed(cls, path: str, reason: str) -> "RecordError":
        return cls(
            code=ErrorCode.RECORD_LOAD_FAILED,
            message=f"Failed to load records from '{path}': {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def malformed(cls, position: int, reason: str) -> "RecordError":
        return cls(
            code=ErrorCode.RECORD_MALFORMED,
            message=f"Malformed record {position}: {reason}",
            details={"position": position, "reason": reason},
        )


class ConfigError(VectorSearchError):
    """Invalid configuration value."""

    @classmethod
    def invalid(cls, param: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid config '{param}': {reason}",
            details={"param": param, "value": value, "reason": reason},
        )
