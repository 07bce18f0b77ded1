"""
Observability: structured logging.
"""

from kd_search.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    get_logger,
    setup_logging,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "setup_logging",
]
