"""
Pipeline Module: record source + query orchestration
"""

from kd_search.pipeline.query import QueryPipeline
from kd_search.pipeline.records import Record, load_records, parse_records

__all__ = [
    "QueryPipeline",
    "Record",
    "load_records",
    "parse_records",
]
