"""
Index Module: Exact Nearest-Neighbor Indexes

Provides:
    - KDTreeIndex: implicit-array k-d tree
    - FlatIndex: brute-force linear scan
    - Distance kernels: squared Euclidean
"""

from kd_search.index.distance import (
    euclidean,
    squared_euclidean,
    squared_euclidean_batch,
    squared_plane_distance,
)
from kd_search.index.flat import FlatIndex
from kd_search.index.kdtree import KDTreeIndex

__all__ = [
    "KDTreeIndex",
    "FlatIndex",
    "euclidean",
    "squared_euclidean",
    "squared_euclidean_batch",
    "squared_plane_distance",
]
