"""
Tests Module: Unit and Integration Tests

Test Coverage:
    - Core types (VectorPoint, EmbeddingVector, QueryResult)
    - k-d tree index (build, k-nearest, pruning, brute-force equivalence)
    - Distance functions (squared Euclidean, hyperplane)
    - Embeddings, records, pipeline and CLI
"""

from kd_search.tests.test_types import *
from kd_search.tests.test_kdtree import *
from kd_search.tests.test_distance import *
