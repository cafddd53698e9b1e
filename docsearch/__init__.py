"""
Documentation search service.

Ingests markdown documentation into a vector index and serves hybrid
semantic + keyword search with reranking.
"""

__version__ = "0.1.0"
