"""Vector store boundary."""

from docsearch.boundary.vdb.s3_vectors_store import S3VectorsStore
from docsearch.boundary.vdb.vector_schemas import VectorMatch, VectorStore
from docsearch.boundary.vdb.vector_store_factory import get_vector_store

__all__ = ["S3VectorsStore", "VectorMatch", "VectorStore", "get_vector_store"]
