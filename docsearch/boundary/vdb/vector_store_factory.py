"""
Vector store factory.

Dependencies: docsearch.boundary.vdb, docsearch.configs
System role: Vector store instantiation from settings
"""

import logging

from docsearch.boundary.vdb.s3_vectors_store import S3VectorsStore
from docsearch.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_store(settings: VectorStoreSettings) -> S3VectorsStore:
    """
    Create the configured vector store.

    Args:
        settings: Vector store configuration

    Returns:
        S3VectorsStore: Store bound to the configured bucket and index
    """
    logger.info(f"{__name__}:get_vector_store - Creating S3 Vectors store")
    return S3VectorsStore(
        vectors_bucket=settings.vectors_bucket,
        index_name=settings.index_name,
        region=settings.aws_region,
    )
