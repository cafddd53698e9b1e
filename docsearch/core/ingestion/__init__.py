"""
Documentation ingestion pipeline.

Exports: IngestionPipeline
"""

from docsearch.core.ingestion.entrypoint import IngestionPipeline

__all__ = ["IngestionPipeline"]
