"""
Observability module.

Provides logging configuration and correlation ID tracking.
"""

from docsearch.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from docsearch.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
