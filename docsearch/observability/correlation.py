"""
Correlation ID context.

Holds the ID of the request being served so every log line emitted while
handling it, including lines from provider adapters running in worker
threads, can be tied back to that request.

Dependencies: contextvars
System role: Request tracing across the API, services and boundary adapters
"""

import uuid
from contextvars import ContextVar

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Args:
        correlation_id: Caller-supplied ID; a random hex ID is generated when empty

    Returns:
        str: The bound ID
    """
    value = correlation_id or uuid.uuid4().hex
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Return the bound correlation ID, "" outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
