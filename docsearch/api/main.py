"""
FastAPI application with assembled routers.

Initializes the FastAPI app with the search, chunk, document and health
routers and configures the uvicorn server.

Dependencies: fastapi, docsearch.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docsearch import __version__
from docsearch.api.deps.dependencies import get_service_cache
from docsearch.api.errors import register_exception_handlers
from docsearch.configs import get_settings
from docsearch.observability import configure_logging
from docsearch.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import chunks_router, documents_router, health_router, search_router

# Provider SDKs read credentials such as OPENAI_API_KEY from the process environment
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Pre-warms provider clients on startup and drops them on shutdown.
    """
    logger = logging.getLogger("uvicorn")

    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    _ = cache.search_service
    _ = cache.document_service
    logger.info("Service cache pre-warmed")

    yield

    cache.clear()
    logger.info("Service cache cleared")


def create_app(warm_cache: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        warm_cache: Build provider clients at startup

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Documentation Search API",
        description="Hybrid semantic and keyword search over framework documentation",
        version=__version__,
        lifespan=lifespan if warm_cache else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(chunks_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")

    return app


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    uvicorn.run(
        "docsearch.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
