"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deepnotes.api.dependencies import get_cached_config, get_container_dependency
from deepnotes.api.middleware import ExceptionHandlerMiddleware, RequestLoggingMiddleware
from deepnotes.api.routes import router as api_router
from deepnotes.core.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    config = get_cached_config()

    setup_logging(
        log_level=config.log_level,
        json_format=not config.debug,
        log_to_file=config.log_to_file,
    )

    logger.info(
        "application_starting",
        app_name=config.app_name,
        ingestion_backend=config.ingestion.backend,
        answerer=config.conversation.answerer,
        concurrency_policy=config.ingestion.concurrency_policy,
    )

    # Uses the dependency to respect test overrides
    container = get_container_dependency()
    logger.info(
        "container_initialized",
        ingestion_backend=type(container.ingestion_backend).__name__,
        answerer=container.answerer.name,
    )

    yield

    logger.info("application_shutting_down")
    registry = container.session_registry
    for session_id in registry.list_ids():
        registry.delete(session_id)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_cached_config()

    app = FastAPI(
        title=config.app_name,
        description="Document question answering workspace with cited, graded replies",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "name": config.app_name,
            "version": "0.1.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_cached_config()
    uvicorn.run(
        "deepnotes.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )
