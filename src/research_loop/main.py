"""
FastAPI application entry point for the research service.

Serves the endpoints HttpResearchBackend talks to, backed by a local
Ollama model.
"""

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from research_loop.api.dependencies import get_llm_client
from research_loop.api.error_handlers import EXCEPTION_HANDLERS
from research_loop.api.middleware import RequestTracingMiddleware
from research_loop.api.routes import router
from research_loop.config import settings
from research_loop.logging_config import configure_logging

# Configure structured logging before the app starts emitting
configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Deep research and next-inquiry service for research loops",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["research"])


@app.on_event("startup")
async def startup():
    """Log configuration and check the model server is reachable."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        ollama_base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
        retry_max_attempts=settings.SERVER_RETRY_MAX_ATTEMPTS,
    )
    if await get_llm_client().health_check():
        logger.info("Ollama connection successful")
    else:
        logger.warning("Ollama is not reachable; research requests will fail until it is")


@app.on_event("shutdown")
async def shutdown():
    """Close pooled LLM connections."""
    await get_llm_client().close()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn on SERVER_HOST:PORT."""
    uvicorn.run(
        "research_loop.main:app",
        host=settings.SERVER_HOST,
        port=settings.PORT,
        log_config=None,  # logging is configured by configure_logging
    )


if __name__ == "__main__":
    run()
