"""
Main FastAPI application for FinChat.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .errors import unhandled_exception_handler, validation_exception_handler
from .routes import chat, suggestions, planning, stocks
from .services import get_services, initialize_services
from .middleware.rate_limit import RateLimitMiddleware
from config.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("FinChat starting up...")
    initialize_services()
    logger.info("FinChat ready")
    yield
    logger.info("FinChat shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.api_title,
        description="Multi-persona financial chatbot with intent retrieval, live market data and LLM fallback.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting middleware
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(chat.router, prefix="/api", tags=["Chat"])
    app.include_router(suggestions.router, prefix="/api", tags=["Chat"])
    app.include_router(planning.router, prefix="/api", tags=["Planning"])
    app.include_router(stocks.router, prefix="/api", tags=["Stocks"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": "FinChat Persona Chatbot",
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready else "degraded",
            "services": services.health(),
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run(app, host=s.api_host, port=s.api_port)
