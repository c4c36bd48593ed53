"""
Main FastAPI application entry point for the recipe API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import uvicorn

from recipebox.core.config import settings
from recipebox.core.database import create_engine, create_session_factory, create_tables
from recipebox.core.exceptions import (
    recipe_app_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)
from recipebox.core.logging import configure_logging
from recipebox.core.middleware import LoggingMiddleware, SecurityHeadersMiddleware
from recipebox.core.rate_limit import limiter
from recipebox.api.routes import api_router
from recipebox.utils.exceptions import RecipeAppException

VERSION = "1.0.0"

configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting recipe API")

    engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)
    await create_tables(engine)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Recipe API",
    description="Recipe sharing API with filtered full-text search",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add custom middleware (order matters - last added is outermost)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add exception handlers
app.add_exception_handler(RecipeAppException, recipe_app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Recipe API",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "search": "/api/v1/search",
            "suggestions": "/api/v1/search/suggestions",
            "popular_tags": "/api/v1/search/tags/popular",
            "recipes": "/api/v1/recipes/",
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
