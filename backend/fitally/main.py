"""
Fitally AI - Main FastAPI Application
"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .api import analyze_router, insights_router, suggestions_router
from .core.errors import AnalysisError
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    setup_logging(settings)

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"LLM provider: {settings.llm_provider} (configured={bool(settings.resolve_llm_api_key())})")
    logger.info(f"Transcription backend: {settings.transcription_backend}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Multimodal AI analysis of meals, workouts and rest periods",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging sits inside CORS
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

app.include_router(analyze_router)
app.include_router(insights_router)
app.include_router(suggestions_router)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    """Classified failures raised outside a route handler, e.g. while building dependencies."""
    logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "message": "Welcome to Fitally AI - describe a meal, workout or rest and get it analyzed"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fitally.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
