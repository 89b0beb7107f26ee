"""API module."""

from .analyze import router as analyze_router
from .insights import router as insights_router
from .suggestions import router as suggestions_router

__all__ = ['analyze_router', 'insights_router', 'suggestions_router']
