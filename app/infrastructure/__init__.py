"""Infrastructure services and cross-cutting utilities."""

from app.infrastructure.cache import MemoryRouteCache
from app.infrastructure.logging import StructuredLogger, get_logger

__all__ = [
    "MemoryRouteCache",
    "StructuredLogger",
    "get_logger",
]
