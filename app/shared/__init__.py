"""Shared cross-layer types and exceptions."""

from app.shared.exceptions import ExternalServiceError, ToolError

__all__ = ["ToolError", "ExternalServiceError"]

