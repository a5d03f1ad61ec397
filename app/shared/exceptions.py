"""Shared (non-domain) exceptions."""

from __future__ import annotations


class ToolError(Exception):
    """External tool invocation failed."""

    def __init__(self, tool: str, message: str, *, status_code: int | None = None):
        self.tool = tool
        self.status_code = status_code
        super().__init__(f"[{tool}] {message}")


class ExternalServiceError(Exception):
    """External service returned an unusable answer."""

