"""API request/response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

_ISSUE_TYPE_PATTERN = r"^[a-z_]+$"


class HealthResponse(BaseModel):
    status: str = Field(default="ok")
    routing_provider: str = Field(default="haversine")
    persistence: str = Field(default="memory")


class DismissIssueRequest(BaseModel):
    issue_type: str = Field(min_length=1, max_length=64, pattern=_ISSUE_TYPE_PATTERN)
    issue_key: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=32, description="SCHEDULE / ACCOMMODATIONS / TRANSPORTATION / COMPLETENESS")


class RestoreIssueRequest(BaseModel):
    issue_type: str = Field(min_length=1, max_length=64, pattern=_ISSUE_TYPE_PATTERN)
    issue_key: str = Field(min_length=1, max_length=255)


class SweepResponse(BaseModel):
    status: str
    deleted_count: int = 0
    duration_seconds: float = 0.0
    retention_days: int = 0
    timestamp: str = ""
    reason: str = ""
