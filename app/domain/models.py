"""Pydantic domain models."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain.enums import IssueCategory, QuickActionType, RouteSource


def _assume_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Naive timestamps are read as UTC so mixed inputs stay comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


class Location(BaseModel):
    id: int
    name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Activity(BaseModel):
    id: int
    name: str = ""
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    all_day: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def naive_times_are_utc(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return _assume_utc(value)

    @property
    def is_timed(self) -> bool:
        return self.start_time is not None and self.end_time is not None


class Lodging(BaseModel):
    id: int
    name: str = ""
    check_in_date: dt.datetime
    check_out_date: dt.datetime

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def naive_dates_are_utc(cls, value: dt.datetime) -> dt.datetime:
        return _assume_utc(value)


class Transportation(BaseModel):
    id: int
    type: str = ""


class JournalEntry(BaseModel):
    id: int
    title: str = ""


class DismissedValidationIssue(BaseModel):
    trip_id: int
    issue_type: str
    issue_key: str
    category: IssueCategory
    dismissed_at: str = ""

    @property
    def identity(self) -> str:
        return f"{self.issue_type}:{self.issue_key}"


class Trip(BaseModel):
    id: int
    user_id: int
    title: str = ""
    # Kept as a plain string so unrecognized statuses survive loading.
    status: str = "Planning"
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    activities: list[Activity] = Field(default_factory=list)
    lodging: list[Lodging] = Field(default_factory=list)
    transportation: list[Transportation] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)
    journal_entries: list[JournalEntry] = Field(default_factory=list)
    dismissed_issues: list[DismissedValidationIssue] = Field(default_factory=list)

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class QuickAction(BaseModel):
    type: QuickActionType
    label: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None


class ValidationIssue(BaseModel):
    category: IssueCategory
    type: str
    key: str
    id: str = ""
    message: str = ""
    affected_items: Optional[list[Union[int, str]]] = None
    suggestion: Optional[str] = None
    quick_action: Optional[QuickAction] = None
    is_dismissed: bool = False

    @model_validator(mode="after")
    def _derive_identity(self) -> "ValidationIssue":
        if not self.id:
            self.id = f"{self.type}:{self.key}"
        return self


class ValidationResult(BaseModel):
    trip_id: int
    status: str
    issues_by_category: dict[str, list[ValidationIssue]] = Field(default_factory=dict)
    total_issues: int = 0
    active_issues: int = 0
    dismissed_issues: int = 0


class QuickStatus(BaseModel):
    status: str
    active_issues: int = 0


class RouteResult(BaseModel):
    distance_km: float
    duration_min: float
    haversine_km: float
    source: RouteSource
    geometry: Optional[list[list[float]]] = None


class RouteCacheEntry(BaseModel):
    from_lat: float
    from_lon: float
    to_lat: float
    to_lon: float
    profile: str
    distance_km: float
    duration_min: float
    geometry: Optional[list[list[float]]] = None
    created_at: dt.datetime
