"""Domain enums."""

from enum import Enum


class TripStatus(str, Enum):
    DREAM = "Dream"
    PLANNING = "Planning"
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class IssueCategory(str, Enum):
    SCHEDULE = "SCHEDULE"
    ACCOMMODATIONS = "ACCOMMODATIONS"
    TRANSPORTATION = "TRANSPORTATION"
    COMPLETENESS = "COMPLETENESS"


class IssueType(str, Enum):
    TIMELINE_CONFLICT = "timeline_conflict"
    INVALID_DATE = "invalid_date"
    TRAVEL_TIME = "travel_time"
    MISSING_LODGING = "missing_lodging"
    MISSING_TRANSPORTATION = "missing_transportation"
    MISSING_LOCATION = "missing_location"
    MISSING_TIME = "missing_time"
    EMPTY_DAYS = "empty_days"


class RouteProfile(str, Enum):
    DRIVING = "driving-car"
    CYCLING = "cycling-regular"
    WALKING = "foot-walking"


class RouteSource(str, Enum):
    ROUTE = "route"
    HAVERSINE = "haversine"


class TravelAlertKind(str, Enum):
    IMPOSSIBLE = "impossible"
    TIGHT = "tight"


class QuickActionType(str, Enum):
    ADD_LODGING = "add_lodging"
    ADD_TRANSPORTATION = "add_transportation"
    EDIT_ACTIVITY = "edit_activity"
    ADD_LOCATION = "add_location"
