"""Domain constants shared by deterministic logic."""

from app.domain.enums import RouteProfile

EARTH_RADIUS_KM = 6371.0

# Average speeds (km/h) used when no routed duration is available.
PROFILE_SPEED_KMH = {
    RouteProfile.DRIVING.value: 80.0,
    RouteProfile.CYCLING.value: 20.0,
    RouteProfile.WALKING.value: 5.0,
}
DEFAULT_SPEED_KMH = 80.0

DEFAULT_ROUTE_PROFILE = RouteProfile.DRIVING.value

ROUTE_CACHE_DAYS = 30
ROUTE_CACHE_TOLERANCE_DEG = 0.001

TRAVEL_BUFFER_MINUTES = 30.0

# Fixed keys for single-signal and aggregate issues.
NO_TRANSPORTATION_KEY = "no_transportation"
ACTIVITIES_WITHOUT_LOCATION_KEY = "activities_without_location"
ACTIVITIES_WITHOUT_TIME_KEY = "activities_without_time"
EMPTY_DAYS_KEY = "empty_days"

OVERALL_STATUS_OKAY = "okay"
OVERALL_STATUS_POTENTIAL_ISSUES = "potential_issues"
