"""Travel feasibility between consecutive located activities."""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Mapping, Sequence
from typing import Optional

from pydantic import BaseModel

from app.domain.constants import DEFAULT_ROUTE_PROFILE, TRAVEL_BUFFER_MINUTES
from app.domain.enums import IssueCategory, IssueType, QuickActionType, RouteSource, TravelAlertKind
from app.domain.models import Activity, Coordinates, Location, QuickAction, RouteResult, Trip, ValidationIssue
from app.routing.resolver import RouteResolver
from app.validators.schedule_validator import pair_key

_LOGGER = logging.getLogger("trip-health.travel-time")


class LocatedActivity(BaseModel):
    activity: Activity
    location: Location

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.location.latitude, longitude=self.location.longitude)


class TravelAlert(BaseModel):
    kind: TravelAlertKind
    from_index: int
    to_index: int
    required_minutes: int
    available_minutes: int
    buffer_minutes: int
    distance_km: float
    route_source: RouteSource
    message: str


def locate_activities(trip: Trip, location_links: Mapping[int, int]) -> list[LocatedActivity]:
    """Non-all-day activities with both times and a linked location that has coordinates, in start order."""
    locations = {location.id: location for location in trip.locations}
    located: list[LocatedActivity] = []
    for activity in trip.activities:
        if not activity.is_timed or activity.all_day:
            continue
        location = locations.get(location_links.get(activity.id, -1))
        if location is None or not location.has_coordinates:
            continue
        located.append(LocatedActivity(activity=activity, location=location))
    located.sort(key=lambda item: (item.activity.start_time, item.activity.id))
    return located


class TravelFeasibilityAnalyzer:
    def __init__(
        self,
        resolver: RouteResolver,
        *,
        profile: str = DEFAULT_ROUTE_PROFILE,
        buffer_minutes: float = TRAVEL_BUFFER_MINUTES,
        max_workers: int = 4,
    ) -> None:
        self._resolver = resolver
        self._profile = profile
        self._buffer_minutes = buffer_minutes
        self._max_workers = max(1, max_workers)

    def _resolve_pairs(self, located: Sequence[LocatedActivity]) -> list[Optional[RouteResult]]:
        pairs = list(zip(located, located[1:]))
        if not pairs:
            return []
        workers = min(self._max_workers, len(pairs))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._resolver.calculate_route, a.coordinates, b.coordinates, self._profile)
                for a, b in pairs
            ]
            results: list[Optional[RouteResult]] = []
            for idx, future in enumerate(futures):
                try:
                    results.append(future.result())
                except Exception as exc:
                    _LOGGER.warning("route lookup for transition %d failed, skipping: %s", idx, exc)
                    results.append(None)
        return results

    def _classify(
        self,
        idx: int,
        current: LocatedActivity,
        nxt: LocatedActivity,
        route: RouteResult,
    ) -> Optional[TravelAlert]:
        required = route.duration_min
        available = (nxt.activity.start_time - current.activity.end_time).total_seconds() / 60
        buffer = available - required

        if available < required:
            kind = TravelAlertKind.IMPOSSIBLE
            message = (
                f'Impossible connection from "{current.activity.name}" to "{nxt.activity.name}": '
                f"need {round(required)} minutes but only have {round(available)} minutes"
            )
        elif available > 0 and buffer < self._buffer_minutes:
            kind = TravelAlertKind.TIGHT
            message = (
                f'Tight connection from "{current.activity.name}" to "{nxt.activity.name}": '
                f"only {round(buffer)} minutes buffer"
            )
        else:
            return None

        return TravelAlert(
            kind=kind,
            from_index=idx,
            to_index=idx + 1,
            required_minutes=round(required),
            available_minutes=round(available),
            buffer_minutes=round(buffer),
            distance_km=round(route.distance_km, 2),
            route_source=route.source,
            message=message,
        )

    def analyze(self, located: Sequence[LocatedActivity]) -> list[TravelAlert]:
        if len(located) < 2:
            return []
        alerts: list[TravelAlert] = []
        for idx, route in enumerate(self._resolve_pairs(located)):
            if route is None:
                continue
            alert = self._classify(idx, located[idx], located[idx + 1], route)
            if alert is not None:
                alerts.append(alert)
        return alerts

    def suggestion_for(self, alert: TravelAlert) -> str:
        if alert.kind is TravelAlertKind.IMPOSSIBLE:
            return f"Allow {alert.required_minutes} minutes for travel or adjust activity times"
        return f"Consider adding {round(self._buffer_minutes) - alert.buffer_minutes} more minutes buffer"


def validate_travel_time(
    trip: Trip,
    location_links: Mapping[int, int],
    analyzer: TravelFeasibilityAnalyzer,
) -> list[ValidationIssue]:
    located = locate_activities(trip, location_links)
    issues: list[ValidationIssue] = []
    for alert in analyzer.analyze(located):
        # Alerts point back by position; names are not unique.
        current = located[alert.from_index].activity
        nxt = located[alert.to_index].activity
        issues.append(
            ValidationIssue(
                category=IssueCategory.SCHEDULE,
                type=IssueType.TRAVEL_TIME.value,
                key=pair_key(current.id, nxt.id),
                message=alert.message,
                affected_items=[current.id, nxt.id],
                suggestion=analyzer.suggestion_for(alert),
                quick_action=QuickAction(
                    type=QuickActionType.EDIT_ACTIVITY,
                    label="Adjust timing",
                    entity_type="activity",
                    entity_id=nxt.id,
                ),
            )
        )
    return issues
