"""Trip status -> which check groups run."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.enums import TripStatus


@dataclass(frozen=True)
class ValidationScope:
    schedule: bool = True
    # Dream trips only get the date-range sanity check from the schedule group.
    schedule_dates_only: bool = False
    accommodations: bool = True
    transportation: bool = True
    completeness: bool = True

    @property
    def is_empty(self) -> bool:
        return not (self.schedule or self.accommodations or self.transportation or self.completeness)


FULL_SCOPE = ValidationScope()
NO_SCOPE = ValidationScope(schedule=False, accommodations=False, transportation=False, completeness=False)

_SCOPE_BY_STATUS: dict[str, ValidationScope] = {
    TripStatus.DREAM.value: ValidationScope(
        schedule=True,
        schedule_dates_only=True,
        accommodations=False,
        transportation=False,
        completeness=False,
    ),
    TripStatus.PLANNING.value: ValidationScope(
        schedule=True,
        accommodations=False,
        transportation=False,
        completeness=False,
    ),
    TripStatus.PLANNED.value: FULL_SCOPE,
    TripStatus.IN_PROGRESS.value: FULL_SCOPE,
    TripStatus.COMPLETED.value: FULL_SCOPE,
    TripStatus.CANCELLED.value: NO_SCOPE,
}


def resolve_validation_scope(status: str | TripStatus | None) -> ValidationScope:
    """Unrecognized statuses fail open to full validation."""
    key = status.value if isinstance(status, TripStatus) else str(status or "")
    return _SCOPE_BY_STATUS.get(key, FULL_SCOPE)


__all__ = ["FULL_SCOPE", "NO_SCOPE", "ValidationScope", "resolve_validation_scope"]
