"""Dismissal overlay: marks issues the user chose to hide."""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.models import DismissedValidationIssue, ValidationIssue


class IssueDismissalOverlay:
    """Dismissed `type:key` identities laid over freshly computed issues."""

    def __init__(self, identities: Iterable[str] = ()) -> None:
        self._identities = frozenset(identities)

    @classmethod
    def from_records(cls, records: Iterable[DismissedValidationIssue]) -> "IssueDismissalOverlay":
        return cls(record.identity for record in records)

    def __len__(self) -> int:
        return len(self._identities)

    def is_dismissed(self, issue_type: str, issue_key: str) -> bool:
        return f"{issue_type}:{issue_key}" in self._identities

    def apply(self, issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
        """Copies of ``issues`` with ``is_dismissed`` set from the overlay."""
        return [
            issue.model_copy(update={"is_dismissed": self.is_dismissed(issue.type, issue.key)})
            for issue in issues
        ]


__all__ = ["IssueDismissalOverlay"]
