"""Domain semantic exceptions."""


class DomainError(Exception):
    """Base domain exception."""


class TripNotFoundError(DomainError):
    """Raised when a trip does not exist or is not visible to the caller."""

    def __init__(self, trip_id: int):
        self.trip_id = trip_id
        super().__init__(f"Trip not found: {trip_id}")


class TripAccessDeniedError(DomainError):
    """Raised when a caller tries to modify a trip they do not own."""

    def __init__(self, trip_id: int, user_id: int):
        self.trip_id = trip_id
        self.user_id = user_id
        super().__init__(f"User {user_id} may not modify trip {trip_id}")


class InvalidIssueCategoryError(DomainError, ValueError):
    """Raised when a dismissal names an unknown issue category."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown issue category: {category}")
