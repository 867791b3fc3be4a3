class StoreError(Exception):
    """Base exception for all entity store errors."""


class StoreUnavailableError(StoreError):
    """Raised when the store is unreachable or an operation overruns its deadline."""


class ConstraintViolationError(StoreError):
    """Raised when an insert would duplicate a uniquely indexed field."""

    def __init__(self, collection: str, reason: str) -> None:
        self.collection = collection
        self.reason = reason
        super().__init__(f"Insert into {collection} violates a unique constraint: {reason}")


class RecordNotFoundError(StoreError):
    """Raised when a single-record lookup matches nothing."""

    def __init__(self, collection: str, filter_: dict[str, object]) -> None:
        self.collection = collection
        self.filter = filter_
        super().__init__(f"No record in {collection} matches {filter_}")


class AppointmentValidationError(Exception):
    """Base exception for appointments rejected before they are stored."""


class ReferenceNotFoundError(AppointmentValidationError):
    """Raised when an appointment references a patient or doctor that does not exist."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"{kind} not found")
