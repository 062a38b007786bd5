"""
Domain Exceptions

Custom exceptions for domain errors. Each carries an ErrorType so the API
layer can map it to a status code without inspecting messages.
"""

from enum import Enum

DetailValue = str | int | bool | list[int] | None


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    CONCURRENCY = "concurrency"
    REPOSITORY = "repository"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, DetailValue] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, DetailValue]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when request data breaks a domain rule (missing or malformed)."""

    def __init__(
        self,
        field_name: str,
        value: str | int | None,
        message: str,
        details: dict[str, DetailValue] | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        details = details or {}
        details.update(
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
            }
        )
        super().__init__(message, ErrorType.VALIDATION, details)


class EntityNotFoundError(DomainError):
    """Raised when an entity cannot be found."""

    def __init__(self, entity: str, identifier: str | int) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity} {identifier} not found",
            ErrorType.NOT_FOUND,
            {"entity_type": entity, "id": str(identifier)},
        )


class InvalidTransitionError(DomainError):
    """Raised when a status transition's precondition is not met."""

    def __init__(self, current: str, requested: str, message: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            message,
            ErrorType.BUSINESS_RULE,
            {"current_status": current, "requested_status": requested},
        )


class ConcurrentTransitionError(DomainError):
    """Raised when another request changed the row between read and write."""

    def __init__(self, assignment_id: int, expected: str) -> None:
        self.assignment_id = assignment_id
        super().__init__(
            f"Task {assignment_id} was modified by another request "
            f"(expected status {expected.upper()}); reload and retry",
            ErrorType.CONCURRENCY,
            {"id": assignment_id, "expected_status": expected},
        )


class AssignmentBatchError(DomainError):
    """Raised when a task in an assignment batch is rejected.

    Tasks processed before the failing one remain committed and are listed in
    ``assigned``.
    """

    def __init__(
        self,
        message: str,
        failed_control_number: int,
        assigned: list[int],
        error_type: ErrorType = ErrorType.VALIDATION,
    ) -> None:
        self.failed_control_number = failed_control_number
        self.assigned = assigned
        super().__init__(
            message,
            error_type,
            {"failed": failed_control_number, "assigned": assigned},
        )
