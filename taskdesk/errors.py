"""Error taxonomy shared by the engine and the API layer."""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError


class ServiceError(Exception):
    """Base class for errors surfaced to callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or invalid input (required field, enum value, payload shape)."""
    status_code = 422


class NotFoundError(ServiceError):
    """No record with the given id visible to the requesting principal."""
    status_code = 404


class ForbiddenError(ServiceError):
    """Role-gated operation refused, or an admin targeting its own account."""
    status_code = 403


class ConflictError(ServiceError):
    """Write would violate a uniqueness constraint."""
    status_code = 409


class InternalError(ServiceError):
    """Store failure or other unexpected condition. Details stay server-side."""
    status_code = 500


def from_pydantic_error(exc: PydanticValidationError, prefix: Optional[str] = None) -> ValidationError:
    """Convert a pydantic error into a ValidationError naming the first bad field."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "payload"
    message = f"{field}: {first.get('msg', 'invalid value')}"
    if prefix:
        message = f"{prefix}: {message}"
    return ValidationError(message)
