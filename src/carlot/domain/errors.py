"""Errors raised by carlot workflows.

None of these know about HTTP; ``entrypoints.http.exception_handlers`` picks a
status code from ``error_code``.
"""

from typing import Any


class DomainError(Exception):
    """Root of the workflow error family.

    ``context`` holds the ids and step names a caller needs to locate what
    happened (the car a failed upload belongs to, the existing duplicate).
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def _payload(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.error_code, **self._payload(), **self.context}


# ==============================================================================
# 422: rejected input
# ==============================================================================


class ValidationError(DomainError):
    """Input that breaks a form rule: a required car field left blank, no
    images staged, a sale price that is not positive.

    ``errors`` lists one ``{"field", "message"}`` entry per offending field,
    in form order, or is None for a single overall message.
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        self.errors: list[dict[str, str]] | None = errors or None
        default = "Validation failed" if self.errors else "Validation error"
        super().__init__(message or default, **context)

    def _payload(self) -> dict[str, Any]:
        return {"errors": self.errors} if self.errors else {}


class InvalidStepError(ValidationError):
    """A wizard action that the current step does not allow."""


# ==============================================================================
# 404 / 409: state of the inventory
# ==============================================================================


class NotFoundError(DomainError):
    """No such record for this vendor. Cars of other vendors read as missing."""

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        message = (
            f"{resource} with identifier '{identifier}' not found" if identifier else f"{resource} not found"
        )
        super().__init__(message, resource=resource, identifier=identifier, **context)


class ConflictError(DomainError):
    error_code: str = "CONFLICT"


class DuplicateCarError(ConflictError):
    """The vendor already lists a car with the same identifiers or details."""

    error_code: str = "DUPLICATE_CAR"


class CarAlreadySoldError(ConflictError):
    error_code: str = "CAR_ALREADY_SOLD"

    def __init__(self, car_id: str) -> None:
        super().__init__(f"Car '{car_id}' is already sold", car_id=car_id)


# ==============================================================================
# 401 / 403: who is asking
# ==============================================================================


class UnauthorizedError(DomainError):
    error_code: str = "UNAUTHORIZED"


class ForbiddenError(DomainError):
    error_code: str = "FORBIDDEN"


# ==============================================================================
# 5xx: collaborators and bugs
# ==============================================================================


class UpstreamError(DomainError):
    """The data store, object storage or auth service returned an error.

    Raised at the step where the workflow stopped; whatever the workflow had
    already written stays written.
    """

    error_code: str = "UPSTREAM_ERROR"


class DuplicateCheckUnavailableError(DomainError):
    """The duplicate lookup failed, so onboarding refuses to write anything."""

    error_code: str = "DUPLICATE_CHECK_UNAVAILABLE"


class InternalError(DomainError):
    error_code: str = "INTERNAL_ERROR"
