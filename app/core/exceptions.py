"""Domain error taxonomy.

Every error carries the HTTP status and machine-readable code that the API
layer puts into the ``ErrorResponse`` envelope.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for errors raised by the rules engine and services"""

    status_code: int = 400
    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DomainValidationError(DomainError):
    """Input violates a domain rule (e.g. meter reading went backwards)"""

    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidStatusTransition(DomainValidationError):
    """Requested status change is not in the entity's transition table"""

    status_code = 409
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, entity: str, current: str, requested: str):
        super().__init__(
            f"{entity} cannot move from '{current}' to '{requested}'",
            field="status",
        )
        self.entity = entity
        self.current = current
        self.requested = requested


class ComputationError(DomainError):
    """Derived fields could not be computed from malformed input"""

    status_code = 422
    code = "COMPUTATION_ERROR"


class ConflictError(DomainError):
    """A unique value (bill number, slug, email...) already exists"""

    status_code = 409
    code = "DUPLICATE"
