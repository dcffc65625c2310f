"""Domain exceptions.

All catalog-level errors that represent rejected requests or violated
entity invariants. The API layer maps each class to an HTTP status code,
so handlers only raise and never build error responses themselves.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all domain exceptions.

    Attributes:
        status_code: HTTP status the API layer responds with.
        error: Short error title placed in the response envelope.
    """

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
            error: Overrides the class-level error title.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error is not None:
            self.error = error


# ============================================================================
# Request Errors
# ============================================================================


PARAMETER_MESSAGES = {
    "page": "Page must be a positive integer (≥ 1)",
    "limit": "Limit must be a positive integer (≥ 1)",
    "minPrice": "minPrice must be a positive number",
    "maxPrice": "maxPrice must be a positive number",
    "batchSize": "batchSize must be a positive integer (≥ 1)",
}


class InvalidParameterError(CatalogError):
    """Raised when a query parameter fails validation."""

    status_code = 400

    def __init__(self, field: str, message: str | None = None, error: str | None = None) -> None:
        """Initialize invalid parameter error.

        Args:
            field: Name of the offending parameter as the client sent it.
            message: Field-specific message, defaults to the known message for the field.
            error: Error title, defaults to ``Invalid <field> parameter``.
        """
        super().__init__(
            message or PARAMETER_MESSAGES.get(field, f"Invalid value for {field}"),
            details={"field": field},
            error=error or f"Invalid {field} parameter",
        )
        self.field = field


class InvalidIdError(CatalogError):
    """Raised when an identifier does not have the expected shape."""

    status_code = 400

    def __init__(self, entity_type: str, value: str) -> None:
        """Initialize invalid id error.

        Args:
            entity_type: Entity the id was meant for (e.g., "department").
            value: The rejected identifier.
        """
        super().__init__(
            f"The provided {entity_type} ID is not in a valid format",
            details={"entity_type": entity_type, "id": value},
            error=f"Invalid {entity_type} ID format",
        )


# ============================================================================
# Entity Errors
# ============================================================================


class EntityValidationError(CatalogError):
    """Raised when an entity attribute violates its invariant."""

    status_code = 400
    error = "Validation Error"

    def __init__(self, entity_type: str, field: str, message: str) -> None:
        """Initialize entity validation error.

        Args:
            entity_type: Entity class name.
            field: Attribute that failed validation.
            message: Explanation of the violated rule.
        """
        super().__init__(
            message,
            details={"entity_type": entity_type, "field": field},
        )
        self.field = field


class NotFoundError(CatalogError):
    """Raised when a requested entity does not exist."""

    status_code = 404

    def __init__(self, entity_type: str, entity_id: str) -> None:
        """Initialize not found error.

        Args:
            entity_type: Entity name used in the message (e.g., "Product").
            entity_id: The identifier that was looked up.
        """
        super().__init__(
            f"No {entity_type.lower()} found with ID: {entity_id}",
            details={"entity_type": entity_type, "id": entity_id},
            error=f"{entity_type} not found",
        )


class DuplicateKeyError(CatalogError):
    """Raised when a unique constraint is violated."""

    status_code = 409
    error = "Duplicate entry"

    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(message)
