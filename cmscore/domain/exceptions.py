"""Domain exceptions for cmscore.

Defines framework-level exceptions raised by the control and orm layers.
They carry a machine-readable error_code; cmscore.core.exception_handlers
maps that code to an HTTP status when an exception reaches the edge.
"""

from typing import Any


class CmsCoreException(Exception):
    """Base exception for all cmscore errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, model).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentException(CmsCoreException):
    """Raised when a caller passes an argument outside its accepted domain.

    Examples: an unrecognised HTTP status code, an existing query built for
    another model, a negative limit.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        """Initialize with message and optional argument name.

        Args:
            message: Description of the invalid argument.
            argument: Optional name of the offending parameter.
        """
        details = {"argument": argument} if argument else {}
        super().__init__(message, "INVALID_ARGUMENT", details)


class UnsupportedConnectiveException(CmsCoreException):
    """Raised when a SearchContext is asked to join filters with anything but AND."""

    def __init__(self, connective: str) -> None:
        super().__init__(
            f"SearchContext connective '{connective}' not supported",
            "NOT_IMPLEMENTED",
            {"connective": connective},
        )


class UnknownModelException(CmsCoreException):
    """Raised when a model identifier does not resolve to a mapped data class."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Unknown data class: {identifier}",
            "UNKNOWN_MODEL",
            {"model": identifier},
        )


class InvalidRelationException(CmsCoreException):
    """Raised when a path segment is not a relationship on the model it is applied to."""

    def __init__(self, model: str, relation: str) -> None:
        super().__init__(
            f"{model} has no relation named '{relation}'",
            "INVALID_RELATION",
            {"model": model, "relation": relation},
        )


class InvalidFieldException(CmsCoreException):
    """Raised when a filter or sort references an attribute that is not a mapped column."""

    def __init__(self, model: str, field: str) -> None:
        super().__init__(
            f"{model} has no field named '{field}'",
            "INVALID_FIELD",
            {"model": model, "field": field},
        )


class InvalidFilterException(CmsCoreException):
    """Raised for unknown filter kinds, unsupported modifiers, or unusable filter values."""

    def __init__(self, message: str, filter_name: str | None = None) -> None:
        details = {"filter": filter_name} if filter_name else {}
        super().__init__(message, "INVALID_FILTER", details)
