from enum import Enum
from typing import Any, Optional, Sequence


class ErrorKind(str, Enum):
    """Closed set of domain error kinds understood by the error responder."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    NOT_AUTHENTICATED = "not_authenticated"


class FieldError(dict):
    """A single ``{"message": ..., "field": ...}`` entry of an error payload."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message)
        if field:
            self["field"] = field


class AppError(Exception):
    """Raised for expected failure conditions of a request.

    Attributes:
        kind: which ErrorKind this is; selects the HTTP status
        message: human-readable summary
        errors: payload entries; defaults to a single entry built from message/field
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        field: Optional[str] = None,
        errors: Optional[Sequence[FieldError]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field
        self.errors = list(errors) if errors else [FieldError(message, field)]

    @classmethod
    def validation(cls, errors: Sequence[FieldError]) -> "AppError":
        return cls(ErrorKind.VALIDATION, "Invalid request parameters", errors=errors)

    @classmethod
    def bad_request(cls, message: str, field: Optional[str] = None) -> "AppError":
        return cls(ErrorKind.BAD_REQUEST, message, field=field)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def not_authenticated(cls) -> "AppError":
        return cls(
            ErrorKind.NOT_AUTHENTICATED,
            "Not authenticated. Please log in to access this resource.",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"errors": [dict(error) for error in self.errors]}

    def __str__(self) -> str:
        return self.message
