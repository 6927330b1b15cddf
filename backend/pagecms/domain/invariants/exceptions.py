from typing import Any, Dict, List, Optional


class SectionError(Exception):
    """Base class for every error raised by the section engine."""

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @property
    def kind(self) -> str:
        return type(self).__name__


class ParseError(SectionError):
    """The import file is not JSON or has no `sections` array."""

    status_code = 400


class ValidationError(SectionError):
    """Content or request data is unusable; `errors` holds the issue list."""

    status_code = 422


class CapacityError(ValidationError):
    """The per-page section ceiling would be exceeded."""


class NotFoundError(SectionError):
    status_code = 404


class ConflictError(SectionError):
    """Optimistic-lock mismatch: the row changed after the client read it."""

    status_code = 409
