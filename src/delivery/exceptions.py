"""Delivery error taxonomy.

Validation failures reuse Protean's ``ValidationError`` so that commands and
aggregates report field errors the same way. The remaining classes extend
Protean's hierarchy, which lets the FastAPI layer map each family to a
status code and lets callers decide whether a failure is worth retrying.
"""

from protean.exceptions import (
    InvalidOperationError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "NotFoundError",
    "UnavailableError",
    "ValidationError",
]


class ConflictError(InvalidOperationError):
    """The requested transition is not legal from the record's current state.

    State is unchanged when this is raised; retrying the same call will fail
    the same way.
    """


class NotFoundError(ObjectNotFoundError):
    """No leg or delivery record exists for the given id."""


class UnavailableError(ProteanException):
    """The backing store could not be reached. Safe to retry with backoff."""
