from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when submitted fields break one or more field rules.

    `errors` maps every offending field to its message; nothing is persisted.
    """

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class NotFoundError(DomainError):
    """Raised when an update/delete targets an id that does not exist."""


class StoreError(DomainError):
    """Base exception for failures reported by the backing store."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class DuplicateValueError(StoreError):
    """A write collided with an existing value of a unique column."""


class ConstraintViolationError(StoreError):
    """A write was rejected by a CHECK or NOT NULL constraint."""


class ReferenceNotFoundError(StoreError):
    """A write referenced a parent row that does not exist."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or failed for a non-constraint reason."""
