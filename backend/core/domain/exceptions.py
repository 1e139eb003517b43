"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside the moderation
core and the service layers.  They are deliberately **not** DRF exceptions
so that the domain layer stays framework-agnostic.  Every class carries an
``ErrorKind`` so the policy facade can turn a raised exception into a
tagged ``Result`` and the DRF exception handler can map it to a status
code without an ``isinstance`` ladder.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────┬──────┐
│ Domain Exception    │ ErrorKind        │ Code │
├─────────────────────┼──────────────────┼──────┤
│ Unauthenticated     │ UNAUTHENTICATED  │ 401  │
│ PermissionDenied    │ FORBIDDEN        │ 403  │
│ NotFound            │ NOT_FOUND        │ 404  │
│ DomainError         │ VALIDATION_ERROR │ 400  │
│ Conflict            │ CONFLICT         │ 409  │
│ InvalidTransition   │ CONFLICT         │ 409  │
│ CascadeFailure      │ CASCADE_FAILURE  │ 409  │
└─────────────────────┴──────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if record.status not in kind.approve_sources:
        raise InvalidTransition(current=record.status, target="approved")
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories returned by the policy facade."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    CASCADE_FAILURE = "cascade_failure"


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Used directly for validation failures (missing field, rejection without
    notes, duplicate unique key).  Maps to HTTP 400.
    """

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class Unauthenticated(DomainError):
    """
    No principal was attached to the request.

    Maps to HTTP 401.
    """

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Authentication credentials were not provided.") -> None:
        super().__init__(message)


class PermissionDenied(DomainError):
    """
    The principal does not have the required role, is not the owner of the
    record, or asked for records outside its visibility ceiling.

    Maps to HTTP 403.
    """

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested record, or a referenced parent record, does not exist.

    Maps to HTTP 404.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: a concurrent writer won the compare-and-set race.
    Maps to HTTP 409.
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="closed",
            target="approved",
            reason="Closed records cannot be moderated.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            message = " ".join(parts) + "."
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class CascadeFailure(DomainError):
    """
    Deleting a child of the record failed.

    The surrounding transaction is rolled back, so the parent and every
    child are left unchanged.  Maps to HTTP 409.
    """

    kind = ErrorKind.CASCADE_FAILURE

    def __init__(self, message: str = "Related records could not be deleted; nothing was removed.") -> None:
        super().__init__(message)


_EXCEPTION_BY_KIND: dict[ErrorKind, type[DomainError]] = {
    ErrorKind.UNAUTHENTICATED: Unauthenticated,
    ErrorKind.FORBIDDEN: PermissionDenied,
    ErrorKind.NOT_FOUND: NotFound,
    ErrorKind.VALIDATION_ERROR: DomainError,
    ErrorKind.CONFLICT: Conflict,
    ErrorKind.CASCADE_FAILURE: CascadeFailure,
}


def exception_for(kind: ErrorKind, message: str | None = None) -> DomainError:
    """Build the exception instance matching ``kind``."""
    exc_class = _EXCEPTION_BY_KIND[kind]
    if message:
        return exc_class(message)
    return exc_class()
