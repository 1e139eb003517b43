"""
core.domain.results — Tagged outcome returned by the policy facade.

``ModerationPolicy.execute`` never raises a domain error; it returns a
``Result`` that either holds the produced value or an ``ErrorKind`` with a
human-readable message.  Views translate a failed result with
``core.domain.exception_handler.error_response``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.domain.exceptions import DomainError, ErrorKind, exception_for


@dataclass(frozen=True)
class Result:
    value: Any = None
    error: ErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, exc: DomainError) -> "Result":
        return cls(error=exc.kind, message=exc.message)

    def unwrap(self) -> Any:
        """Return the value, or re-raise the failure as its domain exception."""
        if self.error is not None:
            raise exception_for(self.error, self.message)
        return self.value
