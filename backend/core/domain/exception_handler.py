"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import DomainError, ErrorKind

logger = logging.getLogger(__name__)

# ErrorKind → HTTP status code
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED:  status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN:        status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND:        status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT:         status.HTTP_409_CONFLICT,
    ErrorKind.CASCADE_FAILURE:  status.HTTP_409_CONFLICT,
}


def error_response(kind: ErrorKind, message: str) -> Response:
    """Render a failure in the shape shared by every endpoint."""
    return Response(
        {"detail": message, "code": kind.value},
        status=STATUS_BY_KIND[kind],
    )


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    """
    # Let DRF handle its own exceptions (ValidationError, AuthN, etc.)
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DomainError):
        logger.warning(
            "Domain exception [%s] in %s: %s",
            type(exc).__name__,
            context.get("view", "unknown"),
            exc,
        )
        return error_response(exc.kind, exc.message)

    # Not a domain exception; let it propagate
    return None
