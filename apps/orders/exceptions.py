"""
Typed failures for the order lifecycle, reconciliation and ledger services.

Every service raises one of these instead of returning error tuples; the
project exception handler renders them as ``{"error": ..., "code": ...}``.
No partial writes survive a raise because each service call is atomic.
"""

import logging

from django.db import InterfaceError, OperationalError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger("cementops.errors")


class CementOpsError(APIException):
    status_code    = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code   = "error"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail, code=code)
        self.code = code or self.default_code

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(CementOpsError):
    """Missing required field or quantity-sum mismatch."""
    status_code  = status.HTTP_400_BAD_REQUEST
    default_code = "validation_error"


class AuthorizationError(CementOpsError):
    """Delivery OTP missing or wrong."""
    status_code  = status.HTTP_403_FORBIDDEN
    default_code = "otp_mismatch"


class PreconditionError(CementOpsError):
    """Credit clearance or fleet eligibility failed; the transition is blocked."""
    status_code  = 422
    default_code = "precondition_failed"


class ConflictError(CementOpsError):
    """Concurrent double assignment or double reconciliation."""
    status_code  = status.HTTP_409_CONFLICT
    default_code = "conflict"


class TransportError(CementOpsError):
    """Database unavailable. Nothing is retried automatically."""
    status_code    = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable. Please retry."
    default_code   = "unavailable"


def exception_handler(exc, context):
    """DRF exception handler: typed errors get a flat body, DB outages become 503."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error("Database unavailable: %s", exc)
        exc = TransportError()

    response = drf_exception_handler(exc, context)
    if response is not None and isinstance(exc, CementOpsError):
        response.data = {"error": exc.message, "code": exc.code}
    return response
