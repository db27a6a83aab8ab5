"""
Error taxonomy shared by the order, payment and realtime layers.

Services raise these directly; DRF renders them through
api_exception_handler so views never translate errors by hand.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class DomainError(drf_exceptions.APIException):
    """Base class for every error the restaurant backend raises on purpose."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_detail
        self.details = details
        super().__init__(detail=self.message, code=code or self.default_code)

    def as_payload(self):
        code = getattr(self.detail, "code", None) or self.default_code
        payload = {"error": str(self.message), "code": code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(DomainError):
    """Bad shape, type or missing field. Never mutates state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class ConflictError(DomainError):
    """The request is well formed but clashes with the current state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request conflicts with the current state."
    default_code = "conflict"


class AuthError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required."
    default_code = "not_authenticated"


class PermissionDeniedError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Manager privileges required."
    default_code = "permission_denied"


class InternalError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR_MESSAGE
    default_code = "internal_error"


def _describe_request(context):
    request = context.get("request")
    if request is None:
        return {}
    return {"path": request.path, "method": request.method}


def api_exception_handler(exc, context):
    """
    DRF exception handler that renders every error as
    {"error": ..., "code": ..., "details": ...}.

    Unexpected exceptions are logged with their traceback and surfaced as
    an opaque 500 so no internal detail reaches the client.
    """
    if isinstance(exc, InternalError):
        logger.error(
            f"Internal error: {exc.message}",
            exc_info=exc,
            extra=_describe_request(context),
        )
        return Response(
            {"error": GENERIC_ERROR_MESSAGE, "code": InternalError.default_code},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DomainError):
        return Response(exc.as_payload(), status=exc.status_code)

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = drf_exceptions.PermissionDenied()

    response = exception_handler(exc, context)

    if response is None:
        logger.error(
            f"Unhandled {exc.__class__.__name__} in API view",
            exc_info=exc,
            extra=_describe_request(context),
        )
        return Response(
            {"error": GENERIC_ERROR_MESSAGE, "code": InternalError.default_code},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = response.data
    if isinstance(exc, drf_exceptions.ValidationError):
        response.data = {
            "error": "Invalid input.",
            "code": ValidationError.default_code,
            "details": data,
        }
    elif isinstance(data, dict) and "detail" in data:
        codes = exc.get_codes() if isinstance(exc, drf_exceptions.APIException) else None
        response.data = {
            "error": str(data["detail"]),
            "code": codes if isinstance(codes, str) else "error",
        }
    return response
