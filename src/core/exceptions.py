"""Domain errors and the API exception handler."""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger("spotincentive")


class DomainError(Exception):
    """Business rule violation raised by service functions.

    Views let these bubble up; :func:`api_exception_handler` turns them into
    ``{"error": ...}`` responses with ``status_code``.

    Under ``ATOMIC_REQUESTS`` the request transaction is rolled back unless
    ``rollback`` is false, for errors that record state on purpose.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    rollback = True

    def __init__(self, message, *, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN


def _flatten_detail(detail):
    """Pick a human readable message out of a DRF error detail."""
    if isinstance(detail, list) and detail:
        return _flatten_detail(detail[0])
    if isinstance(detail, dict) and detail:
        if "detail" in detail:
            return _flatten_detail(detail["detail"])
        field, value = next(iter(detail.items()))
        message = _flatten_detail(value)
        if field == "non_field_errors":
            return message
        return f"{field}: {message}"
    return str(detail)


def api_exception_handler(exc, context):
    """Render every API error as ``{"error": message}``."""
    if isinstance(exc, DomainError):
        if exc.rollback:
            set_rollback()
        body = {"error": exc.message}
        if exc.details is not None:
            body["details"] = exc.details
        return Response(body, status=exc.status_code)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s",
            view.__class__.__name__ if view is not None else "unknown view",
        )
        set_rollback()
        return Response(
            {"error": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = {"error": _flatten_detail(exc.detail)}
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        body["details"] = exc.detail
    response.data = body
    return response
