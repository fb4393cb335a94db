import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def _error_code(exc) -> str:
    codes = exc.get_codes()
    if isinstance(codes, str):
        return codes
    if isinstance(codes, dict) and isinstance(codes.get("code"), str):
        return codes["code"]
    return getattr(exc, "default_code", "error")


def _error_message(exc, data) -> str:
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    if isinstance(exc.detail, str):
        return str(exc.detail)
    return str(exc.default_detail)


def api_exception_handler(exc, context):
    """Render every API error as ``{"success": false, "error": ..., "code": ...}``."""
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s",
            view.__class__.__name__ if view else "unknown view",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        body = {
            "success": False,
            "error": "Internal server error",
            "code": "server_error",
        }
        if settings.DEBUG:
            body["details"] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        body = {"success": False, "error": str(exc.detail), "code": _error_code(exc)}
        if exc.details:
            body["details"] = exc.details
    elif isinstance(exc, exceptions.ValidationError):
        body = {
            "success": False,
            "error": "Validation failed",
            "code": "validation_error",
            "details": response.data,
        }
    else:
        body = {
            "success": False,
            "error": _error_message(exc, response.data),
            "code": _error_code(exc),
        }

    response.data = body
    return response
