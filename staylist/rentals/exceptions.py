"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these directly; DRF turns them into responses, so a field
error (400), an access problem (403) and a missing row (404) always reach the
client as different status codes.
"""

import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

ValidationError = exceptions.ValidationError
NotFound = exceptions.NotFound


class Unauthorized(exceptions.PermissionDenied):
    default_detail = "You are not allowed to modify this resource."
    default_code = "unauthorized"


class StorageError(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is temporarily unavailable."
    default_code = "storage_error"


def api_exception_handler(exc, context):
    """DRF handler that also reports database failures as StorageError."""
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("storage failure in %s", type(view).__name__ if view else "unknown view")
        exc = StorageError()

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, exceptions.APIException):
        data = response.data
        if isinstance(data, dict) and "code" not in data:
            codes = exc.get_codes()
            data["code"] = codes if isinstance(codes, str) else exc.default_code
    return response
