import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(APIException):
    """Malformed or out-of-range input; the caller can resubmit corrected data."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid input.")
    default_code = "validation_error"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("Not found.")
    default_code = "not_found"


class InvalidStateError(APIException):
    """Operation is not legal for the entity's current state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("Operation not allowed in the current state.")
    default_code = "invalid_state"


class ConsistencyError(APIException):
    """A recomputed aggregate violates an invariant. Never swallow this."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _("Data consistency violation.")
    default_code = "consistency_error"


def _message_from_detail(detail):
    if isinstance(detail, dict):
        if "detail" in detail:
            return _message_from_detail(detail["detail"])
        for value in detail.values():
            return _message_from_detail(value)
        return ""
    if isinstance(detail, list):
        return _message_from_detail(detail[0]) if detail else ""
    return str(detail)


def custom_exception_handler(exc, context):
    """Render every API error as ``{"status": "error", "data": ..., "message": ...}``."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ConsistencyError):
        logger.error("Consistency error in %s: %s", context.get("view"), exc.detail)

    detail = response.data
    if isinstance(detail, dict) and set(detail.keys()) == {"detail"}:
        data = None
    else:
        data = detail

    response.data = {
        "status": "error",
        "data": data,
        "message": _message_from_detail(detail),
    }
    return response
