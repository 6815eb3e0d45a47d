import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SignatureMismatch(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid payment signature"
    default_code = "signature_mismatch"


class UpstreamError(APIException):
    """
    A vendor call (payment gateway, database, mail relay) failed.
    The vendor's own message is carried through to the caller.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Upstream service error"
    default_code = "upstream_error"


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if message is None:
                continue
            if key in ("detail", "non_field_errors"):
                return message
            return f"{key}: {message}"
        return None
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = _first_message(item)
            if message is not None:
                return message
        return None
    if detail is None:
        return None
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    Wraps every API error in the `{success: false, message}` envelope the
    storefront and the back-office both expect.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    original = response.data
    message = _first_message(original) or "Request failed"
    payload = {"success": False, "message": message}
    if isinstance(original, dict) and set(original.keys()) - {"detail"}:
        payload["errors"] = original
    elif isinstance(original, list):
        payload["errors"] = original

    view = context.get("view")
    log_extra = {
        "view": view.__class__.__name__ if view else None,
        "status_code": response.status_code,
        "error": message,
    }
    if response.status_code >= 500:
        logger.error("api_error", extra=log_extra)
    else:
        logger.warning("api_error", extra=log_extra)

    response.data = payload
    return response
