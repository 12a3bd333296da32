from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework import exceptions as drf_exceptions
import logging

logger = logging.getLogger(__name__)


class BusinessLogicException(Exception):
    """
    Raised when a domain rule is violated (e.g. 'Stock not available').
    Subclasses pin the HTTP status and error code the API reports.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "business_error"

    def __init__(self, message, code=None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class ValidationError(BusinessLogicException):
    """Malformed or missing input. Never retried."""
    default_code = "validation_error"


class AuthenticationError(BusinessLogicException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "authentication_failed"


class NotFoundError(BusinessLogicException):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class InsufficientStockError(BusinessLogicException):
    default_code = "insufficient_stock"

    def __init__(self, product_name, available, requested):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class ConcurrencyError(BusinessLogicException):
    """
    A stock row changed underneath a locked transaction, or the lock could
    not be taken in time. The client may resubmit.
    """
    status_code = status.HTTP_409_CONFLICT
    default_code = "concurrency_conflict"


class InternalError(BusinessLogicException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "server_error"

    def __init__(self, message="Failed to create order. Please try again."):
        super().__init__(message)


def _first_message(detail):
    """
    First human-readable message in a (possibly nested) DRF error detail.
    Valid list entries serialize as empty dicts and are skipped.
    """
    if isinstance(detail, dict):
        detail = list(detail.values())
    if isinstance(detail, list):
        for item in detail:
            message = _first_message(item)
            if message:
                return message
        return ""
    return str(detail)


def custom_exception_handler(exc, context):
    if isinstance(exc, BusinessLogicException):
        return Response(
            {"error": exc.message, "code": exc.code},
            status=exc.status_code
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    # If response is None, it's an unhandled server error (500)
    if response is None:
        logger.error(f"Unhandled Exception: {exc}", exc_info=True)
        return Response(
            {"error": "Internal Server Error", "code": "server_error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, drf_exceptions.ValidationError):
        response.data = {
            "error": _first_message(exc.detail),
            "code": "validation_error",
            "fields": exc.detail,
        }
    else:
        response.data = {
            "error": _first_message(response.data),
            "code": getattr(exc, "default_code", "error"),
        }

    return response
