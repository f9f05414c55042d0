import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .services import BookingConflict

logger = logging.getLogger(__name__)


def error_messages(exc):
    """Flatten a Django ValidationError into a list of strings."""
    if hasattr(exc, "message_dict"):
        return [f"{field}: {msg}" for field, msgs in exc.message_dict.items() for msg in msgs]
    return list(exc.messages)


def api_exception_handler(exc, context):
    """
    DRF exception handler that also understands the service layer's
    Django ValidationErrors. Booking conflicts map to 409.
    """
    if isinstance(exc, BookingConflict):
        return Response({"detail": " ".join(error_messages(exc))}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, DjangoValidationError):
        return Response({"detail": " ".join(error_messages(exc))}, status=status.HTTP_400_BAD_REQUEST)
    return exception_handler(exc, context)
