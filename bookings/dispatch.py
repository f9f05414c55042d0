# bookings/dispatch.py
"""
Single JSON endpoint dispatching on an action name.

    GET  /exec/?action=getBookingsByDate&date=2024-06-03
    POST /exec/  {"action": "addBooking", "payload": {...}}

Every response is an envelope: {"success": true, "data": ...} or
{"success": false, "message": "..."}. POST bodies are parsed as JSON
whatever their content type, since browser clients send text/plain to
avoid a preflight.
"""

import json
import logging

from django.contrib.auth import logout
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from rest_framework.exceptions import ValidationError as DRFValidationError

from catalog.models import Classroom, Equipment
from catalog.serializers import ClassroomSerializer, EquipmentSerializer
from users.models import User
from users.serializers import UserSerializer
from users.views import authenticate_user

from .exceptions import error_messages
from .models import Booking
from .serializers import BookingSerializer, ReportFilterSerializer
from .services import BookingConflict, BookingService, bookings_by_date, bookings_with_status, report_bookings

logger = logging.getLogger(__name__)

PUBLIC = "public"
LOGIN = "login"
ADMIN = "admin"

ACTIONS = {}


def register(name, access=LOGIN):
    """Register `func(request, params)` as the handler for action `name`."""
    def decorator(func):
        ACTIONS[name] = (func, access)
        return func
    return decorator


class ActionError(Exception):
    """Request-level failure reported back in the envelope."""

    def __init__(self, message, status=400):
        super().__init__(message)
        self.status = status


# ----------------------------
# Helpers
# ----------------------------
def get_record(model, record_id):
    if record_id in (None, ""):
        raise ActionError(f"Missing ID for {model._meta.verbose_name}.")
    try:
        return model.objects.get(pk=record_id)
    except (model.DoesNotExist, ValueError, TypeError):
        raise ObjectDoesNotExist(f"Record with ID {record_id} not found in {model._meta.verbose_name_plural}.")


def save_serializer(serializer_class, data, instance=None, request=None):
    serializer = serializer_class(
        instance, data=data or {}, partial=instance is not None, context={"request": request}
    )
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return serializer.data


def serialize_bookings(bookings, request):
    return BookingSerializer(bookings, many=True, context={"request": request, "now": timezone.now()}).data


def check_access(request, access):
    if access == PUBLIC:
        return
    user = request.user
    if not user.is_authenticated:
        raise ActionError("Login required.", status=401)
    if access == ADMIN and not user.is_school_admin:
        raise PermissionDenied("Admin access required.")


def drf_message(detail):
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            msg = drf_message(value)
            parts.append(msg if field == "non_field_errors" else f"{field}: {msg}")
        return " ".join(parts)
    if isinstance(detail, list):
        return " ".join(drf_message(item) for item in detail)
    return str(detail)


def envelope(success, data=None, message=None, status=200):
    body = {"success": success}
    if success:
        body["data"] = data
    else:
        body["message"] = message
    return JsonResponse(body, status=status, json_dumps_params={"ensure_ascii": False})


# ----------------------------
# Entry point
# ----------------------------
@csrf_exempt
@require_http_methods(["GET", "POST"])
def action_endpoint(request):
    if request.method == "GET":
        params = request.GET.dict()
        name = params.pop("action", None)
        if not name:
            return envelope(False, message="'action' parameter is missing.", status=400)
    else:
        try:
            body = json.loads(request.body.decode("utf-8") or "{}")
        except (ValueError, UnicodeDecodeError):
            return envelope(False, message="POST body is not valid JSON.", status=400)
        if not isinstance(body, dict) or not body.get("action"):
            return envelope(False, message="'action' key missing in POST payload.", status=400)
        name = body["action"]
        params = body.get("payload") or {}
        if not isinstance(params, dict):
            return envelope(False, message="'payload' must be an object.", status=400)

    logger.info("%s action=%s user=%s", request.method, name, request.user if request.user.is_authenticated else "-")
    return run_action(request, name, params)


def run_action(request, name, params):
    handler = ACTIONS.get(name)
    if handler is None:
        return envelope(False, message=f"Invalid action: '{name}'", status=400)
    func, access = handler

    try:
        check_access(request, access)
        data = func(request, params)
    except ActionError as exc:
        return envelope(False, message=str(exc), status=exc.status)
    except BookingConflict as exc:
        return envelope(False, message=" ".join(error_messages(exc)), status=409)
    except DjangoValidationError as exc:
        return envelope(False, message=" ".join(error_messages(exc)), status=400)
    except DRFValidationError as exc:
        return envelope(False, message=drf_message(exc.detail), status=400)
    except PermissionDenied as exc:
        logger.warning("Denied action %s for %s", name, request.user)
        return envelope(False, message=str(exc) or "Permission denied.", status=403)
    except ObjectDoesNotExist as exc:
        return envelope(False, message=str(exc) or "Record not found.", status=404)
    except ProtectedError:
        return envelope(False, message="Record is still referenced by bookings.", status=409)
    except Exception as exc:
        logger.exception("Error during action %s", name)
        return envelope(False, message=str(exc), status=500)

    return envelope(True, data=data)


# ----------------------------
# Authentication
# ----------------------------
@register("authenticate", access=PUBLIC)
def authenticate_action(request, params):
    user = authenticate_user(request, params.get("username"), params.get("password"))
    return UserSerializer(user).data if user else None


@register("logout", access=PUBLIC)
def logout_action(request, params):
    logout(request)
    return None


# ----------------------------
# Getters
# ----------------------------
@register("getEquipment", access=PUBLIC)
def get_equipment(request, params):
    return EquipmentSerializer(Equipment.objects.all(), many=True).data


@register("getAllClassrooms", access=PUBLIC)
def get_all_classrooms(request, params):
    return ClassroomSerializer(Classroom.objects.all(), many=True).data


@register("getClassroomsByProgram", access=PUBLIC)
def get_classrooms_by_program(request, params):
    program = params.get("program")
    if not program:
        raise ActionError("'program' is required.")
    return ClassroomSerializer(Classroom.objects.filter(program=program), many=True).data


@register("getBookingsWithStatus")
def get_bookings_with_status(request, params):
    return serialize_bookings(bookings_with_status(), request)


@register("getBookingsByDate")
def get_bookings_by_date(request, params):
    try:
        date_obj = parse_date(params.get("date") or "")
    except ValueError:
        date_obj = None
    if date_obj is None:
        raise ActionError("'date' must be a YYYY-MM-DD date.")
    return serialize_bookings(bookings_by_date(date_obj), request)


@register("getReportData", access=ADMIN)
def get_report_data(request, params):
    filters = ReportFilterSerializer(data=params)
    filters.is_valid(raise_exception=True)
    return serialize_bookings(report_bookings(now=timezone.now(), **filters.validated_data), request)


@register("getUsers", access=ADMIN)
def get_users(request, params):
    return UserSerializer(User.objects.all(), many=True).data


# ----------------------------
# Bookings
# ----------------------------
@register("addBooking")
def add_booking(request, params):
    return save_serializer(BookingSerializer, params, request=request)


@register("updateBooking")
def update_booking(request, params):
    booking = get_record(Booking, params.get("id"))
    return save_serializer(BookingSerializer, params.get("data"), instance=booking, request=request)


@register("deleteBooking")
def delete_booking(request, params):
    BookingService.delete_booking(get_record(Booking, params.get("id")), request.user)
    return {"success": True}


@register("cancelBooking")
def cancel_booking(request, params):
    booking = BookingService.cancel_booking(get_record(Booking, params.get("bookingId")), request.user)
    return serialize_bookings([booking], request)[0]


@register("confirmReturn", access=ADMIN)
def confirm_return(request, params):
    booking = BookingService.confirm_return(
        get_record(Booking, params.get("bookingId")), request.user, notes=params.get("notes", "")
    )
    return serialize_bookings([booking], request)[0]


# ----------------------------
# Master data
# ----------------------------
def register_crud(model, serializer_class, label):
    """addX / updateX / deleteX handlers for an admin-managed table."""

    def add(request, params):
        return save_serializer(serializer_class, params, request=request)

    def update(request, params):
        instance = get_record(model, params.get("id"))
        return save_serializer(serializer_class, params.get("data"), instance=instance, request=request)

    def delete(request, params):
        instance = get_record(model, params.get("id"))
        instance.delete()
        logger.info("%s deleted %s #%s", request.user.username, label, params.get("id"))
        return {"success": True}

    register(f"add{label}", access=ADMIN)(add)
    register(f"update{label}", access=ADMIN)(update)
    register(f"delete{label}", access=ADMIN)(delete)


register_crud(User, UserSerializer, "User")
register_crud(Classroom, ClassroomSerializer, "Classroom")
register_crud(Equipment, EquipmentSerializer, "Equipment")
