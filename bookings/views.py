# bookings/views.py
"""
REST views for bookings.

Everyone logged in sees every booking (the status grid is shared); owners
and admins change them. Reports, exports and return confirmation are for
admins only.
"""

import logging

from django.http import HttpResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from catalog.models import LANGUAGES
from users.mixins import AdminRequired

from .ical import build_ics_for_booking
from .reports import usage_summary, write_report_csv
from .serializers import BookingSerializer, ReportFilterSerializer
from .services import BookingService, bookings_with_status, report_bookings
from .utils import derive_status

logger = logging.getLogger(__name__)


def get_language(request):
    lang = request.query_params.get("lang", "th")
    return lang if lang in LANGUAGES else "th"


class BookingViewSet(viewsets.ModelViewSet):
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = bookings_with_status()
        date_param = self.request.query_params.get("date")
        if date_param:
            date_obj = parse_date(date_param)
            if date_obj is None:
                raise ValidationError({"date": "Use YYYY-MM-DD."})
            qs = qs.filter(date=date_obj)
        return qs

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["now"] = timezone.now()
        return ctx

    def list(self, request, *args, **kwargs):
        bookings = list(self.get_queryset())
        status_param = request.query_params.get("status")
        if status_param:
            now = timezone.now()
            bookings = [b for b in bookings if derive_status(b, now) == status_param]
        serializer = self.get_serializer(bookings, many=True)
        return Response(serializer.data)

    def perform_destroy(self, instance):
        BookingService.delete_booking(instance, self.request.user)

    # ----------------------------------------------------------------
    # LIFECYCLE ACTIONS
    # ----------------------------------------------------------------
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        booking = BookingService.cancel_booking(self.get_object(), request.user)
        return Response(self.get_serializer(booking).data)

    @action(detail=True, methods=["post"], url_path="confirm-return", permission_classes=[AdminRequired])
    def confirm_return(self, request, pk=None):
        booking = BookingService.confirm_return(
            self.get_object(), request.user, notes=request.data.get("notes", "")
        )
        return Response(self.get_serializer(booking).data)

    @action(detail=True, methods=["get"])
    def ics(self, request, pk=None):
        booking = self.get_object()
        response = HttpResponse(build_ics_for_booking(booking, get_language(request)), content_type="text/calendar")
        response["Content-Disposition"] = f'attachment; filename="booking-{booking.pk}.ics"'
        return response

    # ----------------------------------------------------------------
    # REPORTS
    # ----------------------------------------------------------------
    def _report(self, request):
        filters = ReportFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        return report_bookings(now=timezone.now(), **filters.validated_data)

    @action(detail=False, methods=["get"], permission_classes=[AdminRequired])
    def report(self, request):
        serializer = self.get_serializer(self._report(request), many=True)
        return Response(serializer.data)

    @action(detail=False, methods=["get"], permission_classes=[AdminRequired])
    def summary(self, request):
        return Response(usage_summary(self._report(request), get_language(request)))

    @action(detail=False, methods=["get"], url_path="export", permission_classes=[AdminRequired])
    def export_csv(self, request):
        bookings = self._report(request)
        response = HttpResponse(content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = 'attachment; filename="report.csv"'
        write_report_csv(response, bookings, get_language(request))
        logger.info("%s exported %d bookings", request.user.username, len(bookings))
        return response

