# bookings/services.py
import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from catalog.models import Classroom

from .models import (
    STATUS_BOOKED,
    STATUS_NOT_USED,
    STATUS_RETURNED,
    Booking,
    ReturnLog,
)
from .utils import derive_status

logger = logging.getLogger(__name__)


class BookingConflict(ValidationError):
    """The classroom already has an open booking for that date and period."""


def has_booking_conflict(classroom, date, period, exclude=None):
    """
    True when another open booking holds the same classroom, date and period.
    Returned and Not Used bookings free the slot.
    """
    qs = Booking.objects.filter(
        classroom=classroom,
        date=date,
        period=period,
        status=STATUS_BOOKED,
    )
    if exclude is not None and exclude.pk:
        qs = qs.exclude(pk=exclude.pk)
    return qs.exists()


def _lock_classroom(classroom):
    # Row lock serializing writers on one classroom; must run inside atomic()
    return Classroom.objects.select_for_update().get(pk=classroom.pk)


def _save_slot(booking):
    try:
        with transaction.atomic():
            booking.save()
    except IntegrityError:
        # a concurrent writer won the slot between our check and insert
        raise BookingConflict("Booking conflict")


class BookingService:
    """Write operations on bookings. Every write holds the classroom lock."""

    @staticmethod
    def create_booking(user, equipment=(), **fields):
        """
        Create a booking for `user` after checking the slot is free.

        Args:
            user: the logged-in requester, recorded as the booking's owner
            equipment: iterable of Equipment instances
            fields: remaining Booking fields (classroom, period, date, ...)

        Raises:
            BookingConflict: the slot already has an open booking
        """
        if not fields.get("teacher_name"):
            fields["teacher_name"] = user.display_name

        with transaction.atomic():
            _lock_classroom(fields["classroom"])
            if has_booking_conflict(fields["classroom"], fields["date"], fields["period"]):
                logger.warning(
                    "Rejected booking by %s: classroom %s period %s on %s already booked",
                    user.username, fields["classroom"].pk, fields["period"], fields["date"],
                )
                raise BookingConflict("Booking conflict")

            booking = Booking(user=user, status=STATUS_BOOKED, **fields)
            _save_slot(booking)
            booking.equipment.set(equipment)

        logger.info("Created booking #%s for %s", booking.id, booking.teacher_name)
        return booking

    @staticmethod
    def update_booking(booking, actor, equipment=None, **fields):
        """Partial update. Moving to another slot re-runs the conflict check."""
        if not actor.can_manage_booking(booking):
            raise PermissionDenied("You can only edit your own bookings.")
        if booking.is_terminal:
            raise ValidationError("Cannot edit a booking that is already completed.")

        if "teacher_name" in fields and not fields["teacher_name"]:
            fields["teacher_name"] = (booking.user or actor).display_name

        classroom = fields.get("classroom", booking.classroom)
        date = fields.get("date", booking.date)
        period = fields.get("period", booking.period)

        with transaction.atomic():
            _lock_classroom(classroom)
            if has_booking_conflict(classroom, date, period, exclude=booking):
                raise BookingConflict("Booking conflict")

            for field, value in fields.items():
                setattr(booking, field, value)
            try:
                _save_slot(booking)
            except BookingConflict:
                booking.refresh_from_db()
                raise
            if equipment is not None:
                booking.equipment.set(equipment)

        logger.info("Booking #%s updated by %s", booking.id, actor.username)
        return booking

    @staticmethod
    def delete_booking(booking, actor):
        if not actor.can_manage_booking(booking):
            raise PermissionDenied("You can only delete your own bookings.")
        booking_id = booking.id
        with transaction.atomic():
            booking.delete()
        logger.info("Booking #%s deleted by %s", booking_id, actor.username)

    @staticmethod
    def cancel_booking(booking, actor, now=None):
        """Mark a booking Not Used. Only possible before its period starts."""
        if not actor.can_manage_booking(booking):
            raise PermissionDenied("You can only cancel your own bookings.")
        if derive_status(booking, now) != STATUS_BOOKED:
            raise ValidationError("Cannot cancel a booking that is already in use or completed.")

        with transaction.atomic():
            booking.status = STATUS_NOT_USED
            booking.save(update_fields=["status"])

        logger.info("Booking #%s cancelled by %s", booking.id, actor.username)
        return booking

    @staticmethod
    def confirm_return(booking, admin, notes="", now=None):
        """Admin confirms the equipment came back; the booking becomes Returned."""
        if not admin.can_confirm_returns:
            raise PermissionDenied("Only admins can confirm returns.")
        if booking.is_terminal:
            raise ValidationError(f"Booking is already closed ({booking.status}).")

        now = now or timezone.now()
        with transaction.atomic():
            booking.status = STATUS_RETURNED
            booking.returned_at = now
            booking.returned_by = admin.display_name
            booking.save(update_fields=["status", "returned_at", "returned_by"])
            ReturnLog.objects.create(
                booking=booking,
                admin=admin,
                returned_by_admin=admin.display_name,
                return_timestamp=now,
                notes=notes or "",
            )

        logger.info("Return of booking #%s confirmed by %s", booking.id, admin.username)
        return booking


# --------------------------------------------------------------------
# READ HELPERS
# --------------------------------------------------------------------
def bookings_with_status():
    """All bookings, newest first, with relations loaded for serialization."""
    return (
        Booking.objects.select_related("classroom", "user")
        .prefetch_related("equipment")
        .order_by("-created_at", "-id")
    )


def bookings_by_date(date):
    return bookings_with_status().filter(date=date)


def report_bookings(start_date=None, end_date=None, program=None, teacher_id=None,
                    equipment_id=None, status=None, now=None):
    """
    Filtered report rows. Date bounds are inclusive. `status` matches the
    derived status, so it is applied after the database query.
    """
    qs = bookings_with_status()
    if start_date:
        qs = qs.filter(date__gte=start_date)
    if end_date:
        qs = qs.filter(date__lte=end_date)
    if program:
        qs = qs.filter(program=program)
    if teacher_id:
        qs = qs.filter(user_id=teacher_id)
    if equipment_id:
        qs = qs.filter(equipment__id=equipment_id).distinct()

    bookings = list(qs)
    if status:
        bookings = [b for b in bookings if derive_status(b, now) == status]
    return bookings
