from datetime import datetime, time

from django.conf import settings
from django.utils import timezone

from .models import (
    STATUS_BOOKED,
    STATUS_IN_USE,
    STATUS_PENDING_RETURN,
    TERMINAL_STATUSES,
)

# period -> ((start_hour, start_minute), (end_hour, end_minute))
DEFAULT_PERIOD_TIMES = {
    1: ((8, 40), (9, 40)),
    2: ((9, 40), (10, 40)),
    3: ((10, 40), (11, 40)),
    4: ((12, 40), (13, 40)),
    5: ((13, 40), (14, 40)),
    6: ((14, 50), (15, 50)),
}


def get_period_times():
    return getattr(settings, "BOOKING_PERIOD_TIMES", DEFAULT_PERIOD_TIMES)


def period_label(period):
    """'08:40-09:40' style label, or '' for an unknown period."""
    times = get_period_times().get(period)
    if not times:
        return ""
    (sh, sm), (eh, em) = times
    return f"{sh:02d}:{sm:02d}-{eh:02d}:{em:02d}"


def period_window(date_obj, period):
    """
    Return the aware (start, end) datetimes of a period on a date,
    in the school's local time zone. None when the period is unknown.
    """
    times = get_period_times().get(period)
    if not times or date_obj is None:
        return None
    (sh, sm), (eh, em) = times
    tz = timezone.get_default_timezone()
    start = timezone.make_aware(datetime.combine(date_obj, time(sh, sm)), tz)
    end = timezone.make_aware(datetime.combine(date_obj, time(eh, em)), tz)
    return start, end


def derive_status(booking, now=None):
    """
    Compute the lifecycle status of a booking at `now`.

    Terminal states (Returned, Not Used) are sticky. Otherwise the booking is
    Booked before its period starts, In Use during the period (both ends
    inclusive) and Pending Return once the period has ended.
    """
    if booking.status in TERMINAL_STATUSES:
        return booking.status

    window = period_window(booking.date, booking.period)
    if window is None:
        return booking.status

    now = now or timezone.now()
    start, end = window
    if start <= now <= end:
        return STATUS_IN_USE
    if now > end:
        return STATUS_PENDING_RETURN
    return STATUS_BOOKED
