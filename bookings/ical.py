from django.utils import timezone
from icalendar import Calendar, Event, vCalAddress, vText

from .utils import period_window


def build_ics_for_booking(booking, language="th"):
    window = period_window(booking.date, booking.period)
    if window is None:
        raise ValueError(f"Booking #{booking.pk} has no known period window.")
    start, end = window

    cal = Calendar()
    cal.add('prodid', '-//School Equipment Booking//example.org//')
    cal.add('version', '2.0')

    classroom = booking.classroom.localized_name(language)
    equipment = ", ".join(eq.localized_name(language) for eq in booking.equipment.all())

    ev = Event()
    ev.add('uid', f"booking-{booking.pk}@school-equipment-booking")
    ev.add('summary', f"{booking.type}: {classroom} (P{booking.period})")
    ev.add('dtstart', start)
    ev.add('dtend', end)
    ev.add('dtstamp', timezone.now())
    ev.add('location', classroom)
    ev.add('description', f"{equipment}\n{booking.learning_plan}".strip())
    organizer = vCalAddress('MAILTO:noreply@school-equipment-booking')
    organizer.params['cn'] = vText(booking.teacher_name)
    ev['organizer'] = organizer

    cal.add_component(ev)
    return cal.to_ical()
