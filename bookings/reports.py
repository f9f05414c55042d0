# bookings/reports.py
import csv
from collections import Counter

from .models import DERIVED_STATUSES
from .utils import derive_status

REPORT_HEADERS = {
    "th": ["ชื่อครู", "หลักสูตร", "ห้องเรียน", "แผนการสอน", "วันที่", "คาบ", "รายการอุปกรณ์", "สถานะ"],
    "en": ["Teacher Name", "Program", "Classroom", "Learning Plan", "Date", "Period", "Equipment", "Status"],
}


def report_row(booking, language="th", now=None):
    equipment_names = "; ".join(eq.localized_name(language) for eq in booking.equipment.all())
    return [
        booking.teacher_name,
        booking.program,
        booking.classroom.localized_name(language) if booking.classroom_id else "",
        booking.learning_plan,
        booking.date.strftime("%Y-%m-%d"),
        f"P{booking.period}",
        equipment_names,
        derive_status(booking, now),
    ]


def write_report_csv(stream, bookings, language="th", now=None):
    """
    Write report rows as CSV to any file-like object (an HttpResponse works).
    Starts with a UTF-8 BOM so spreadsheet programs pick up Thai text.
    """
    if language not in REPORT_HEADERS:
        language = "th"
    stream.write("\ufeff")
    writer = csv.writer(stream)
    writer.writerow(REPORT_HEADERS[language])
    for booking in bookings:
        writer.writerow(report_row(booking, language, now))


def usage_summary(bookings, language="th", now=None):
    """Counts per derived status, per equipment item and per classroom."""
    by_status = Counter({status: 0 for status in DERIVED_STATUSES})
    by_equipment = Counter()
    by_classroom = Counter()

    for booking in bookings:
        by_status[derive_status(booking, now)] += 1
        by_classroom[booking.classroom.localized_name(language)] += 1
        for eq in booking.equipment.all():
            by_equipment[eq.localized_name(language)] += 1

    return {
        "total": len(bookings),
        "by_status": dict(by_status),
        "by_equipment": [{"name": name, "count": count} for name, count in by_equipment.most_common()],
        "by_classroom": [{"name": name, "count": count} for name, count in by_classroom.most_common()],
    }
