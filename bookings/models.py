# bookings/models.py
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from catalog.models import PROGRAM_CHOICES, Classroom, Equipment

User = settings.AUTH_USER_MODEL

# --------------------------------------------------------------------
# CHOICES
# --------------------------------------------------------------------
STATUS_BOOKED = "Booked"
STATUS_IN_USE = "In Use"
STATUS_PENDING_RETURN = "Pending Return"
STATUS_RETURNED = "Returned"
STATUS_NOT_USED = "Not Used"

# Only these are ever written to the database; the rest are derived at read time.
BOOKING_STATUS = [
    (STATUS_BOOKED, "Booked"),
    (STATUS_RETURNED, "Returned"),
    (STATUS_NOT_USED, "Not Used"),
]

DERIVED_STATUSES = [STATUS_BOOKED, STATUS_IN_USE, STATUS_PENDING_RETURN, STATUS_RETURNED, STATUS_NOT_USED]
TERMINAL_STATUSES = (STATUS_RETURNED, STATUS_NOT_USED)

BOOKING_TYPES = [
    ("Booking", "Booking"),
    ("Borrow", "Borrow"),
]

PERIOD_CHOICES = [(n, f"Period {n}") for n in range(1, 7)]


# --------------------------------------------------------------------
# BOOKING MODEL
# --------------------------------------------------------------------
class Booking(models.Model):
    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="bookings"
    )
    type = models.CharField(max_length=16, choices=BOOKING_TYPES, default="Booking")
    teacher_name = models.CharField(max_length=255)
    program = models.CharField(max_length=32, choices=PROGRAM_CHOICES)
    classroom = models.ForeignKey(Classroom, on_delete=models.PROTECT, related_name="bookings")
    period = models.PositiveSmallIntegerField(
        choices=PERIOD_CHOICES, validators=[MinValueValidator(1), MaxValueValidator(6)]
    )
    date = models.DateField()
    equipment = models.ManyToManyField(Equipment, related_name="bookings")
    learning_plan = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=BOOKING_STATUS, default=STATUS_BOOKED)
    created_at = models.DateTimeField(auto_now_add=True)
    returned_at = models.DateTimeField(null=True, blank=True)
    returned_by = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["date", "period"], name="booking_date_period_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]
        constraints = [
            # one open booking per classroom slot
            models.UniqueConstraint(
                fields=["classroom", "date", "period"],
                condition=Q(status=STATUS_BOOKED),
                name="unique_open_booking_slot",
            ),
        ]

    def __str__(self):
        return f"{self.teacher_name} - {self.classroom} - P{self.period} {self.date:%Y-%m-%d}"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES


# --------------------------------------------------------------------
# RETURN LOG MODEL
# --------------------------------------------------------------------
class ReturnLog(models.Model):
    """One row per return confirmed by an admin."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="return_logs")
    admin = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="confirmed_returns")
    returned_by_admin = models.CharField(max_length=255)
    return_timestamp = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-return_timestamp"]

    def __str__(self):
        return f"{self.return_timestamp:%Y-%m-%d %H:%M} - {self.returned_by_admin} - booking #{self.booking_id}"
