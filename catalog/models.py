# catalog/models.py
from django.db import models

PROGRAM_CHOICES = [
    ("Thai Programme", "Thai Programme"),
    ("English Programme", "English Programme"),
    ("Kindergarten", "Kindergarten"),
]

LANGUAGES = ("th", "en")


class LocalizedNameMixin:
    """Master data carries a Thai and an English name."""

    def localized_name(self, language="th"):
        if language == "en":
            return self.name_en or self.name_th
        return self.name_th or self.name_en


class Equipment(LocalizedNameMixin, models.Model):
    name_th = models.CharField(max_length=120)
    name_en = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ["name_th"]
        verbose_name_plural = "equipment"

    def __str__(self):
        return self.localized_name()

    def delete(self, *args, **kwargs):
        # An open booking must keep at least one item. Closed bookings simply
        # lose the reference.
        open_bookings = self.bookings.filter(status="Booked")
        if open_bookings.exists():
            raise models.ProtectedError(
                f"{self} is used by open bookings.", set(open_bookings)
            )
        return super().delete(*args, **kwargs)


class Classroom(LocalizedNameMixin, models.Model):
    program = models.CharField(max_length=32, choices=PROGRAM_CHOICES)
    name_th = models.CharField(max_length=120)
    name_en = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ["program", "name_th"]
        indexes = [
            models.Index(fields=["program"], name="classroom_program_idx"),
        ]

    def __str__(self):
        return f"{self.localized_name()} ({self.program})"
