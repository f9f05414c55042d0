# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_CHOICES = [
        ("teacher", "Teacher"),
        ("admin", "Administrator"),
    ]

    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default="teacher")

    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["name", "username"]

    def __str__(self):
        return f"{self.display_name} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        # names come in pasted from staff lists with stray whitespace
        self.name = " ".join(self.name.split())
        super().save(*args, **kwargs)

    # ========== PERMISSION HELPERS ==========

    @property
    def display_name(self):
        return self.name or self.username

    @property
    def is_teacher(self):
        return self.role == "teacher"

    @property
    def is_school_admin(self):
        """Admins confirm returns and manage users, classrooms and equipment."""
        return self.is_superuser or self.role == "admin"

    @property
    def can_confirm_returns(self):
        return self.is_school_admin

    def can_manage_booking(self, booking):
        """Owners may edit, cancel or delete their own bookings; admins any."""
        return self.is_school_admin or booking.user_id == self.pk
