import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(
                        choices=[("Booking", "Booking"), ("Borrow", "Borrow")], default="Booking", max_length=16
                    ),
                ),
                ("teacher_name", models.CharField(max_length=255)),
                (
                    "program",
                    models.CharField(
                        choices=[
                            ("Thai Programme", "Thai Programme"),
                            ("English Programme", "English Programme"),
                            ("Kindergarten", "Kindergarten"),
                        ],
                        max_length=32,
                    ),
                ),
                (
                    "period",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (1, "Period 1"),
                            (2, "Period 2"),
                            (3, "Period 3"),
                            (4, "Period 4"),
                            (5, "Period 5"),
                            (6, "Period 6"),
                        ],
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(6),
                        ],
                    ),
                ),
                ("date", models.DateField()),
                ("learning_plan", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("Booked", "Booked"), ("Returned", "Returned"), ("Not Used", "Not Used")],
                        default="Booked",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("returned_at", models.DateTimeField(blank=True, null=True)),
                ("returned_by", models.CharField(blank=True, max_length=255)),
                (
                    "classroom",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="catalog.classroom",
                    ),
                ),
                ("equipment", models.ManyToManyField(related_name="bookings", to="catalog.equipment")),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["date", "period"], name="booking_date_period_idx"),
                    models.Index(fields=["status"], name="booking_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "Booked")),
                        fields=("classroom", "date", "period"),
                        name="unique_open_booking_slot",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReturnLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("returned_by_admin", models.CharField(max_length=255)),
                ("return_timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("notes", models.TextField(blank=True)),
                (
                    "admin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="confirmed_returns",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="return_logs",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "ordering": ["-return_timestamp"],
            },
        ),
    ]
