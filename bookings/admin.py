# bookings/admin.py
from django.contrib import admin

from .models import Booking, ReturnLog
from .utils import derive_status, period_label


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Booking model.
    Shows the live (derived) status next to the stored one.
    """
    list_display = ("id", "teacher_name", "classroom", "date", "period", "period_time", "type", "status", "current_status")
    list_filter = ("status", "type", "program", "classroom", "date")
    search_fields = ("teacher_name", "user__username", "learning_plan")
    date_hierarchy = "date"
    ordering = ("-date", "period")
    list_per_page = 25
    filter_horizontal = ("equipment",)

    readonly_fields = ("created_at", "returned_at", "returned_by")

    fieldsets = (
        ("Booking Information", {
            "fields": ("type", "program", "classroom", "date", "period", "equipment", "status")
        }),
        ("Teacher", {
            "fields": ("user", "teacher_name", "learning_plan")
        }),
        ("Return", {
            "fields": ("returned_at", "returned_by")
        }),
        ("Audit Data", {
            "fields": ("created_at",)
        }),
    )

    @admin.display(description="Time")
    def period_time(self, obj):
        return period_label(obj.period)

    @admin.display(description="Current status")
    def current_status(self, obj):
        return derive_status(obj)


@admin.register(ReturnLog)
class ReturnLogAdmin(admin.ModelAdmin):
    """
    Admin for ReturnLog, one row per confirmed return.
    Read-only for audit transparency.
    """
    list_display = ("return_timestamp", "returned_by_admin", "booking", "notes")
    readonly_fields = ("booking", "admin", "returned_by_admin", "return_timestamp", "notes")
    search_fields = ("returned_by_admin", "booking__teacher_name")
    ordering = ("-return_timestamp",)
    list_per_page = 50
