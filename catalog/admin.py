# catalog/admin.py
from django.contrib import admin

from .models import Classroom, Equipment


@admin.register(Classroom)
class ClassroomAdmin(admin.ModelAdmin):
    list_display = ("id", "name_th", "name_en", "program")
    list_filter = ("program",)
    search_fields = ("name_th", "name_en")
    ordering = ("program", "name_th")


@admin.register(Equipment)
class EquipmentAdmin(admin.ModelAdmin):
    list_display = ("id", "name_th", "name_en")
    search_fields = ("name_th", "name_en")
    ordering = ("name_th",)
