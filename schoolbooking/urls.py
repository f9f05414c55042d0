# schoolbooking/urls.py
from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from bookings.dispatch import action_endpoint
from bookings.views import BookingViewSet
from catalog.views import ClassroomViewSet, EquipmentViewSet
from users.views import UserViewSet

router = DefaultRouter()
router.register("bookings", BookingViewSet, basename="booking")
router.register("classrooms", ClassroomViewSet, basename="classroom")
router.register("equipment", EquipmentViewSet, basename="equipment")
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("exec/", action_endpoint, name="action_endpoint"),
    path("api/", include(router.urls)),
    path("accounts/", include("users.urls")),
]
