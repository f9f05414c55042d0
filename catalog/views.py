import logging

from django.db.models import ProtectedError
from rest_framework import status, viewsets
from rest_framework.response import Response

from users.mixins import AdminOrReadOnly

from .models import Classroom, Equipment
from .serializers import ClassroomSerializer, EquipmentSerializer

logger = logging.getLogger(__name__)


class MasterDataViewSet(viewsets.ModelViewSet):
    """Readable by anyone, editable by admins."""

    permission_classes = [AdminOrReadOnly]

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response(
                {"detail": f"{instance} is still referenced by bookings."},
                status=status.HTTP_409_CONFLICT,
            )
        logger.info("%s deleted %s #%s", request.user.username, instance._meta.model_name, kwargs.get("pk"))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ClassroomViewSet(MasterDataViewSet):
    serializer_class = ClassroomSerializer

    def get_queryset(self):
        qs = Classroom.objects.all()
        program = self.request.query_params.get("program")
        if program:
            qs = qs.filter(program=program)
        return qs


class EquipmentViewSet(MasterDataViewSet):
    queryset = Equipment.objects.all()
    serializer_class = EquipmentSerializer
