from rest_framework import serializers
from rest_framework.fields import empty

from catalog.models import PROGRAM_CHOICES, Classroom, Equipment

from .models import DERIVED_STATUSES, Booking
from .services import BookingService
from .utils import derive_status


class BookingSerializer(serializers.ModelSerializer):
    """
    Booking in the client's camelCase shape. `status` is the status derived
    at serialization time; pass `now` in the context to pin the clock.
    """

    userId = serializers.PrimaryKeyRelatedField(source="user", read_only=True)
    teacherName = serializers.CharField(source="teacher_name", required=False, allow_blank=True, max_length=255)
    classroom = serializers.PrimaryKeyRelatedField(queryset=Classroom.objects.all())
    equipment = serializers.PrimaryKeyRelatedField(queryset=Equipment.objects.all(), many=True)
    learningPlan = serializers.CharField(source="learning_plan", required=False, allow_blank=True)
    status = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    returnedAt = serializers.DateTimeField(source="returned_at", read_only=True)
    returnedBy = serializers.CharField(source="returned_by", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id", "userId", "type", "teacherName", "program", "classroom", "period", "date",
            "equipment", "learningPlan", "status", "createdAt", "returnedAt", "returnedBy",
        ]
        # slot uniqueness is enforced by BookingService under the classroom lock
        validators = []

    def get_status(self, obj):
        return derive_status(obj, self.context.get("now"))

    def validate_equipment(self, value):
        if not value:
            raise serializers.ValidationError("Select at least one equipment item.")
        return value

    def validate(self, data):
        classroom = data.get("classroom") or getattr(self.instance, "classroom", None)
        program = data.get("program") or getattr(self.instance, "program", None)
        if classroom and program and classroom.program != program:
            raise serializers.ValidationError("Selected classroom doesn't belong to the program.")
        return data

    def create(self, validated_data):
        user = self.context["request"].user
        return BookingService.create_booking(user, **validated_data)

    def update(self, instance, validated_data):
        user = self.context["request"].user
        return BookingService.update_booking(instance, user, **validated_data)


class ReportFilterSerializer(serializers.Serializer):
    startDate = serializers.DateField(required=False, source="start_date")
    endDate = serializers.DateField(required=False, source="end_date")
    program = serializers.ChoiceField(choices=PROGRAM_CHOICES, required=False)
    teacherId = serializers.IntegerField(required=False, source="teacher_id")
    equipmentId = serializers.IntegerField(required=False, source="equipment_id")
    status = serializers.ChoiceField(choices=DERIVED_STATUSES, required=False)

    def __init__(self, instance=None, data=empty, **kwargs):
        # the client sends "" for "all"
        if data is not empty and data is not None:
            data = {key: value for key, value in data.items() if value not in ("", None)}
        super().__init__(instance, data=data, **kwargs)

    def validate(self, data):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError("End date must not be before start date.")
        return data
