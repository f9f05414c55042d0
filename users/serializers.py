from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public shape of a user. The password is write-only and hashed on save;
    an empty password on update leaves the stored hash untouched.
    """

    password = serializers.CharField(write_only=True, required=False, allow_blank=True, trim_whitespace=False)

    class Meta:
        model = User
        fields = ["id", "name", "username", "role", "password"]

    def validate(self, data):
        if self.instance is None and not data.get("password"):
            raise serializers.ValidationError({"password": "A password is required for new users."})
        return data

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", "")
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
