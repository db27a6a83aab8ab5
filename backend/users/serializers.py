from django.contrib.auth import authenticate
from rest_framework import serializers

from .capabilities import parse_roles
from .models import User


class UserSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "username", "name", "labels", "roles", "is_active"]
        read_only_fields = fields

    def get_roles(self, obj):
        return sorted(role.value for role in parse_roles(obj.labels))


class StaffSummarySerializer(serializers.ModelSerializer):
    """Compact staff reference embedded in order payloads."""

    class Meta:
        model = User
        fields = ["id", "name", "username"]
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    """Accepts either the e-mail address or the username as `email`."""

    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        identifier = attrs["email"].strip()
        user = (
            User.objects.filter(email__iexact=identifier).first()
            or User.objects.filter(username=identifier).first()
        )
        if user is None:
            raise serializers.ValidationError("Invalid credentials.")

        authenticated = authenticate(
            request=self.context.get("request"),
            username=user.get_username(),
            password=attrs["password"],
        )
        if authenticated is None:
            raise serializers.ValidationError("Invalid credentials.")

        attrs["user"] = authenticated
        return attrs
