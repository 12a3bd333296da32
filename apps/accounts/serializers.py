from django.contrib.auth import password_validation
from rest_framework import serializers

from apps.utils.validators import SanitizedCharField, validate_email
from .models import User


class SignupSerializer(serializers.Serializer):
    ALLOWED_FIELDS = {"name", "email", "password"}

    name = SanitizedCharField(min_length=2, max_length=100)
    email = serializers.CharField(max_length=255, validators=[validate_email])
    password = serializers.CharField(write_only=True, max_length=128, trim_whitespace=False)

    def validate(self, attrs):
        # Role and staff flags can never be set from the signup form
        extra = sorted(set(self.initial_data) - self.ALLOWED_FIELDS)
        if extra:
            raise serializers.ValidationError(f"Invalid fields provided: {', '.join(extra)}")

        attrs["email"] = validate_email(attrs["email"])
        if User.objects.filter(email=attrs["email"]).exists():
            raise serializers.ValidationError(
                {"email": "An account with this email already exists."}
            )

        candidate = User(email=attrs["email"], name=attrs["name"])
        password_validation.validate_password(attrs["password"], user=candidate)
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=255)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role']
        read_only_fields = fields
