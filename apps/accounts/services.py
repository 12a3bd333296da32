import logging

from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.utils.exceptions import AuthenticationError
from apps.utils.validators import sanitize_text
from .models import User, Role

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:

    @staticmethod
    def issue_tokens(user: User) -> dict:
        refresh = RefreshToken.for_user(user)
        refresh["email"] = user.email
        refresh["role"] = user.role
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
        }

    @staticmethod
    @transaction.atomic
    def signup(name: str, email: str, password: str):
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=Role.CUSTOMER,
        )
        logger.info("New customer account %s", user.pk)
        return user, AuthService.issue_tokens(user)

    @staticmethod
    def login(email: str, password: str, request=None):
        """
        Same failure message for unknown email and wrong password.
        """
        email = sanitize_text(email).lower()
        user = authenticate(request, email=email, password=password)
        if user is None:
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user, AuthService.issue_tokens(user)

    @staticmethod
    def logout(refresh_token: str):
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            raise ValidationError({"refresh": "Invalid or expired token."})
