from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from apps.utils.audit import AuditAction, log_auth_event
from apps.utils.exceptions import AuthenticationError
from apps.utils.throttle import AuthRateThrottle

from .services import AuthService
from .serializers import LoginSerializer, LogoutSerializer, SignupSerializer, UserSerializer


class SignupView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user, tokens = AuthService.signup(**serializer.validated_data)
        log_auth_event(AuditAction.SIGNUP, user.email, request, True, user.pk)

        return Response({
            "success": True,
            "user": UserSerializer(user).data,
            **tokens,
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data["email"]
        try:
            user, tokens = AuthService.login(
                email=email,
                password=serializer.validated_data["password"],
                request=request,
            )
        except AuthenticationError:
            log_auth_event(AuditAction.LOGIN_FAILED, email, request, False)
            raise

        log_auth_event(AuditAction.LOGIN_SUCCESS, user.email, request, True, user.pk)
        return Response({
            "success": True,
            "user": UserSerializer(user).data,
            **tokens,
        }, status=status.HTTP_200_OK)


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService.logout(serializer.validated_data["refresh"])
        log_auth_event(AuditAction.LOGOUT, request.user.email, request, True, request.user.pk)
        return Response({"success": True, "message": "Logged out successfully"})


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
