import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from core_backend.exceptions import AuthError
from .serializers import LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


class LoginView(APIView):
    """Exchanges staff credentials for a signed access token."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        if not serializer.is_valid():
            raise AuthError("Invalid credentials.", code="invalid_credentials")

        user = serializer.validated_data["user"]
        token = AccessToken.for_user(user)
        token["username"] = user.get_username()
        token["labels"] = list(user.labels or [])

        logger.info(f"Staff login: user={user.get_username()} user_id={user.pk}")
        return Response(
            {"user": UserSerializer(user).data, "token": str(token)},
            status=status.HTTP_200_OK,
        )


class CurrentUserView(APIView):
    def get(self, request):
        return Response(UserSerializer(request.user).data)
