from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken


class BearerOrCookieJWTAuthentication(JWTAuthentication):
    """
    Reads the access token from the Authorization header first and falls
    back to the access_token cookie set by the terminal login screen.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE"])

        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        try:
            user_id = validated_token[settings.SIMPLE_JWT.get("USER_ID_CLAIM", "user_id")]
        except KeyError:
            raise InvalidToken("Token contained no recognizable user identification")

        try:
            user = self.user_model.objects.get(
                **{settings.SIMPLE_JWT.get("USER_ID_FIELD", "id"): user_id}
            )
        except (self.user_model.DoesNotExist, ValueError):
            raise AuthenticationFailed("User not found", code="user_not_found")

        if not user.is_active:
            raise AuthenticationFailed("User is inactive", code="user_inactive")

        return user
