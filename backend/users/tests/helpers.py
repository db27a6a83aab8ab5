from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken


def access_token_for(user):
    return str(AccessToken.for_user(user))


def expired_token_for(user):
    """Correctly signed access token whose expiry is in the past."""
    jwt_config = settings.SIMPLE_JWT
    issued = timezone.now() - timedelta(hours=2)
    payload = {
        "token_type": "access",
        jwt_config["USER_ID_CLAIM"]: str(user.pk),
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(hours=1)).timestamp()),
        "jti": "expired-test-token",
    }
    return jwt.encode(payload, jwt_config["SIGNING_KEY"], algorithm=jwt_config["ALGORITHM"])
