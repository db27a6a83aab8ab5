"""
JWT WebSocket admission middleware for Django Channels.

Every websocket connection must present a signed access token, either as
the ``token`` query parameter (the auth handshake parameter), in an
``Authorization: Bearer`` header, or in the access_token cookie. The
middleware verifies signature and expiry, resolves the subject to a
current active user and stores a Principal in ``scope["principal"]``.
Refusals are recorded in ``scope["auth_error"]``; the consumer closes the
connection before any room join.
"""
import logging
from urllib.parse import parse_qs

import jwt
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError

from users.capabilities import Principal

logger = logging.getLogger(__name__)


class AdmissionRefused(Exception):
    MISSING_TOKEN = 4001
    EXPIRED_TOKEN = 4002
    INVALID_TOKEN = 4003
    UNKNOWN_USER = 4004

    def __init__(self, reason, close_code):
        super().__init__(reason)
        self.reason = reason
        self.close_code = close_code


def extract_token(scope):
    query = parse_qs(scope.get("query_string", b"").decode("utf-8"))
    token = (query.get("token") or [None])[0]
    if token:
        return token

    headers = {
        key.decode("latin1").lower(): value.decode("latin1")
        for key, value in scope.get("headers", [])
    }

    authorization = headers.get("authorization", "")
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0] in settings.SIMPLE_JWT.get("AUTH_HEADER_TYPES", ("Bearer",)):
        return parts[1].strip()

    cookie_header = headers.get("cookie", "")
    cookies = {}
    for cookie in cookie_header.split(";"):
        if "=" in cookie:
            key, value = cookie.strip().split("=", 1)
            cookies[key] = value
    return cookies.get(settings.SIMPLE_JWT.get("AUTH_COOKIE", "access_token"))


def decode_token(token):
    jwt_config = settings.SIMPLE_JWT
    try:
        payload = jwt.decode(
            token,
            jwt_config.get("SIGNING_KEY", settings.SECRET_KEY),
            algorithms=[jwt_config.get("ALGORITHM", "HS256")],
            options={"verify_signature": True, "verify_exp": True, "require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AdmissionRefused("Token expired", AdmissionRefused.EXPIRED_TOKEN)
    except jwt.InvalidTokenError as e:
        raise AdmissionRefused(f"Invalid token: {e}", AdmissionRefused.INVALID_TOKEN)

    if payload.get("token_type", "access") != "access":
        raise AdmissionRefused("Invalid token: not an access token", AdmissionRefused.INVALID_TOKEN)
    return payload


@database_sync_to_async
def resolve_principal(user_id):
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id, is_active=True)
    except (User.DoesNotExist, ValueError, DjangoValidationError):
        raise AdmissionRefused("User not found", AdmissionRefused.UNKNOWN_USER)
    return Principal.for_user(user)


async def admit(scope):
    token = extract_token(scope)
    if not token:
        raise AdmissionRefused("Authentication token required", AdmissionRefused.MISSING_TOKEN)

    payload = decode_token(token)
    user_id = payload.get(settings.SIMPLE_JWT.get("USER_ID_CLAIM", "user_id"))
    if not user_id:
        raise AdmissionRefused("Invalid token: missing subject", AdmissionRefused.INVALID_TOKEN)

    return await resolve_principal(user_id)


class JWTAuthMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        if scope["type"] != "websocket":
            return await super().__call__(scope, receive, send)

        scope = dict(scope)
        try:
            principal = await admit(scope)
        except AdmissionRefused as refusal:
            logger.warning(f"WebSocket admission refused: {refusal.reason}")
            scope["principal"] = None
            scope["auth_error"] = refusal
        else:
            logger.info(
                f"WebSocket authenticated: user={principal.username}, user_id={principal.subject}"
            )
            scope["principal"] = principal
            scope["auth_error"] = None

        return await super().__call__(scope, receive, send)
