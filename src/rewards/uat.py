"""Bearer tokens for the UAT reward proxy used by partner testing."""
from datetime import datetime, timedelta, timezone as dt_timezone

import jwt
from django.conf import settings
from rest_framework import status

from core.exceptions import DomainError

DEFAULT_TTL = timedelta(hours=1)


class UatAuthError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


def _secret():
    secret = getattr(settings, "UAT_TOKEN_SECRET", "")
    if not secret:
        raise DomainError("UAT_TOKEN_SECRET not configured", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return secret


def mint_uat_token(client_id=None, ttl=DEFAULT_TTL) -> str:
    now = datetime.now(dt_timezone.utc)
    claims = {
        "clientId": client_id or settings.UAT_CLIENT_ID,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(claims, _secret(), algorithm="HS256")


def verify_uat_token(authorization) -> dict:
    """Validate an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UatAuthError("Authorization header missing or invalid. Use Bearer <token>")
    token = authorization.split(" ", 1)[1].strip()
    try:
        claims = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.InvalidTokenError as exc:
        raise UatAuthError("Invalid or expired token", details={"reason": str(exc)}) from exc
    client_id = claims.get("clientId")
    if not client_id:
        raise UatAuthError("Invalid token payload. clientId is required.")
    if client_id != settings.UAT_CLIENT_ID:
        raise UatAuthError("Unauthorized client. Invalid clientId.")
    return claims
