"""Custom authentication backends for API."""

from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth that supports ``Authorization`` header and HttpOnly cookies.

    - Header token keeps compatibility with scripts and API clients.
    - Cookie token enables browser auth without exposing JWT in JS.
    - When the access cookie is missing or stale, a valid refresh cookie
      still authenticates the request.
    - CSRF is enforced when request is authenticated via cookie token.

    Only active users whose validation status is APPROVED authenticate.
    """

    def _enforce_csrf(self, request: Request) -> None:
        django_request = request._request
        csrf_check = CsrfViewMiddleware(lambda req: None)
        csrf_check.process_request(django_request)
        reason = csrf_check.process_view(django_request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not user.is_approved:
            raise exceptions.AuthenticationFailed("Account is not approved", code="user_not_approved")
        return user

    def _from_refresh_cookie(self, request: Request):
        cookie_name = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        raw = request.COOKIES.get(cookie_name)
        if not raw:
            return None
        try:
            refresh = RefreshToken(raw)
        except TokenError:
            return None
        return self.get_user(refresh), refresh

    def authenticate(self, request: Request):
        # 1) Authorization header: an invalid token is a hard 401.
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
            if raw_token is not None:
                validated_token = self.get_validated_token(raw_token)
                return self.get_user(validated_token), validated_token

        # 2) Access cookie, then 3) refresh cookie.
        cookie_name = getattr(settings, "JWT_AUTH_COOKIE", "access_token")
        raw_cookie_token = request.COOKIES.get(cookie_name)
        result = None
        if raw_cookie_token:
            try:
                validated_token = self.get_validated_token(raw_cookie_token)
            except (InvalidToken, TokenError):
                result = None
            else:
                result = self.get_user(validated_token), validated_token
        if result is None:
            result = self._from_refresh_cookie(request)
        if result is None:
            return None

        self._enforce_csrf(request)
        return result
