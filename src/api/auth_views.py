"""Authentication API views with HttpOnly JWT cookies."""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.middleware import csrf
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework import permissions, status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounts.models import OtpCode
from accounts.services import issue_otp, login_canvasser, normalize_phone, verify_otp
from api.v1.serializers import CustomTokenObtainPairSerializer, UserSerializer

logger = logging.getLogger("spotincentive")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle that falls back to a strict default if scope config is missing."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


def _cookie_max_age(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None) -> None:
    secure = getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG)
    samesite = getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax")
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    access_cookie = getattr(settings, "JWT_AUTH_COOKIE", "access_token")
    refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")

    response.set_cookie(
        key=access_cookie,
        value=access,
        max_age=_cookie_max_age(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]),
        httponly=True,
        secure=secure,
        samesite=samesite,
        path=path,
        domain=domain,
    )
    if refresh:
        response.set_cookie(
            key=refresh_cookie,
            value=refresh,
            max_age=_cookie_max_age(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]),
            httponly=True,
            secure=secure,
            samesite=samesite,
            path=path,
            domain=domain,
        )


def _clear_auth_cookies(response: Response) -> None:
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    access_cookie = getattr(settings, "JWT_AUTH_COOKIE", "access_token")
    refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
    response.delete_cookie(access_cookie, path=path, domain=domain)
    response.delete_cookie(refresh_cookie, path=path, domain=domain)


def _token_response(user, data: dict) -> Response:
    refresh = RefreshToken.for_user(user)
    access = str(refresh.access_token)
    if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
        data.update({"access": access, "refresh": str(refresh)})
    response = Response(data, status=status.HTTP_200_OK)
    _set_auth_cookies(response, access=access, refresh=str(refresh))
    return response


class CookieTokenObtainPairView(TokenObtainPairView):
    """Username/password login for administrators; sets HttpOnly cookies."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated["refresh"]
        user = validated["user"]

        response_data = {"success": True, "user": user, "homePath": user["homePath"]}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        logger.info("Login: %s (%s)", user["username"], user["role"])
        return response


class CanvasserSendOtpView(APIView):
    """Send a login OTP to a canvasser phone number."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "otp"

    def post(self, request):
        phone = normalize_phone(request.data.get("phone"))
        otp = issue_otp(phone, OtpCode.Purpose.LOGIN)
        data = {"success": True, "message": "OTP sent successfully"}
        if getattr(settings, "OTP_DEBUG_RETURN_CODE", False):
            data["otp"] = otp.code
        return Response(data)


class CanvasserVerifyOtpView(APIView):
    """Exchange a valid OTP for auth cookies, creating the canvasser on first login."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"

    def post(self, request):
        code = str(request.data.get("otp") or "").strip()
        if not code:
            raise ValidationError({"otp": "Phone and OTP are required"})
        phone = normalize_phone(request.data.get("phone"))
        verify_otp(phone, code, OtpCode.Purpose.LOGIN)
        user = login_canvasser(phone)
        payload = UserSerializer(user).data
        logger.info("Canvasser OTP login: %s", phone)
        return _token_response(user, {"success": True, "user": payload, "homePath": user.home_path})


class VerifyAuthView(APIView):
    """Return the authenticated user."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        if not request.user.is_authenticated:
            raise NotAuthenticated("Not authenticated")
        data = UserSerializer(request.user).data
        return Response({"authenticated": True, "user": data, "homePath": request.user.home_path})


class CookieTokenRefreshView(TokenRefreshView):
    """Refresh access token using body token or HttpOnly refresh cookie."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        payload = {"refresh": request.data.get("refresh") or request.COOKIES.get(refresh_cookie) or ""}
        if not payload["refresh"]:
            raise NotAuthenticated("Refresh token missing")

        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated.get("refresh", payload["refresh"])
        response_data = {"detail": "Token refreshed."}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class LogoutAPIView(APIView):
    """Blacklist the refresh token and clear auth cookies."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        raw = request.data.get("refresh") or request.COOKIES.get(refresh_cookie)
        if raw:
            try:
                RefreshToken(raw).blacklist()
            except TokenError:
                logger.info("Logout with an already invalid refresh token")
        response = Response(status=status.HTTP_204_NO_CONTENT)
        _clear_auth_cookies(response)
        return response


@method_decorator(ensure_csrf_cookie, name="dispatch")
class CSRFTokenAPIView(APIView):
    """Return a CSRF token and ensure CSRF cookie is set."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        token = csrf.get_token(request)
        return Response({"csrfToken": token}, status=status.HTTP_200_OK)
