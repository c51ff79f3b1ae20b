"""User validation, profile and health endpoints."""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.services import set_validation
from core.lookups import get_by_pk_or_error
from stores.services import get_canvasser_for_user, update_canvasser_profile

from .permissions import DenyUatUsers, IsCanvasser, IsZopperAdmin
from .serializers import (
    CanvasserProfileSerializer,
    CanvasserProfileUpdateSerializer,
    UserListSerializer,
    UserSerializer,
    ValidationUpdateSerializer,
)

logger = logging.getLogger("spotincentive")
User = get_user_model()


class UserValidationListView(APIView):
    """List users by validation status (default PENDING)."""

    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def get(self, request):
        validation = (request.query_params.get("status") or User.Validation.PENDING).upper()
        if validation not in User.Validation.values:
            raise ValidationError("Invalid status. Use PENDING, APPROVED, or BLOCKED.")
        users = User.objects.filter(validation=validation).order_by("-date_joined")
        data = UserListSerializer(users, many=True).data
        return Response({"success": True, "data": {"users": data, "total": len(data)}})


class UserValidationDetailView(APIView):
    permission_classes = [IsZopperAdmin, DenyUatUsers]

    def patch(self, request, pk):
        user = get_by_pk_or_error(User, pk, "User not found")
        serializer = ValidationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        set_validation(user, serializer.validated_data["validation"], actor=request.user)
        return Response({"success": True, "data": UserListSerializer(user).data})


class AdminProfileView(APIView):
    permission_classes = [IsZopperAdmin]

    def get(self, request):
        return Response({"success": True, "data": UserSerializer(request.user).data})


class CanvasserProfileView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        return Response({"success": True, "data": CanvasserProfileSerializer(profile).data})


class CanvasserProfileUpdateView(APIView):
    permission_classes = [IsCanvasser]

    def post(self, request):
        profile = get_canvasser_for_user(request.user)
        serializer = CanvasserProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = update_canvasser_profile(profile, serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Profile updated successfully",
                "data": CanvasserProfileSerializer(profile).data,
            }
        )


class CanvasserKycInfoView(APIView):
    permission_classes = [IsCanvasser]

    def get(self, request):
        profile = get_canvasser_for_user(request.user)
        kyc = profile.kyc_info or {}
        return Response({"success": True, "data": {"hasKyc": bool(kyc), "kycInfo": kyc}})


class HealthView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            database = "ok"
        except DatabaseError:
            logger.exception("Health check: database unreachable")
            database = "error"

        data = {
            "status": "ok" if database == "ok" else "degraded",
            "timestamp": timezone.now().isoformat(),
            "environment": getattr(settings, "ENVIRONMENT", "development"),
            "database": database,
            "benepikConfigured": bool(
                settings.BENEPIK_BASE_URL and settings.BENEPIK_AUTH_KEY and settings.BENEPIK_SECRET_KEY
            ),
        }
        code = status.HTTP_200_OK if database == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(data, status=code)
