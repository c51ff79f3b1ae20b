"""Serializers for the spot incentive API v1.

Responses use camelCase keys, which the web client consumes directly.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from catalog.models import Plan, ProductSKU
from claims.models import ClaimProcedurePDF
from incentives.models import SpotIncentiveCampaign
from stores.models import Canvasser, Store, StoreChangeRequest
from support.models import SupportQuery, SupportQueryMessage

User = get_user_model()


def _whole(value):
    return int(value) if value is not None else None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserSerializer(serializers.ModelSerializer):
    """The authenticated user, as returned by login and ``auth/verify``."""

    fullName = serializers.CharField(source="full_name", read_only=True)
    isUatUser = serializers.BooleanField(source="is_uat_user", read_only=True)
    homePath = serializers.CharField(source="home_path", read_only=True)
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id", "username", "email", "fullName", "phone",
            "role", "validation", "isUatUser", "homePath", "profile",
        ]
        read_only_fields = fields

    def get_profile(self, user):
        if not user.is_canvasser:
            return None
        profile = Canvasser.objects.select_related("store").filter(user=user).first()
        if profile is None:
            return None
        return CanvasserProfileSerializer(profile).data


class UserListSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "fullName", "phone", "role", "validation", "createdAt"]
        read_only_fields = fields


class ValidationUpdateSerializer(serializers.Serializer):
    validation = serializers.ChoiceField(
        choices=User.Validation.choices,
        error_messages={"invalid_choice": "Invalid status. Use PENDING, APPROVED, or BLOCKED."},
    )


# ---------------------------------------------------------------------------
# Custom JWT Serializer (includes user data in token response)
# ---------------------------------------------------------------------------

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Extends JWT token response to include user profile data."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if self.user.validation == User.Validation.BLOCKED:
            raise PermissionDenied("Your account has been blocked. Please contact support.")
        if not self.user.is_approved:
            raise PermissionDenied("Your account is pending approval.")
        data["user"] = UserSerializer(self.user).data
        return data


# ---------------------------------------------------------------------------
# Stores and canvasser profiles
# ---------------------------------------------------------------------------

class StoreSerializer(serializers.ModelSerializer):
    numberOfCanvassers = serializers.IntegerField(source="number_of_canvassers", read_only=True)

    class Meta:
        model = Store
        fields = ["id", "name", "code", "city", "numberOfCanvassers"]
        read_only_fields = fields


class CanvasserProfileSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", read_only=True)
    employeeId = serializers.CharField(source="employee_id", read_only=True)
    store = StoreSerializer(read_only=True)

    class Meta:
        model = Canvasser
        fields = ["id", "phone", "fullName", "employeeId", "email", "agency", "store"]
        read_only_fields = fields


class CanvasserProfileUpdateSerializer(serializers.Serializer):
    fullName = serializers.CharField(source="full_name", required=False, allow_blank=True, max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True)
    employeeId = serializers.CharField(source="employee_id", required=False, allow_blank=True, max_length=50)
    agency = serializers.CharField(required=False, allow_blank=True, max_length=200)


class StoreChangeRequestSerializer(serializers.ModelSerializer):
    canvasser = serializers.SerializerMethodField()
    currentStore = StoreSerializer(source="current_store", read_only=True)
    requestedStore = StoreSerializer(source="requested_store", read_only=True)
    reviewNotes = serializers.CharField(source="review_notes", read_only=True)
    reviewedBy = serializers.SerializerMethodField()
    reviewedAt = serializers.DateTimeField(source="reviewed_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = StoreChangeRequest
        fields = [
            "id", "canvasser", "currentStore", "requestedStore", "reason",
            "status", "reviewNotes", "reviewedBy", "reviewedAt", "createdAt",
        ]
        read_only_fields = fields

    def get_canvasser(self, obj):
        profile = obj.canvasser
        return {"id": str(profile.pk), "fullName": profile.full_name, "phone": profile.phone}

    def get_reviewedBy(self, obj):
        reviewer = obj.reviewed_by
        return (reviewer.full_name or reviewer.username) if reviewer else None


# ---------------------------------------------------------------------------
# Catalog and campaigns
# ---------------------------------------------------------------------------

class PlanSerializer(serializers.ModelSerializer):
    planType = serializers.CharField(source="plan_type", read_only=True)
    price = serializers.SerializerMethodField()
    priceRange = serializers.CharField(source="price_range", read_only=True)
    incentiveAmount = serializers.SerializerMethodField()
    tenure = serializers.IntegerField(read_only=True)
    skuId = serializers.UUIDField(source="sku_id", read_only=True)
    category = serializers.CharField(source="sku.category", read_only=True)

    class Meta:
        model = Plan
        fields = ["id", "planType", "price", "priceRange", "incentiveAmount", "tenure", "skuId", "category"]
        read_only_fields = fields

    def get_price(self, obj):
        return _whole(obj.price)

    def get_incentiveAmount(self, obj):
        return _whole(obj.incentive_amount)


class DeviceSerializer(serializers.ModelSerializer):
    modelName = serializers.CharField(source="model_name", read_only=True)
    modelPrice = serializers.SerializerMethodField()

    class Meta:
        model = ProductSKU
        fields = ["id", "category", "modelName", "modelPrice"]
        read_only_fields = fields

    def get_modelPrice(self, obj):
        return _whole(obj.model_price)


class CampaignSerializer(serializers.ModelSerializer):
    storeId = serializers.UUIDField(source="store_id", read_only=True)
    device = DeviceSerializer(source="sku", read_only=True)
    plan = PlanSerializer(read_only=True)
    incentiveType = serializers.CharField(source="incentive_type", read_only=True)
    incentiveValue = serializers.SerializerMethodField()
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)

    class Meta:
        model = SpotIncentiveCampaign
        fields = ["id", "storeId", "device", "plan", "incentiveType", "incentiveValue", "startDate", "endDate"]
        read_only_fields = fields

    def get_incentiveValue(self, obj):
        return float(obj.incentive_value)


# ---------------------------------------------------------------------------
# Support
# ---------------------------------------------------------------------------

class SupportQueryMessageSerializer(serializers.ModelSerializer):
    isFromAdmin = serializers.BooleanField(source="is_from_admin", read_only=True)
    adminName = serializers.CharField(source="admin_name", read_only=True)
    sentAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = SupportQueryMessage
        fields = ["id", "message", "isFromAdmin", "adminName", "sentAt"]
        read_only_fields = fields


class SupportQuerySerializer(serializers.ModelSerializer):
    queryNumber = serializers.CharField(source="query_number", read_only=True)
    submittedAt = serializers.DateTimeField(source="created_at", read_only=True)
    resolvedAt = serializers.DateTimeField(source="resolved_at", read_only=True)
    messages = SupportQueryMessageSerializer(many=True, read_only=True)
    canvasser = serializers.SerializerMethodField()

    class Meta:
        model = SupportQuery
        fields = [
            "id", "queryNumber", "category", "description", "status",
            "submittedAt", "resolvedAt", "messages", "canvasser",
        ]
        read_only_fields = fields

    def get_canvasser(self, obj):
        profile = obj.canvasser
        store = profile.store
        return {
            "fullName": profile.full_name,
            "phone": profile.phone,
            "employeeId": profile.employee_id,
            "store": {"name": store.name, "city": store.city} if store else None,
        }


# ---------------------------------------------------------------------------
# Claim procedure PDFs
# ---------------------------------------------------------------------------

class ClaimProcedurePDFSerializer(serializers.ModelSerializer):
    fileName = serializers.CharField(source="file_name", read_only=True)
    fileSize = serializers.IntegerField(source="file_size", read_only=True)
    contentType = serializers.CharField(source="content_type", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    uploadedAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ClaimProcedurePDF
        fields = [
            "id", "title", "description", "category", "fileName",
            "fileSize", "contentType", "isActive", "uploadedAt",
        ]
        read_only_fields = fields
