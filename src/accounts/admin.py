from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import OtpCode, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for the custom User model."""

    # ------------------------------------------------------------------
    # List view
    # ------------------------------------------------------------------
    list_display = (
        "username",
        "full_name",
        "phone",
        "role",
        "validation",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = ("role", "validation", "is_active", "is_staff", "is_superuser")
    search_fields = ("username", "full_name", "phone", "email")
    ordering = ("username",)
    actions = ("approve_users", "block_users")

    # ------------------------------------------------------------------
    # Detail / edit view
    # ------------------------------------------------------------------
    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Personal info", {"fields": ("full_name", "phone", "email")}),
        (
            "Role and permissions",
            {
                "fields": (
                    "role",
                    "validation",
                    "metadata",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "username",
                    "full_name",
                    "phone",
                    "role",
                    "validation",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")

    @admin.action(description="Approve selected users")
    def approve_users(self, request, queryset):
        queryset.update(validation=User.Validation.APPROVED)

    @admin.action(description="Block selected users")
    def block_users(self, request, queryset):
        queryset.update(validation=User.Validation.BLOCKED)


@admin.register(OtpCode)
class OtpCodeAdmin(admin.ModelAdmin):
    list_display = ("phone", "purpose", "verified", "expires_at", "created_at")
    list_filter = ("purpose", "verified")
    search_fields = ("phone",)
    readonly_fields = ("code", "created_at", "verified_at")
