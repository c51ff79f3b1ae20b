from django.contrib import admin

from .models import SupportQuery, SupportQueryMessage


class SupportQueryMessageInline(admin.TabularInline):
    model = SupportQueryMessage
    extra = 0
    fields = ("is_from_admin", "admin_name", "message", "created_at")
    readonly_fields = ("created_at",)


@admin.register(SupportQuery)
class SupportQueryAdmin(admin.ModelAdmin):
    list_display = ("query_number", "canvasser", "category", "status", "created_at", "resolved_at")
    list_filter = ("status", "category")
    search_fields = ("query_number", "description", "canvasser__full_name", "canvasser__phone")
    raw_id_fields = ("canvasser",)
    inlines = [SupportQueryMessageInline]
