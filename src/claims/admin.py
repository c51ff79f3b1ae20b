from django.contrib import admin

from .models import ClaimProcedurePDF


@admin.register(ClaimProcedurePDF)
class ClaimProcedurePDFAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "file_name", "file_size", "is_active", "created_at")
    list_filter = ("is_active", "category")
    search_fields = ("title", "file_name")
    exclude = ("content",)
    readonly_fields = ("file_name", "file_size", "content_type", "uploaded_by", "created_at", "updated_at")
