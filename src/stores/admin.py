"""Django admin for stores and canvasser profiles."""
from django.contrib import admin

from stores.models import Canvasser, Store, StoreChangeRequest


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "city", "number_of_canvassers", "created_at")
    list_filter = ("city",)
    search_fields = ("name", "code", "city")


@admin.register(Canvasser)
class CanvasserAdmin(admin.ModelAdmin):
    list_display = ("full_name", "phone", "employee_id", "store", "agency")
    list_filter = ("store__city",)
    search_fields = ("full_name", "phone", "employee_id", "store__name")
    raw_id_fields = ("user", "store")
    readonly_fields = ("created_at", "updated_at")


@admin.register(StoreChangeRequest)
class StoreChangeRequestAdmin(admin.ModelAdmin):
    list_display = ("canvasser", "current_store", "requested_store", "status", "reviewed_by", "created_at")
    list_filter = ("status",)
    search_fields = ("canvasser__full_name", "canvasser__phone", "requested_store__name")
    raw_id_fields = ("canvasser", "current_store", "requested_store", "reviewed_by")
    readonly_fields = ("reviewed_at", "created_at", "updated_at")
