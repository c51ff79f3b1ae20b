"""Admin configuration for incentive campaigns and sales reports."""
from django.contrib import admin

from .models import SpotIncentiveCampaign, SpotIncentiveReport


@admin.register(SpotIncentiveCampaign)
class SpotIncentiveCampaignAdmin(admin.ModelAdmin):
    list_display = ("store", "sku", "plan", "incentive_type", "incentive_value", "start_date", "end_date", "active")
    list_filter = ("active", "incentive_type", "store__city")
    search_fields = ("store__name", "sku__category", "plan__plan_type")
    raw_id_fields = ("store", "sku", "plan")
    date_hierarchy = "start_date"


@admin.register(SpotIncentiveReport)
class SpotIncentiveReportAdmin(admin.ModelAdmin):
    list_display = (
        "serial_number", "canvasser", "store", "plan",
        "incentive_earned", "date_of_sale", "paid_at", "voucher_code", "transaction_id",
    )
    list_filter = ("is_campaign_active", "store__city", "sku__category")
    search_fields = ("serial_number", "canvasser__full_name", "canvasser__phone", "voucher_code", "transaction_id")
    list_select_related = ("canvasser", "store", "plan")
    raw_id_fields = ("canvasser", "store", "sku", "plan")
    readonly_fields = ("id", "transaction_metadata", "created_at", "updated_at")
    date_hierarchy = "date_of_sale"
