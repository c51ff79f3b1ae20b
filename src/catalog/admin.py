"""Admin configuration for the catalog app."""
from django.contrib import admin

from .models import MRIncentive, Plan, ProductSKU


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------

class PlanInline(admin.TabularInline):
    model = Plan
    extra = 0
    fields = ("plan_type", "price", "price_range", "incentive_amount")


# ---------------------------------------------------------------------------
# SKU
# ---------------------------------------------------------------------------

@admin.register(ProductSKU)
class ProductSKUAdmin(admin.ModelAdmin):
    list_display = ("category", "model_name", "model_price", "created_at")
    list_filter = ("category",)
    search_fields = ("category", "model_name")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [PlanInline]


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ("plan_type", "sku", "price", "price_range", "incentive_amount")
    list_filter = ("plan_type", "sku__category")
    search_fields = ("plan_type", "sku__model_name", "sku__category")
    list_select_related = ("sku",)
    readonly_fields = ("id", "created_at", "updated_at")


# ---------------------------------------------------------------------------
# MR incentive bands
# ---------------------------------------------------------------------------

@admin.register(MRIncentive)
class MRIncentiveAdmin(admin.ModelAdmin):
    list_display = (
        "category", "price_range_label",
        "incentive_1_yr", "incentive_2_yr", "incentive_3_yr", "incentive_4_yr",
    )
    list_filter = ("category",)
    search_fields = ("category",)
    ordering = ("category", "min_price")
