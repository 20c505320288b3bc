"""Django admin for the incentives module."""
from django.contrib import admin

from incentives.models import IncentiveRule, IncentiveTier


class IncentiveTierInline(admin.TabularInline):
    model = IncentiveTier
    extra = 0
    ordering = ("revenue_threshold",)
    fields = ("name", "revenue_threshold", "incentive_rate")


@admin.register(IncentiveRule)
class IncentiveRuleAdmin(admin.ModelAdmin):
    list_display = (
        "name", "priority", "rate_band_display",
        "min_commission_threshold", "tier_count", "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("name", "description")
    ordering = ("priority", "created_at")
    inlines = [IncentiveTierInline]
    readonly_fields = ("created_at", "updated_at")

    @admin.display(description="Commission band")
    def rate_band_display(self, obj):
        return f"{obj.commission_rate_min}% - {obj.commission_rate_max}%"

    @admin.display(description="Tiers")
    def tier_count(self, obj):
        return obj.tiers.count()
