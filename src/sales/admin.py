"""Admin configuration for the sales app."""
from django.conf import settings
from django.contrib import admin

from sales.models import Account, SalesData


def _money(value) -> str:
    return f"{value:,.0f} {settings.CURRENCY}"


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------

class SalesDataInline(admin.TabularInline):
    model = SalesData
    extra = 0
    ordering = ("-period",)
    fields = ("period", "total_purchases", "gross_commission")


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "user", "is_active", "created_at")
    list_filter = ("is_active", "user")
    search_fields = ("name", "code", "user__email")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("user",)
    inlines = [SalesDataInline]


# ---------------------------------------------------------------------------
# SalesData
# ---------------------------------------------------------------------------

@admin.register(SalesData)
class SalesDataAdmin(admin.ModelAdmin):
    list_display = ("account", "period", "purchases_display", "commission_display", "rate_display")
    list_filter = ("period",)
    search_fields = ("account__name", "account__code")
    list_select_related = ("account",)
    ordering = ("-period",)

    @admin.display(description="Purchases")
    def purchases_display(self, obj):
        return _money(obj.total_purchases)

    @admin.display(description="Commission")
    def commission_display(self, obj):
        return _money(obj.gross_commission)

    @admin.display(description="Rate")
    def rate_display(self, obj):
        return f"{obj.commission_rate:.2f}%"
