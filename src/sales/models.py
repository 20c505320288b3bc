"""Models for managed accounts and their per-period sales figures."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from core.models import TimeStampedModel

period_validator = RegexValidator(
    regex=r"^\d{4}-(0[1-9]|1[0-2])$",
    message="Period must use the YYYY-MM format.",
)


class Account(TimeStampedModel):
    """Customer account managed by exactly one sales user (or none yet)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_accounts",
        verbose_name="account manager",
    )
    name = models.CharField("name", max_length=255)
    code = models.CharField("code", max_length=50, unique=True, null=True, blank=True)
    is_active = models.BooleanField("active", default=True)

    class Meta:
        verbose_name = "account"
        verbose_name_plural = "accounts"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["user"], name="sales_account_user_idx"),
        ]

    def __str__(self):
        return self.name


class SalesData(TimeStampedModel):
    """Revenue and commission booked on one account for one period."""

    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="sales_data",
        verbose_name="account",
    )
    period = models.CharField(
        "period (YYYY-MM)",
        max_length=7,
        validators=[period_validator],
    )
    total_purchases = models.DecimalField(
        "total purchases",
        max_digits=16,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    gross_commission = models.DecimalField(
        "gross commission",
        max_digits=16,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        verbose_name = "sales data"
        verbose_name_plural = "sales data"
        ordering = ["-period", "account__name"]
        constraints = [
            models.UniqueConstraint(
                fields=["account", "period"],
                name="uniq_sales_data_account_period",
            ),
        ]
        indexes = [
            models.Index(fields=["period"], name="sales_data_period_idx"),
        ]

    def __str__(self):
        return f"{self.account} - {self.period}"

    @property
    def commission_rate(self) -> Decimal:
        """Commission as a percentage of purchases, 0 without revenue."""
        if self.total_purchases <= 0:
            return Decimal("0")
        return self.gross_commission / self.total_purchases * Decimal("100")
