"""Models for tiered incentive rules."""
from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import TimeStampedModel

PERCENT_VALIDATORS = [
    MinValueValidator(Decimal("0")),
    MaxValueValidator(Decimal("100")),
]


class IncentiveRule(TimeStampedModel):
    """Eligibility band on the aggregate commission rate, holding revenue tiers.

    Active rules are evaluated in (priority, created_at) order and the first
    band containing a user's commission rate wins.
    """

    name = models.CharField("name", max_length=120)
    description = models.TextField("description", blank=True)
    commission_rate_min = models.DecimalField(
        "minimum commission rate (%)",
        max_digits=7,
        decimal_places=4,
        default=Decimal("0"),
        validators=PERCENT_VALIDATORS,
    )
    commission_rate_max = models.DecimalField(
        "maximum commission rate (%)",
        max_digits=7,
        decimal_places=4,
        default=Decimal("100"),
        validators=PERCENT_VALIDATORS,
        help_text="100 leaves the band open-ended.",
    )
    min_commission_threshold = models.DecimalField(
        "minimum commission per account",
        max_digits=16,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    base_revenue_threshold = models.DecimalField(
        "base revenue threshold",
        max_digits=16,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_active = models.BooleanField("active", default=True, db_index=True)
    priority = models.PositiveSmallIntegerField("priority", default=0)

    class Meta:
        verbose_name = "incentive rule"
        verbose_name_plural = "incentive rules"
        ordering = ["priority", "created_at"]

    def __str__(self) -> str:
        return f"{self.name} ({self.commission_rate_min}%-{self.commission_rate_max}%)"

    def clean(self) -> None:
        if (
            self.commission_rate_min is not None
            and self.commission_rate_max is not None
            and self.commission_rate_min > self.commission_rate_max
        ):
            raise ValidationError(
                {"commission_rate_max": "The maximum rate must not be below the minimum rate."}
            )


class IncentiveTier(TimeStampedModel):
    """Revenue threshold paired with the incentive rate paid on the band above it."""

    rule = models.ForeignKey(
        IncentiveRule,
        on_delete=models.CASCADE,
        related_name="tiers",
        verbose_name="rule",
    )
    name = models.CharField("name", max_length=60, blank=True)
    revenue_threshold = models.DecimalField(
        "revenue threshold",
        max_digits=16,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    incentive_rate = models.DecimalField(
        "incentive rate (%)",
        max_digits=7,
        decimal_places=4,
        validators=PERCENT_VALIDATORS,
    )

    class Meta:
        verbose_name = "tier"
        verbose_name_plural = "tiers"
        ordering = ["revenue_threshold"]

    def __str__(self) -> str:
        label = self.name or f"{self.revenue_threshold}"
        return f"{label} @ {self.incentive_rate}% ({self.rule.name})"
