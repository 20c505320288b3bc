"""Immutable records handed to the incentive engine.

ORM rows are frozen into these dataclasses once per request so the engine
works over plain in-memory collections and never queries the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


def as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


@dataclass(frozen=True)
class TierSnapshot:
    revenue_threshold: Decimal
    incentive_rate: Decimal
    id: str | None = None
    name: str = ""

    @classmethod
    def from_model(cls, tier) -> "TierSnapshot":
        return cls(
            id=str(tier.id),
            name=tier.name,
            revenue_threshold=as_decimal(tier.revenue_threshold),
            incentive_rate=as_decimal(tier.incentive_rate),
        )


@dataclass(frozen=True)
class RuleSnapshot:
    name: str
    commission_rate_min: Decimal
    commission_rate_max: Decimal
    min_commission_threshold: Decimal = Decimal("0")
    base_revenue_threshold: Decimal = Decimal("0")
    is_active: bool = True
    tiers: tuple[TierSnapshot, ...] = field(default_factory=tuple)
    id: str | None = None
    description: str = ""

    @classmethod
    def from_model(cls, rule) -> "RuleSnapshot":
        """Freeze a rule; reads ``rule.tiers`` once (prefetch it for lists)."""
        return cls(
            id=str(rule.id),
            name=rule.name,
            description=rule.description,
            commission_rate_min=as_decimal(rule.commission_rate_min),
            commission_rate_max=as_decimal(rule.commission_rate_max),
            min_commission_threshold=as_decimal(rule.min_commission_threshold),
            base_revenue_threshold=as_decimal(rule.base_revenue_threshold),
            is_active=rule.is_active,
            tiers=tuple(TierSnapshot.from_model(t) for t in rule.tiers.all()),
        )


@dataclass(frozen=True)
class AccountSnapshot:
    id: str
    user_id: str | None = None
    name: str = ""

    @classmethod
    def from_model(cls, account) -> "AccountSnapshot":
        return cls(
            id=str(account.id),
            user_id=str(account.user_id) if account.user_id else None,
            name=account.name,
        )


@dataclass(frozen=True)
class SalesRow:
    account_id: str
    total_purchases: Decimal = Decimal("0")
    gross_commission: Decimal = Decimal("0")
    period: str = ""

    @classmethod
    def from_model(cls, row) -> "SalesRow":
        return cls(
            account_id=str(row.account_id),
            period=row.period,
            total_purchases=as_decimal(row.total_purchases),
            gross_commission=as_decimal(row.gross_commission),
        )
