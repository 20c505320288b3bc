"""Tiered incentive calculation engine.

Core design principles:
- Pure computation over in-memory records (see ``incentives.snapshots``);
  nothing here touches the database.
- Rule selection is first-match over the active rules in their given order.
- Tiers pay graduated (marginal) rates: each reached tier pays its rate on
  the revenue band up to the next tier's threshold.
- The tier sweep stops at the first tier the revenue does not reach.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from incentives.directory import UserDirectory
from incentives.snapshots import RuleSnapshot, TierSnapshot, as_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# A rule whose max rate equals this value has no upper bound.
UNBOUNDED_RATE_MAX = HUNDRED


@dataclass
class IncentiveCalculation:
    """Per-user result; derived on every request and never persisted."""

    user_id: str
    user_name: str
    total_revenue: Decimal
    total_commission: Decimal
    commission_rate: Decimal
    applicable_rule: RuleSnapshot | None
    current_tier: TierSnapshot | None
    next_tier: TierSnapshot | None
    incentive_amount: Decimal
    progress_percentage: Decimal
    remaining_to_next_tier: Decimal
    managed_accounts_count: int
    qualifying_revenue: Decimal = ZERO
    qualifying_accounts_count: int = 0

    @property
    def is_earning(self) -> bool:
        return self.incentive_amount > 0


class IncentiveCalculationEngine:
    """Compute incentive calculations against a fixed set of rules."""

    def __init__(
        self,
        rules: Iterable,
        directory: UserDirectory | None = None,
        unbounded_rate_max: Decimal = UNBOUNDED_RATE_MAX,
    ) -> None:
        self.rules = [rule for rule in rules if rule.is_active]
        self.directory = directory if directory is not None else UserDirectory.empty()
        self.unbounded_rate_max = as_decimal(unbounded_rate_max)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute_for_user(
        self,
        user_id,
        accounts: Iterable,
        sales_data: Iterable,
    ) -> IncentiveCalculation | None:
        """
        Compute the incentive of one user over their managed accounts.

        Returns None when the user manages no account or no rule is active.
        A commission rate outside every rule band is a valid outcome: the
        calculation comes back with ``applicable_rule=None`` and no incentive.
        """
        accounts = list(accounts)
        if not accounts or not self.rules:
            return None

        user_id = str(user_id)
        account_ids = {str(account.id) for account in accounts}
        user_rows = [row for row in sales_data if str(row.account_id) in account_ids]

        total_revenue = sum((as_decimal(r.total_purchases) for r in user_rows), ZERO)
        total_commission = sum((as_decimal(r.gross_commission) for r in user_rows), ZERO)
        commission_rate = (
            total_commission / total_revenue * HUNDRED if total_revenue > 0 else ZERO
        )

        rule = self._select_rule(commission_rate)
        if rule is None:
            logger.debug(
                "No incentive rule covers user=%s commission_rate=%s",
                user_id,
                commission_rate,
            )
            return IncentiveCalculation(
                user_id=user_id,
                user_name=self.directory.resolve(user_id),
                total_revenue=total_revenue,
                total_commission=total_commission,
                commission_rate=commission_rate,
                applicable_rule=None,
                current_tier=None,
                next_tier=None,
                incentive_amount=ZERO,
                progress_percentage=ZERO,
                remaining_to_next_tier=ZERO,
                managed_accounts_count=len(accounts),
            )

        qualifying_ids = self._qualifying_account_ids(accounts, user_rows, rule)
        qualifying_revenue = sum(
            (as_decimal(r.total_purchases) for r in user_rows if str(r.account_id) in qualifying_ids),
            ZERO,
        )

        incentive, current_tier, next_tier = self._accrue_tiers(rule.tiers, qualifying_revenue)
        progress, remaining = self._progress(rule, current_tier, next_tier, qualifying_revenue)

        return IncentiveCalculation(
            user_id=user_id,
            user_name=self.directory.resolve(user_id),
            total_revenue=total_revenue,
            total_commission=total_commission,
            commission_rate=commission_rate,
            applicable_rule=rule,
            current_tier=current_tier,
            next_tier=next_tier,
            incentive_amount=incentive,
            progress_percentage=progress,
            remaining_to_next_tier=remaining,
            managed_accounts_count=len(accounts),
            qualifying_revenue=qualifying_revenue,
            qualifying_accounts_count=len(qualifying_ids),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _select_rule(self, commission_rate: Decimal):
        """Return the first rule whose band contains ``commission_rate``."""
        for rule in self.rules:
            rate_min = as_decimal(rule.commission_rate_min)
            rate_max = as_decimal(rule.commission_rate_max)
            if commission_rate < rate_min:
                continue
            if rate_max == self.unbounded_rate_max or commission_rate <= rate_max:
                return rule
        return None

    def _qualifying_account_ids(self, accounts: Sequence, rows: Sequence, rule) -> set[str]:
        threshold = as_decimal(rule.min_commission_threshold)
        commission_by_account: dict[str, Decimal] = {}
        for row in rows:
            key = str(row.account_id)
            commission_by_account[key] = commission_by_account.get(key, ZERO) + as_decimal(
                row.gross_commission
            )

        qualifying = set()
        for account in accounts:
            key = str(account.id)
            if commission_by_account.get(key, ZERO) >= threshold:
                qualifying.add(key)
        return qualifying

    def _accrue_tiers(self, tiers: Iterable, qualifying_revenue: Decimal):
        """Walk tiers upwards, paying each reached tier on its own band.

        Stops at the first tier above ``qualifying_revenue``; that tier is
        returned as the next tier and later tiers are never looked at.
        """
        ordered = sorted(tiers, key=lambda t: as_decimal(t.revenue_threshold))
        incentive = ZERO
        current_tier = None
        next_tier = None

        for index, tier in enumerate(ordered):
            threshold = as_decimal(tier.revenue_threshold)
            if qualifying_revenue < threshold:
                next_tier = tier
                break

            current_tier = tier
            if index + 1 < len(ordered):
                upper = as_decimal(ordered[index + 1].revenue_threshold)
            else:
                upper = qualifying_revenue
            band = min(qualifying_revenue, upper) - threshold
            incentive += band * as_decimal(tier.incentive_rate) / HUNDRED

        return incentive, current_tier, next_tier

    def _progress(self, rule, current_tier, next_tier, qualifying_revenue: Decimal):
        if next_tier is None:
            # Top tier reached; a rule without tiers reports no progress.
            if current_tier is not None:
                return HUNDRED, ZERO
            return ZERO, ZERO

        if current_tier is not None:
            current_threshold = as_decimal(current_tier.revenue_threshold)
        else:
            current_threshold = as_decimal(rule.base_revenue_threshold)
        next_threshold = as_decimal(next_tier.revenue_threshold)

        span = next_threshold - current_threshold
        if span > 0:
            progress = (qualifying_revenue - current_threshold) / span * HUNDRED
            progress = max(ZERO, min(HUNDRED, progress))
        else:
            progress = ZERO
        remaining = max(next_threshold - qualifying_revenue, ZERO)
        return progress, remaining


def calculate_user_incentive(
    user_id,
    accounts: Iterable,
    sales_data: Iterable,
    rules: Iterable,
    directory: UserDirectory | None = None,
    unbounded_rate_max: Decimal = UNBOUNDED_RATE_MAX,
) -> IncentiveCalculation | None:
    """Functional shortcut around :class:`IncentiveCalculationEngine`."""
    engine = IncentiveCalculationEngine(
        rules, directory=directory, unbounded_rate_max=unbounded_rate_max
    )
    return engine.compute_for_user(user_id, accounts, sales_data)
