"""Incentive overview: per-user fan-out, filtering, sorting and totals."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from incentives.directory import UserDirectory
from incentives.engine import (
    UNBOUNDED_RATE_MAX,
    IncentiveCalculation,
    IncentiveCalculationEngine,
)

logger = logging.getLogger(__name__)

FILTER_ALL = "all"
FILTER_EARNING = "earning"
FILTER_NOT_EARNING = "not_earning"
FILTER_CHOICES = (FILTER_ALL, FILTER_EARNING, FILTER_NOT_EARNING)

SORT_FIELDS = {
    "incentive": "incentive_amount",
    "revenue": "total_revenue",
    "commission": "total_commission",
    "rate": "commission_rate",
}
SORT_CHOICES = tuple(SORT_FIELDS)
ORDER_ASC = "asc"
ORDER_DESC = "desc"
ORDER_CHOICES = (ORDER_ASC, ORDER_DESC)


def compute_overview(
    viewer,
    accounts: Sequence,
    sales_data: Sequence,
    rules: Iterable,
    directory: UserDirectory | None = None,
    unbounded_rate_max=UNBOUNDED_RATE_MAX,
) -> list[IncentiveCalculation]:
    """Compute the calculations the viewer is allowed to see.

    Privileged viewers get one calculation per account manager, in the order
    managers first appear among ``accounts``. Everybody else only gets their
    own. The list comes back sorted by incentive amount, highest first.
    """
    engine = IncentiveCalculationEngine(
        rules, directory=directory, unbounded_rate_max=unbounded_rate_max
    )
    if not engine.rules:
        logger.info("No active incentive rules, overview is empty")
        return []

    calculations: list[IncentiveCalculation] = []
    if getattr(viewer, "is_privileged", False):
        accounts_by_user: dict[str, list] = {}
        for account in accounts:
            if not account.user_id:
                continue
            accounts_by_user.setdefault(str(account.user_id), []).append(account)
        for user_id, user_accounts in accounts_by_user.items():
            calculation = engine.compute_for_user(user_id, user_accounts, sales_data)
            if calculation is not None:
                calculations.append(calculation)
    else:
        viewer_id = str(viewer.id)
        own_accounts = [a for a in accounts if a.user_id and str(a.user_id) == viewer_id]
        calculation = engine.compute_for_user(viewer_id, own_accounts, sales_data)
        if calculation is not None:
            calculations.append(calculation)

    calculations.sort(key=lambda c: c.incentive_amount, reverse=True)
    return calculations


def filter_and_sort(
    calculations: Iterable[IncentiveCalculation],
    filter_by: str = FILTER_ALL,
    sort_by: str = "incentive",
    order: str = ORDER_DESC,
) -> list[IncentiveCalculation]:
    """Return a new, filtered and sorted list; the input is left untouched."""
    if filter_by not in FILTER_CHOICES:
        raise ValueError(f"Unknown filter: {filter_by!r}")
    if order not in ORDER_CHOICES:
        raise ValueError(f"Unknown sort order: {order!r}")
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort_by!r}")
    attribute = SORT_FIELDS[sort_by]

    result = list(calculations)
    if filter_by == FILTER_EARNING:
        result = [c for c in result if c.incentive_amount > 0]
    elif filter_by == FILTER_NOT_EARNING:
        result = [c for c in result if c.incentive_amount == 0]

    result.sort(key=lambda c: getattr(c, attribute), reverse=order == ORDER_DESC)
    return result


def summarize(calculations: Sequence[IncentiveCalculation], rules: Iterable) -> dict:
    """Totals shown above the overview table."""
    active_rules = [rule for rule in rules if rule.is_active]
    return {
        "total_revenue": sum((c.total_revenue for c in calculations), Decimal("0")),
        "total_commission": sum((c.total_commission for c in calculations), Decimal("0")),
        "total_incentives": sum((c.incentive_amount for c in calculations), Decimal("0")),
        "users_earning_incentives": sum(1 for c in calculations if c.is_earning),
        "user_count": len(calculations),
        "active_rule_count": len(active_rules),
        "primary_rule": active_rules[0] if active_rules else None,
    }
