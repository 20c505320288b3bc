"""Service layer for incentive overviews.

Reads the ORM, freezes rows into snapshots and hands them to the pure
calculation code in ``incentives.engine`` / ``incentives.overview``.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, transaction

from incentives.directory import UserDirectory
from incentives.overview import (
    FILTER_ALL,
    ORDER_DESC,
    compute_overview,
    filter_and_sort,
    summarize,
)
from incentives.snapshots import AccountSnapshot, RuleSnapshot, SalesRow

logger = logging.getLogger("incentives")

DIRECTORY_CACHE_KEY = "incentives:user-directory"


def load_user_directory(viewer) -> UserDirectory:
    """Build the display-name directory visible to ``viewer``.

    Privileged viewers load every user record, deactivated ones included
    (cached). Regular viewers only ever resolve their own name. A database
    failure degrades to the viewer alone so other users fall back to
    truncated ids.
    """
    if not getattr(viewer, "is_privileged", False):
        return UserDirectory.from_users([], viewer=viewer)

    names = cache.get(DIRECTORY_CACHE_KEY)
    if names is not None:
        return UserDirectory(names, viewer_id=str(viewer.id), viewer_name=viewer.display_name)

    from accounts.models import User

    try:
        # Savepoint keeps the request transaction usable after a failure.
        with transaction.atomic():
            users = list(User.objects.only("id", "email", "first_name", "last_name"))
    except DatabaseError:
        logger.exception("Failed to load the user directory for viewer=%s", viewer.id)
        return UserDirectory.from_users([], viewer=viewer)

    directory = UserDirectory.from_users(users, viewer=viewer)
    cache.set(
        DIRECTORY_CACHE_KEY,
        directory.names,
        timeout=getattr(settings, "INCENTIVES_DIRECTORY_CACHE_SECONDS", 300),
    )
    return directory


def invalidate_user_directory() -> None:
    cache.delete(DIRECTORY_CACHE_KEY)


def load_overview_inputs(viewer, period: str | None = None, own_only: bool = False):
    """Return ``(accounts, sales_rows, rules)`` snapshots visible to ``viewer``.

    ``own_only`` limits privileged viewers to their own accounts too.
    """
    from incentives.models import IncentiveRule
    from sales.models import Account, SalesData

    accounts_qs = Account.objects.all()
    if own_only or not getattr(viewer, "is_privileged", False):
        accounts_qs = accounts_qs.filter(user=viewer)
    accounts = [AccountSnapshot.from_model(a) for a in accounts_qs.order_by("created_at")]

    sales_qs = SalesData.objects.filter(account_id__in=[a.id for a in accounts])
    if period:
        sales_qs = sales_qs.filter(period=period)
    sales_rows = [SalesRow.from_model(row) for row in sales_qs]

    rules = [
        RuleSnapshot.from_model(rule)
        for rule in IncentiveRule.objects.filter(is_active=True)
        .prefetch_related("tiers")
        .order_by("priority", "created_at")
    ]
    return accounts, sales_rows, rules


def build_incentive_overview(
    viewer,
    period: str | None = None,
    filter_by: str = FILTER_ALL,
    sort_by: str = "incentive",
    order: str = ORDER_DESC,
) -> dict:
    """Compute the overview for ``viewer``.

    ``calculations`` holds every visible user (incentive order); ``visible``
    is the filtered and sorted view of it; ``summary`` totals the former.
    """
    accounts, sales_rows, rules = load_overview_inputs(viewer, period=period)
    directory = load_user_directory(viewer)

    calculations = compute_overview(
        viewer,
        accounts,
        sales_rows,
        rules,
        directory=directory,
        unbounded_rate_max=getattr(settings, "INCENTIVES_UNBOUNDED_RATE_MAX", 100),
    )
    visible = filter_and_sort(calculations, filter_by=filter_by, sort_by=sort_by, order=order)

    logger.info(
        "Incentive overview built viewer=%s period=%s users=%d visible=%d",
        viewer.id,
        period or "all",
        len(calculations),
        len(visible),
    )
    return {
        "calculations": calculations,
        "visible": visible,
        "summary": summarize(calculations, rules),
    }
