from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.models import User
from incentives.models import IncentiveRule, IncentiveTier
from library.models import Category, File
from sales.models import Account, SalesData


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def superadmin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.SUPERADMIN,
    )


@pytest.fixture
def sales_user(db):
    return User.objects.create_user(
        email="sales@test.com",
        password="testpass123",
        first_name="Sales",
        last_name="User",
        role=User.Role.SALES,
    )


@pytest.fixture
def other_sales_user(db):
    return User.objects.create_user(
        email="other.sales@test.com",
        password="testpass123",
        first_name="Other",
        last_name="Seller",
        role=User.Role.SALES,
    )


@pytest.fixture
def admin_client(api_client, superadmin_user):
    api_client.force_authenticate(user=superadmin_user)
    return api_client


@pytest.fixture
def sales_client(api_client, sales_user):
    api_client.force_authenticate(user=sales_user)
    return api_client


@pytest.fixture
def incentive_rule(db):
    """Rule for commission rates between 5% and 10%, three tiers."""
    rule = IncentiveRule.objects.create(
        name="Standard",
        commission_rate_min=Decimal("5"),
        commission_rate_max=Decimal("10"),
        min_commission_threshold=Decimal("0"),
        base_revenue_threshold=Decimal("0"),
        priority=10,
    )
    for name, threshold, rate in (
        ("Bronze", "0", "1"),
        ("Silver", "1000000", "2"),
        ("Gold", "5000000", "3"),
    ):
        IncentiveTier.objects.create(
            rule=rule,
            name=name,
            revenue_threshold=Decimal(threshold),
            incentive_rate=Decimal(rate),
        )
    return rule


@pytest.fixture
def sales_account(db, sales_user):
    return Account.objects.create(user=sales_user, name="Sales Account", code="ACC-001")


@pytest.fixture
def other_account(db, other_sales_user):
    return Account.objects.create(user=other_sales_user, name="Other Account", code="ACC-002")


@pytest.fixture
def sales_rows(sales_account, other_account):
    """Sales user: 3,000,000 revenue at 6%; other user: 500,000 at 7%."""
    return [
        SalesData.objects.create(
            account=sales_account,
            period="2026-01",
            total_purchases=Decimal("1000000"),
            gross_commission=Decimal("60000"),
        ),
        SalesData.objects.create(
            account=sales_account,
            period="2026-02",
            total_purchases=Decimal("2000000"),
            gross_commission=Decimal("120000"),
        ),
        SalesData.objects.create(
            account=other_account,
            period="2026-01",
            total_purchases=Decimal("500000"),
            gross_commission=Decimal("35000"),
        ),
    ]


@pytest.fixture
def file_category(db):
    return Category.objects.create(name="Reports", color="#2563eb")


@pytest.fixture
def library_file(db, file_category, sales_user):
    return File.objects.create(
        name="Q1 targets",
        category=file_category,
        spreadsheet_url="https://docs.example.com/spreadsheets/q1",
        created_by=sales_user,
    )
