from decimal import Decimal

import pytest

from incentives.models import IncentiveRule
from sales.models import Account

OVERVIEW_URL = "/api/v1/incentives/overview/"
ME_URL = "/api/v1/incentives/me/"
RULES_URL = "/api/v1/incentive-rules/"


def _unwrap_results(payload):
    if isinstance(payload, dict) and "results" in payload:
        return payload["results"]
    return payload


def _rule_payload(**overrides):
    payload = {
        "name": "Premium",
        "commission_rate_min": "10",
        "commission_rate_max": "100",
        "min_commission_threshold": "0",
        "base_revenue_threshold": "0",
        "priority": 5,
        "tiers": [
            {"name": "Entry", "revenue_threshold": "0", "incentive_rate": "2"},
            {"name": "Top", "revenue_threshold": "2000000", "incentive_rate": "4"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestIncentiveOverviewAPI:
    def test_requires_authentication(self, api_client):
        response = api_client.get(OVERVIEW_URL)

        assert response.status_code in (401, 403)

    def test_superadmin_overview(self, admin_client, sales_user, incentive_rule, sales_rows):
        response = admin_client.get(OVERVIEW_URL)

        assert response.status_code == 200
        payload = response.json()
        assert payload["total_count"] == 2
        assert payload["visible_count"] == 2
        top = payload["results"][0]
        assert top["user_id"] == str(sales_user.id)
        assert top["user_name"] == "Sales User"
        assert Decimal(top["incentive_amount"]) == Decimal("50000")
        assert top["applicable_rule"]["name"] == "Standard"
        assert top["current_tier"]["name"] == "Silver"
        assert top["next_tier"]["name"] == "Gold"

        summary = payload["summary"]
        assert Decimal(summary["total_incentives"]) == Decimal("55000")
        assert summary["users_earning_incentives"] == 2
        assert summary["currency"] == "IDR"
        assert summary["primary_rule"]["name"] == "Standard"

    def test_sales_user_overview_is_scoped(self, sales_client, sales_user, incentive_rule, sales_rows):
        response = sales_client.get(OVERVIEW_URL)

        assert response.status_code == 200
        payload = response.json()
        assert [r["user_id"] for r in payload["results"]] == [str(sales_user.id)]

    def test_filter_and_sort_query(self, admin_client, other_sales_user, incentive_rule, sales_rows):
        response = admin_client.get(
            OVERVIEW_URL, {"filter": "earning", "sort": "rate", "order": "desc"}
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["results"][0]["user_id"] == str(other_sales_user.id)

    def test_not_earning_filter_keeps_total_count(self, admin_client, incentive_rule, sales_rows):
        response = admin_client.get(OVERVIEW_URL, {"filter": "not_earning"})

        payload = response.json()
        assert payload["total_count"] == 2
        assert payload["visible_count"] == 0
        assert payload["results"] == []

    @pytest.mark.parametrize(
        "params",
        [{"filter": "everyone"}, {"sort": "name"}, {"order": "up"}, {"period": "2026-13"}],
    )
    def test_invalid_query_is_rejected(self, admin_client, params):
        response = admin_client.get(OVERVIEW_URL, params)

        assert response.status_code == 400

    def test_no_rule_match_is_reported_with_null_rule(self, admin_client, sales_user, sales_account):
        IncentiveRule.objects.create(
            name="High performers",
            commission_rate_min=Decimal("50"),
            commission_rate_max=Decimal("60"),
        )
        sales_account.sales_data.create(
            period="2026-01",
            total_purchases=Decimal("100000"),
            gross_commission=Decimal("7000"),
        )

        response = admin_client.get(OVERVIEW_URL)

        result = response.json()["results"][0]
        assert result["applicable_rule"] is None
        assert Decimal(result["incentive_amount"]) == Decimal("0")
        assert Decimal(result["commission_rate"]) == Decimal("7")

    def test_responses_are_not_cached(self, admin_client):
        response = admin_client.get(OVERVIEW_URL)

        assert "no-store" in response["Cache-Control"]


@pytest.mark.django_db
class TestMyIncentiveAPI:
    def test_returns_own_calculation(self, sales_client, sales_user, incentive_rule, sales_rows):
        response = sales_client.get(ME_URL)

        assert response.status_code == 200
        assert response.json()["calculation"]["user_id"] == str(sales_user.id)

    def test_superadmin_without_accounts_gets_null(self, admin_client, incentive_rule, sales_rows):
        response = admin_client.get(ME_URL)

        assert response.status_code == 200
        assert response.json()["calculation"] is None

    def test_superadmin_only_gets_their_own_accounts(
        self, admin_client, superadmin_user, incentive_rule, sales_rows
    ):
        own = Account.objects.create(name="House account", user=superadmin_user)
        own.sales_data.create(
            period="2026-01",
            total_purchases=Decimal("100000"),
            gross_commission=Decimal("6000"),
        )

        response = admin_client.get(ME_URL)

        calculation = response.json()["calculation"]
        assert calculation["user_id"] == str(superadmin_user.id)
        assert Decimal(calculation["total_revenue"]) == Decimal("100000")

    def test_period_parameter(self, sales_client, incentive_rule, sales_rows):
        response = sales_client.get(ME_URL, {"period": "2026-01"})

        payload = response.json()
        assert payload["period"] == "2026-01"
        assert Decimal(payload["calculation"]["incentive_amount"]) == Decimal("10000")


@pytest.mark.django_db
class TestIncentiveRuleAPI:
    def test_authenticated_users_can_list_rules(self, sales_client, incentive_rule):
        response = sales_client.get(RULES_URL)

        assert response.status_code == 200
        rules = _unwrap_results(response.json())
        assert [r["name"] for r in rules] == ["Standard"]
        assert [t["name"] for t in rules[0]["tiers"]] == ["Bronze", "Silver", "Gold"]

    def test_sales_user_cannot_create_rules(self, sales_client):
        response = sales_client.post(RULES_URL, _rule_payload(), format="json")

        assert response.status_code == 403

    def test_superadmin_creates_rule_with_tiers(self, admin_client):
        response = admin_client.post(RULES_URL, _rule_payload(), format="json")

        assert response.status_code == 201, response.json()
        rule = IncentiveRule.objects.get(name="Premium")
        assert rule.tiers.count() == 2
        assert response.json()["tiers"][1]["name"] == "Top"

    def test_duplicate_tier_thresholds_are_rejected(self, admin_client):
        payload = _rule_payload(
            tiers=[
                {"revenue_threshold": "1000", "incentive_rate": "2"},
                {"revenue_threshold": "1000", "incentive_rate": "3"},
            ]
        )

        response = admin_client.post(RULES_URL, payload, format="json")

        assert response.status_code == 400
        assert "tiers" in response.json()

    def test_inverted_rate_band_is_rejected(self, admin_client):
        payload = _rule_payload(commission_rate_min="20", commission_rate_max="10")

        response = admin_client.post(RULES_URL, payload, format="json")

        assert response.status_code == 400
        assert "commission_rate_max" in response.json()

    def test_rate_above_one_hundred_is_rejected(self, admin_client):
        payload = _rule_payload(commission_rate_max="120")

        response = admin_client.post(RULES_URL, payload, format="json")

        assert response.status_code == 400

    def test_put_replaces_tiers(self, admin_client, incentive_rule):
        payload = _rule_payload(name="Standard v2")

        response = admin_client.put(f"{RULES_URL}{incentive_rule.id}/", payload, format="json")

        assert response.status_code == 200, response.json()
        incentive_rule.refresh_from_db()
        assert incentive_rule.name == "Standard v2"
        assert list(incentive_rule.tiers.values_list("name", flat=True)) == ["Entry", "Top"]

    def test_patch_without_tiers_keeps_them(self, admin_client, incentive_rule):
        response = admin_client.patch(
            f"{RULES_URL}{incentive_rule.id}/", {"is_active": False}, format="json"
        )

        assert response.status_code == 200
        incentive_rule.refresh_from_db()
        assert incentive_rule.is_active is False
        assert incentive_rule.tiers.count() == 3

    def test_patch_checks_band_against_stored_values(self, admin_client, incentive_rule):
        response = admin_client.patch(
            f"{RULES_URL}{incentive_rule.id}/", {"commission_rate_min": "50"}, format="json"
        )

        assert response.status_code == 400

    def test_superadmin_deletes_rule(self, admin_client, incentive_rule):
        response = admin_client.delete(f"{RULES_URL}{incentive_rule.id}/")

        assert response.status_code == 204
        assert not IncentiveRule.objects.exists()
