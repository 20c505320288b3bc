"""Tests for the overview fan-out, filtering, sorting and summary (no database)."""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from incentives.directory import UserDirectory
from incentives.overview import compute_overview, filter_and_sort, summarize
from incentives.snapshots import AccountSnapshot, RuleSnapshot, SalesRow, TierSnapshot

ADMIN = SimpleNamespace(id="admin-0001", is_privileged=True)
ALICE = "aaaaaaaa-0000-0000-0000-000000000001"
BOB = "bbbbbbbb-0000-0000-0000-000000000002"
CAROL = "cccccccc-0000-0000-0000-000000000003"


@pytest.fixture
def rule():
    return RuleSnapshot(
        name="Standard",
        commission_rate_min=Decimal("0"),
        commission_rate_max=Decimal("100"),
        tiers=(
            TierSnapshot(revenue_threshold=Decimal("0"), incentive_rate=Decimal("5")),
            TierSnapshot(revenue_threshold=Decimal("1000000"), incentive_rate=Decimal("10")),
        ),
    )


@pytest.fixture
def accounts():
    return [
        AccountSnapshot(id="a1", user_id=ALICE),
        AccountSnapshot(id="b1", user_id=BOB),
        AccountSnapshot(id="a2", user_id=ALICE),
        AccountSnapshot(id="c1", user_id=CAROL),
        AccountSnapshot(id="orphan", user_id=None),
    ]


@pytest.fixture
def rows():
    return [
        SalesRow(account_id="a1", total_purchases=Decimal("400000"), gross_commission=Decimal("20000")),
        SalesRow(account_id="a2", total_purchases=Decimal("200000"), gross_commission=Decimal("10000")),
        SalesRow(account_id="b1", total_purchases=Decimal("1500000"), gross_commission=Decimal("150000")),
        SalesRow(account_id="orphan", total_purchases=Decimal("9000000"), gross_commission=Decimal("1")),
    ]


class TestComputeOverview:
    def test_privileged_viewer_gets_one_calculation_per_manager(self, accounts, rows, rule):
        calcs = compute_overview(ADMIN, accounts, rows, [rule])

        assert [c.user_id for c in calcs] == [BOB, ALICE, CAROL]
        alice = calcs[1]
        assert alice.managed_accounts_count == 2
        assert alice.total_revenue == Decimal("600000")
        assert alice.incentive_amount == Decimal("30000")

    def test_unassigned_accounts_are_skipped(self, accounts, rows, rule):
        calcs = compute_overview(ADMIN, accounts, rows, [rule])

        assert all(c.user_id for c in calcs)
        assert sum(c.total_revenue for c in calcs) == Decimal("2100000")

    def test_ties_keep_first_seen_order(self, rule):
        accounts = [
            AccountSnapshot(id="x", user_id=CAROL),
            AccountSnapshot(id="y", user_id=ALICE),
        ]

        calcs = compute_overview(ADMIN, accounts, [], [rule])

        assert [c.user_id for c in calcs] == [CAROL, ALICE]

    def test_regular_viewer_only_sees_themselves(self, accounts, rows, rule):
        viewer = SimpleNamespace(id=ALICE, is_privileged=False)

        calcs = compute_overview(viewer, accounts, rows, [rule])

        assert [c.user_id for c in calcs] == [ALICE]

    def test_regular_viewer_without_accounts_gets_nothing(self, accounts, rows, rule):
        viewer = SimpleNamespace(id="dddddddd-nobody", is_privileged=False)

        assert compute_overview(viewer, accounts, rows, [rule]) == []

    def test_no_active_rules_gives_empty_list(self, accounts, rows, rule):
        inactive = RuleSnapshot(
            name="Off",
            commission_rate_min=Decimal("0"),
            commission_rate_max=Decimal("100"),
            is_active=False,
        )

        assert compute_overview(ADMIN, accounts, rows, []) == []
        assert compute_overview(ADMIN, accounts, rows, [inactive]) == []

    def test_names_come_from_directory(self, accounts, rows, rule):
        directory = UserDirectory({ALICE: "Alice"})

        calcs = {c.user_id: c for c in compute_overview(ADMIN, accounts, rows, [rule], directory)}

        assert calcs[ALICE].user_name == "Alice"
        assert calcs[BOB].user_name == "User bbbbbbbb"


class TestFilterAndSort:
    @pytest.fixture
    def calcs(self, accounts, rows, rule):
        return compute_overview(ADMIN, accounts, rows, [rule])

    def test_earning_filter(self, calcs):
        result = filter_and_sort(calcs, filter_by="earning")

        assert {c.user_id for c in result} == {ALICE, BOB}

    def test_not_earning_filter(self, calcs):
        result = filter_and_sort(calcs, filter_by="not_earning")

        assert [c.user_id for c in result] == [CAROL]

    def test_sort_by_revenue_ascending(self, calcs):
        result = filter_and_sort(calcs, sort_by="revenue", order="asc")

        assert [c.user_id for c in result] == [CAROL, ALICE, BOB]

    def test_sort_by_rate_descending(self, calcs):
        result = filter_and_sort(calcs, sort_by="rate", order="desc")

        assert result[0].user_id == BOB

    def test_input_is_not_mutated(self, calcs):
        before = list(calcs)

        filter_and_sort(calcs, filter_by="earning", sort_by="revenue", order="asc")

        assert calcs == before

    def test_unknown_filter_is_rejected(self, calcs):
        with pytest.raises(ValueError):
            filter_and_sort(calcs, filter_by="everyone")

    @pytest.mark.parametrize("kwargs", [{"sort_by": "name"}, {"order": "up"}])
    def test_unknown_sort_or_order_is_rejected(self, calcs, kwargs):
        with pytest.raises(ValueError):
            filter_and_sort(calcs, **kwargs)


class TestSummarize:
    def test_totals(self, accounts, rows, rule):
        calcs = compute_overview(ADMIN, accounts, rows, [rule])

        summary = summarize(calcs, [rule])

        assert summary["total_revenue"] == Decimal("2100000")
        assert summary["total_commission"] == Decimal("180000")
        assert summary["total_incentives"] == Decimal("130000")
        assert summary["users_earning_incentives"] == 2
        assert summary["user_count"] == 3
        assert summary["active_rule_count"] == 1
        assert summary["primary_rule"] is rule

    def test_empty_overview(self):
        summary = summarize([], [])

        assert summary["total_incentives"] == Decimal("0")
        assert summary["primary_rule"] is None
