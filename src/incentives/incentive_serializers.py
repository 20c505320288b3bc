"""DRF Serializers for the incentives module."""
from __future__ import annotations

from django.db import transaction
from rest_framework import serializers

from incentives.models import IncentiveRule, IncentiveTier
from incentives.overview import FILTER_ALL, FILTER_CHOICES, ORDER_CHOICES, ORDER_DESC, SORT_CHOICES
from sales.models import period_validator

MONEY = {"max_digits": 20, "decimal_places": 2}
RATE = {"max_digits": 20, "decimal_places": 4}


# ────────────────────────────────────────────────────────────
# Tiers & Rules
# ────────────────────────────────────────────────────────────

class IncentiveTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = IncentiveTier
        fields = ["id", "name", "revenue_threshold", "incentive_rate"]
        read_only_fields = ["id"]


class IncentiveRuleSerializer(serializers.ModelSerializer):
    tiers = IncentiveTierSerializer(many=True, read_only=True)

    class Meta:
        model = IncentiveRule
        fields = [
            "id", "name", "description", "commission_rate_min", "commission_rate_max",
            "min_commission_threshold", "base_revenue_threshold", "is_active",
            "priority", "tiers", "created_at", "updated_at",
        ]
        read_only_fields = fields


class IncentiveRuleWriteSerializer(serializers.ModelSerializer):
    """Used for create/update. Tiers are written inline and replaced as a whole."""
    tiers = IncentiveTierSerializer(many=True, required=False)

    class Meta:
        model = IncentiveRule
        fields = [
            "id", "name", "description", "commission_rate_min", "commission_rate_max",
            "min_commission_threshold", "base_revenue_threshold", "is_active",
            "priority", "tiers",
        ]
        read_only_fields = ["id"]

    def validate_tiers(self, tiers):
        thresholds = [t["revenue_threshold"] for t in tiers]
        if len(thresholds) != len(set(thresholds)):
            raise serializers.ValidationError("Tier revenue thresholds must be unique.")
        return sorted(tiers, key=lambda t: t["revenue_threshold"])

    def validate(self, attrs):
        instance = self.instance
        rate_min = attrs.get(
            "commission_rate_min",
            instance.commission_rate_min if instance is not None else None,
        )
        rate_max = attrs.get(
            "commission_rate_max",
            instance.commission_rate_max if instance is not None else None,
        )
        if rate_min is not None and rate_max is not None and rate_min > rate_max:
            raise serializers.ValidationError(
                {"commission_rate_max": "Must be greater than or equal to the minimum rate."}
            )
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        tiers_data = validated_data.pop("tiers", [])
        rule = IncentiveRule.objects.create(**validated_data)
        for t in tiers_data:
            IncentiveTier.objects.create(rule=rule, **t)
        return rule

    @transaction.atomic
    def update(self, instance, validated_data):
        # tiers may be absent in a PATCH request; existing tiers are kept then.
        tiers_data = validated_data.pop("tiers", None)
        instance = super().update(instance, validated_data)
        if tiers_data is not None:
            instance.tiers.all().delete()
            for t in tiers_data:
                IncentiveTier.objects.create(rule=instance, **t)
        return instance

    def to_representation(self, instance):
        return IncentiveRuleSerializer(instance, context=self.context).data


# ────────────────────────────────────────────────────────────
# Calculations (derived, read only)
# ────────────────────────────────────────────────────────────

class TierSnapshotSerializer(serializers.Serializer):
    id = serializers.CharField(allow_null=True)
    name = serializers.CharField()
    revenue_threshold = serializers.DecimalField(**MONEY)
    incentive_rate = serializers.DecimalField(**RATE)


class RuleSnapshotSerializer(serializers.Serializer):
    id = serializers.CharField(allow_null=True)
    name = serializers.CharField()
    description = serializers.CharField()
    commission_rate_min = serializers.DecimalField(**RATE)
    commission_rate_max = serializers.DecimalField(**RATE)
    min_commission_threshold = serializers.DecimalField(**MONEY)
    base_revenue_threshold = serializers.DecimalField(**MONEY)
    is_active = serializers.BooleanField()
    tiers = TierSnapshotSerializer(many=True)


class IncentiveCalculationSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    user_name = serializers.CharField()
    total_revenue = serializers.DecimalField(**MONEY)
    total_commission = serializers.DecimalField(**MONEY)
    commission_rate = serializers.DecimalField(**RATE)
    applicable_rule = RuleSnapshotSerializer(allow_null=True)
    current_tier = TierSnapshotSerializer(allow_null=True)
    next_tier = TierSnapshotSerializer(allow_null=True)
    incentive_amount = serializers.DecimalField(**MONEY)
    progress_percentage = serializers.DecimalField(**MONEY)
    remaining_to_next_tier = serializers.DecimalField(**MONEY)
    managed_accounts_count = serializers.IntegerField()
    qualifying_revenue = serializers.DecimalField(**MONEY)
    qualifying_accounts_count = serializers.IntegerField()
    is_earning = serializers.BooleanField()


class IncentiveSummarySerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(**MONEY)
    total_commission = serializers.DecimalField(**MONEY)
    total_incentives = serializers.DecimalField(**MONEY)
    users_earning_incentives = serializers.IntegerField()
    user_count = serializers.IntegerField()
    active_rule_count = serializers.IntegerField()
    primary_rule = RuleSnapshotSerializer(allow_null=True)
    currency = serializers.SerializerMethodField()

    def get_currency(self, summary) -> str:
        return self.context.get("currency", "")


class IncentiveOverviewQuerySerializer(serializers.Serializer):
    period = serializers.CharField(required=False, allow_blank=True, validators=[period_validator])
    filter = serializers.ChoiceField(choices=FILTER_CHOICES, default=FILTER_ALL)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, default="incentive")
    order = serializers.ChoiceField(choices=ORDER_CHOICES, default=ORDER_DESC)
