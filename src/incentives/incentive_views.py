"""API views for the incentives module."""
from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import filters, permissions, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsPrivilegedOrReadOnly
from incentives.incentive_serializers import (
    IncentiveCalculationSerializer,
    IncentiveOverviewQuerySerializer,
    IncentiveRuleSerializer,
    IncentiveRuleWriteSerializer,
    IncentiveSummarySerializer,
)
from incentives.models import IncentiveRule
from incentives.engine import calculate_user_incentive
from incentives.services import build_incentive_overview, load_overview_inputs, load_user_directory

logger = logging.getLogger("incentives")


# ────────────────────────────────────────────────────────────
# Incentive Rules
# ────────────────────────────────────────────────────────────

class IncentiveRuleViewSet(viewsets.ModelViewSet):
    """CRUD for incentive rules. Writes are limited to super administrators."""
    permission_classes = [permissions.IsAuthenticated, IsPrivilegedOrReadOnly]
    pagination_class = StandardResultsSetPagination
    filter_backends = [filters.OrderingFilter, filters.SearchFilter]
    ordering_fields = ["priority", "created_at", "name"]
    search_fields = ["name", "description"]
    queryset = IncentiveRule.objects.prefetch_related("tiers").order_by("priority", "created_at")

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return IncentiveRuleWriteSerializer
        return IncentiveRuleSerializer

    def perform_create(self, serializer):
        rule = serializer.save()
        logger.info("Incentive rule created id=%s by user=%s", rule.id, self.request.user.id)

    def perform_update(self, serializer):
        rule = serializer.save()
        logger.info("Incentive rule updated id=%s by user=%s", rule.id, self.request.user.id)

    def perform_destroy(self, instance):
        logger.info("Incentive rule deleted id=%s by user=%s", instance.id, self.request.user.id)
        instance.delete()


# ────────────────────────────────────────────────────────────
# Overview
# ────────────────────────────────────────────────────────────

class IncentiveOverviewView(APIView):
    """
    GET /api/v1/incentives/overview/?period=YYYY-MM&filter=all&sort=incentive&order=desc

    Super administrators see every account manager; other users only themselves.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = IncentiveOverviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        overview = build_incentive_overview(
            request.user,
            period=params.get("period") or None,
            filter_by=params["filter"],
            sort_by=params["sort"],
            order=params["order"],
        )
        summary = IncentiveSummarySerializer(
            overview["summary"],
            context={"currency": settings.CURRENCY},
        ).data
        return Response({
            "summary": summary,
            "total_count": len(overview["calculations"]),
            "visible_count": len(overview["visible"]),
            "results": IncentiveCalculationSerializer(overview["visible"], many=True).data,
        })


class MyIncentiveView(APIView):
    """
    GET /api/v1/incentives/me/?period=YYYY-MM
    The caller's own calculation; ``calculation`` is null when they manage no
    account or no rule is active.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = IncentiveOverviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        period = query.validated_data.get("period") or None

        accounts, sales_rows, rules = load_overview_inputs(
            request.user, period=period, own_only=True
        )
        calculation = calculate_user_incentive(
            request.user.id,
            accounts,
            sales_rows,
            rules,
            directory=load_user_directory(request.user),
            unbounded_rate_max=getattr(settings, "INCENTIVES_UNBOUNDED_RATE_MAX", 100),
        )
        return Response({
            "period": period,
            "calculation": (
                IncentiveCalculationSerializer(calculation).data if calculation is not None else None
            ),
        })
