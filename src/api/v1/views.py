"""ViewSets and API views for the incentive dashboard API v1."""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Count
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsPrivileged
from api.v1.serializers import (
    AccountSerializer,
    MeSerializer,
    SalesDataSerializer,
    UserSerializer,
)
from sales.models import Account, SalesData

logger = logging.getLogger("api")

User = get_user_model()


def _is_privileged(user) -> bool:
    return bool(getattr(user, "is_privileged", False) or user.is_superuser)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """User directory. Super administrators only."""

    queryset = User.objects.annotate(account_count=Count("sales_accounts")).order_by(
        "last_name", "first_name"
    )
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsPrivileged]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ['role', 'is_active']
    search_fields = ['email', 'first_name', 'last_name']
    ordering_fields = ['last_name', 'date_joined', 'role', 'is_active']


class MeView(APIView):
    """
    GET /api/v1/auth/me/ - return the authenticated user's profile.
    PATCH /api/v1/auth/me/ - update first_name, last_name.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = MeSerializer(request.user)
        return Response(serializer.data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


# ---------------------------------------------------------------------------
# Accounts & sales data
# ---------------------------------------------------------------------------

class AccountViewSet(viewsets.ReadOnlyModelViewSet):
    """Managed accounts. Super administrators see every account, others their own."""

    serializer_class = AccountSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ['user', 'is_active']
    search_fields = ['name', 'code']
    ordering_fields = ['name', 'created_at']

    def get_queryset(self):
        qs = Account.objects.select_related("user")
        if _is_privileged(self.request.user):
            return qs
        return qs.filter(user=self.request.user)


class SalesDataViewSet(viewsets.ReadOnlyModelViewSet):
    """Per-period sales rows, scoped like accounts."""

    serializer_class = SalesDataSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ['account', 'period']
    search_fields = ['account__name', 'account__code']
    ordering_fields = ['period', 'total_purchases', 'gross_commission']

    def get_queryset(self):
        qs = SalesData.objects.select_related("account")
        if _is_privileged(self.request.user):
            return qs
        return qs.filter(account__user=self.request.user)
