"""Serializers for the incentive dashboard API v1."""
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from sales.models import Account, SalesData

User = get_user_model()


# ---------------------------------------------------------------------------
# User Serializers
# ---------------------------------------------------------------------------

class UserSerializer(serializers.ModelSerializer):
    """Read serializer for the user directory."""

    display_name = serializers.CharField(read_only=True)
    account_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'display_name',
            'role', 'is_active', 'account_count',
        ]
        read_only_fields = fields


class MeSerializer(serializers.ModelSerializer):
    """Serializer for the authenticated user's own profile (GET/PATCH).

    Includes ``is_privileged`` because this is the user's own data.
    """

    display_name = serializers.CharField(read_only=True)
    is_privileged = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'display_name',
            'role', 'is_active', 'is_privileged',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active']


# ---------------------------------------------------------------------------
# Custom JWT Serializer (includes user data in token response)
# ---------------------------------------------------------------------------

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Extends JWT token response to include user profile data."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = MeSerializer(self.user).data
        return data


# ---------------------------------------------------------------------------
# Sales Serializers
# ---------------------------------------------------------------------------

class AccountSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Account
        fields = [
            'id', 'user', 'user_name', 'name', 'code', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_user_name(self, obj):
        if obj.user_id is None:
            return None
        return obj.user.display_name


class SalesDataSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source='account.name', read_only=True)
    commission_rate = serializers.DecimalField(
        max_digits=20, decimal_places=4, read_only=True,
    )

    class Meta:
        model = SalesData
        fields = [
            'id', 'account', 'account_name', 'period',
            'total_purchases', 'gross_commission', 'commission_rate',
            'created_at',
        ]
        read_only_fields = fields
