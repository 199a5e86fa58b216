"""Customer serializers."""

from rest_framework import serializers
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    available_credit = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model  = Customer
        fields = [
            "id", "name", "phone", "email", "address", "category",
            "price_tier", "price_per_bag", "credit_limit", "current_balance",
            "available_credit", "is_blocked", "notes", "created_at",
        ]
        # Balance only moves through dispatch, payments and credit notes
        read_only_fields = ["id", "current_balance", "is_blocked", "created_at"]


class CustomerBalanceSerializer(serializers.Serializer):
    customer_id      = serializers.UUIDField()
    current_balance  = serializers.DecimalField(max_digits=14, decimal_places=2)
    credit_limit     = serializers.DecimalField(max_digits=14, decimal_places=2)
    available_credit = serializers.DecimalField(max_digits=14, decimal_places=2)
