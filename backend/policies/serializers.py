# backend/policies/serializers.py
from rest_framework import serializers

from customers.models import Customer
from customers.serializers import CustomerSerializer
from .lifecycle import compute_expiry_date, days_until_expiry, derive_status
from .models import Policy


class PolicySerializer(serializers.ModelSerializer):
    planId = serializers.CharField(source="plan_id", required=False, allow_blank=True)
    policyNumber = serializers.CharField(source="policy_number", read_only=True)
    policyType = serializers.CharField(source="policy_type", max_length=80)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    originalPrice = serializers.DecimalField(
        source="original_price",
        max_digits=12,
        decimal_places=2,
        coerce_to_string=False,
        required=False,
        allow_null=True,
    )
    startDate = serializers.DateField(source="start_date")
    expiryDate = serializers.DateField(source="expiry_date", required=False)
    status = serializers.SerializerMethodField()
    daysToExpiry = serializers.SerializerMethodField()
    customer = CustomerSerializer(read_only=True)
    customerId = serializers.PrimaryKeyRelatedField(
        source="customer",
        queryset=Customer.objects.all(),
        required=False,
        allow_null=True,
    )
    paymentId = serializers.CharField(source="payment_id", read_only=True)
    orderId = serializers.CharField(source="order_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Policy
        fields = [
            "id",
            "planId",
            "policyNumber",
            "policyType",
            "amount",
            "originalPrice",
            "duration",
            "startDate",
            "expiryDate",
            "status",
            "daysToExpiry",
            "customer",
            "customerId",
            "paymentId",
            "orderId",
            "createdAt",
            "updatedAt",
        ]

    def get_status(self, obj):
        return derive_status(obj.expiry_date)

    def get_daysToExpiry(self, obj):
        return days_until_expiry(obj.expiry_date)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        return value

    def to_internal_value(self, data):
        # Rows come back from the table with their read-only columns attached
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if k not in ("id", "customer", "status", "daysToExpiry")}
        return super().to_internal_value(data)

    def update(self, instance, validated_data):
        timeline_changed = any(
            key in validated_data and validated_data[key] != getattr(instance, key)
            for key in ("start_date", "duration")
        )
        # full-row saves send the stored expiry back unchanged
        expiry_overridden = validated_data.get("expiry_date", instance.expiry_date) != instance.expiry_date
        if timeline_changed and not expiry_overridden:
            validated_data["expiry_date"] = compute_expiry_date(
                validated_data.get("start_date", instance.start_date),
                validated_data.get("duration", instance.duration),
            )
        return super().update(instance, validated_data)
