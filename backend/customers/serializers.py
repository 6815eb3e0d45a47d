from rest_framework import serializers
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    customerName = serializers.CharField(source="customer_name", max_length=120)
    phoneNumber = serializers.CharField(source="phone_number", max_length=20, required=False, allow_blank=True)
    vehicleNumber = serializers.CharField(source="vehicle_number", max_length=20, required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "customerName",
            "email",
            "phoneNumber",
            "address",
            "city",
            "vehicleNumber",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "email": {"required": False, "allow_blank": True},
            "address": {"required": False, "allow_blank": True},
            "city": {"required": False, "allow_blank": True},
        }

    def to_internal_value(self, data):
        # The back-office sends the whole row back, ids and timestamps included
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if k not in ("id", "createdAt", "updatedAt")}
        return super().to_internal_value(data)
