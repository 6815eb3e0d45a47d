from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from rest_framework import serializers

# values the storefront sends when the visitor left the email empty
EMAIL_PLACEHOLDERS = {"na", "n/a", "undefined", "null", "none"}


class PolicyDataSerializer(serializers.Serializer):
    # `id` is the catalog plan id picked in the storefront
    id = serializers.CharField(required=False, allow_blank=True, max_length=40)
    policyType = serializers.CharField(source="policy_type", required=False, allow_blank=True, max_length=80)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    originalPrice = serializers.DecimalField(
        source="original_price",
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
    )
    duration = serializers.CharField(required=False, allow_blank=True, max_length=20)
    startDate = serializers.DateField(source="start_date", required=False, allow_null=True)


class CustomerDataSerializer(serializers.Serializer):
    customerName = serializers.CharField(source="customer_name", max_length=120)
    email = serializers.CharField(required=False, allow_blank=True, max_length=254, default="")
    phoneNumber = serializers.CharField(source="phone_number", max_length=20)
    address = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, max_length=80, default="")
    vehicleNumber = serializers.CharField(source="vehicle_number", max_length=20)

    def validate_customerName(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Customer name is required.")
        return value

    def validate_email(self, value):
        value = value.strip()
        if not value or value.lower() in EMAIL_PLACEHOLDERS:
            return ""
        try:
            validate_email(value)
        except DjangoValidationError:
            raise serializers.ValidationError("Enter a valid email address.")
        return value

    def validate_phoneNumber(self, value):
        digits = "".join(ch for ch in value if ch.isdigit())
        if len(digits) < 10:
            raise serializers.ValidationError("Enter a valid phone number.")
        return value.strip()

    def validate_vehicleNumber(self, value):
        return value.replace(" ", "").upper()


class VerifyPaymentSerializer(serializers.Serializer):
    # blanks reach the verifier and fail there as a signature mismatch
    razorpay_payment_id = serializers.CharField(required=False, allow_blank=True, default="")
    razorpay_order_id = serializers.CharField(required=False, allow_blank=True, default="")
    razorpay_signature = serializers.CharField(required=False, allow_blank=True, default="")


class VerifyAndSaveSerializer(VerifyPaymentSerializer):
    policyData = PolicyDataSerializer()
    customerData = CustomerDataSerializer()
