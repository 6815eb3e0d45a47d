from rest_framework import serializers

from payments.serializers import CustomerDataSerializer


class PlanSelectionSerializer(serializers.Serializer):
    planId = serializers.CharField(max_length=40)


class WizardDetailsSerializer(CustomerDataSerializer):
    termsAccepted = serializers.BooleanField(required=False)


class CertificateLookupSerializer(serializers.Serializer):
    policyNumber = serializers.CharField(max_length=30)
    paymentId = serializers.CharField(max_length=80)
