import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.security import AdminEndpointMixin, PublicEndpointMixin

from .gateway import razorpay_credentials
from .serializers import VerifyAndSaveSerializer, VerifyPaymentSerializer
from .services import create_order as create_gateway_order
from .services import verify_and_save
from .signature import verify_signature

logger = logging.getLogger(__name__)


class CreateOrderView(PublicEndpointMixin, APIView):
    """
    POST {amount, currency?, receipt} -> {success, order}
    The amount is in rupees; the gateway receives it in paise.
    """

    public_write_allowed = True
    throttle_scope = "payments"

    def post(self, request):
        data = request.data
        order = create_gateway_order(
            data.get("amount"),
            data.get("receipt"),
            currency=data.get("currency"),
        )
        return Response({"success": True, "order": order})


class VerifyAndSaveView(PublicEndpointMixin, APIView):
    public_write_allowed = True
    throttle_scope = "payments"

    def post(self, request):
        serializer = VerifyAndSaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = verify_and_save(
            data["razorpay_order_id"],
            data["razorpay_payment_id"],
            data["razorpay_signature"],
            dict(data["policyData"]),
            dict(data["customerData"]),
        )
        code = status.HTTP_200_OK if result["duplicate"] else status.HTTP_201_CREATED
        return Response(result, status=code)


class VerifyPaymentView(PublicEndpointMixin, APIView):
    """Signature check only, nothing is stored."""

    public_write_allowed = True
    throttle_scope = "payments"

    def post(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        verify_signature(data["razorpay_order_id"], data["razorpay_payment_id"], data["razorpay_signature"])
        return Response(
            {
                "success": True,
                "payment_id": data["razorpay_payment_id"],
                "order_id": data["razorpay_order_id"],
                "timestamp": timezone.now().isoformat(),
                "status": "verified",
            }
        )


class PaymentConfigView(AdminEndpointMixin, APIView):
    """
    Health-check of the gateway and mail configuration. Admins only.
    """

    def get(self, request):
        return Response(
            {
                "razorpay_configured": bool(razorpay_credentials()),
                "razorpay_key_id": settings.RAZORPAY_KEY_ID or None,
                "api_base": settings.RAZORPAY_API_BASE,
                "default_currency": settings.PAYMENT_DEFAULT_CURRENCY,
                "email_backend": settings.EMAIL_BACKEND,
                "admin_notification_emails": len(settings.ADMIN_NOTIFICATION_EMAILS),
                "debug": settings.DEBUG,
            }
        )

