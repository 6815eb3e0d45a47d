import logging
import secrets
from urllib.parse import urlencode

from django.conf import settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from common.security import PublicEndpointMixin
from payments.serializers import VerifyPaymentSerializer
from payments.services import create_order, saved_payment_result, verify_and_save
from policies.catalog import PLANS
from policies.models import Policy
from policies.views import pdf_response

from .serializers import CertificateLookupSerializer, PlanSelectionSerializer, WizardDetailsSerializer
from .wizard import STEP_PAYMENT, WizardState

logger = logging.getLogger(__name__)


def _receipt_id():
    return f"receipt_{timezone.now():%Y%m%d%H%M%S}_{secrets.token_hex(3)}"


class StorefrontView(PublicEndpointMixin, APIView):
    throttle_scope = "storefront"

    def get_state(self):
        return WizardState.from_session(self.request.session)

    def state_response(self, state, code=status.HTTP_200_OK):
        return Response({"success": True, "wizard": state.as_dict()}, status=code)


class PlanListView(StorefrontView):
    def get(self, request):
        return Response({"success": True, "plans": [plan.as_dict() for plan in PLANS]})


class WizardView(StorefrontView):
    public_write_allowed = True

    def get(self, request):
        return self.state_response(self.get_state())

    def delete(self, request):
        WizardState.reset(request.session)
        return self.state_response(WizardState())


class WizardPlanView(StorefrontView):
    public_write_allowed = True

    def post(self, request):
        serializer = PlanSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        state = self.get_state()
        state.select_plan(serializer.validated_data["planId"])
        state.save(request.session)
        return self.state_response(state)


class WizardDetailsView(StorefrontView):
    public_write_allowed = True

    def post(self, request):
        state = self.get_state()
        payload = state.as_dict()["customer"]
        payload["termsAccepted"] = state.terms_accepted
        payload.update(request.data)
        serializer = WizardDetailsSerializer(data=payload)
        serializer.is_valid(raise_exception=True)
        details = dict(serializer.validated_data)
        terms = details.pop("termsAccepted", None)
        state.update_customer_details(details, terms_accepted=terms)
        state.save(request.session)
        return self.state_response(state)


class WizardCheckoutView(StorefrontView):
    public_write_allowed = True
    throttle_scope = "payments"

    def post(self, request):
        state = self.get_state()
        if state.next_step() != STEP_PAYMENT:
            raise ValidationError("Select a plan, fill in your details and accept the terms before paying.")
        plan = state.plan
        order = create_order(plan.price, _receipt_id())
        state.start_checkout(order)
        state.save(request.session)
        logger.info("wizard_checkout_started", extra={"order_id": order["id"], "plan_id": plan.id})
        return Response(
            {
                "success": True,
                "order": order,
                "key": settings.RAZORPAY_KEY_ID,
                "name": settings.PAYMENT_MERCHANT_NAME,
                "description": plan.name,
                "prefill": state.checkout_prefill(),
            }
        )


class WizardCompleteView(StorefrontView):
    """
    Gateway callback payload -> verify-and-save with the data the visitor
    entered. On failure the wizard is kept so the payment can be retried.
    """

    public_write_allowed = True
    throttle_scope = "payments"

    def post(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order_id = data["razorpay_order_id"]
        payment_id = data["razorpay_payment_id"]
        state = self.get_state()

        if order_id != state.order_id:
            # repeated gateway callback after the wizard was already completed
            result = saved_payment_result(order_id, payment_id, data["razorpay_signature"])
            if result is None:
                if not state.order_id:
                    raise ValidationError("There is no checkout in progress.")
                raise ValidationError("Order does not match the pending checkout.")
        else:
            result = verify_and_save(
                order_id,
                payment_id,
                data["razorpay_signature"],
                state.policy_data(),
                state.customer_data(),
                paid_amount=state.order_amount,
            )
            WizardState.reset(request.session)

        policy = result["data"]["policy"]
        query = urlencode({"policyNumber": policy["policyNumber"], "paymentId": payment_id})
        result["certificateUrl"] = f"{reverse('certificate-download')}?{query}"
        code = status.HTTP_200_OK if result["duplicate"] else status.HTTP_201_CREATED
        return Response(result, status=code)


class CertificateDownloadView(StorefrontView):
    """The gateway payment id doubles as proof of purchase."""

    def get(self, request):
        serializer = CertificateLookupSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        policy = (
            Policy.objects.select_related("customer")
            .filter(policy_number=data["policyNumber"], payment_id=data["paymentId"])
            .exclude(payment_id="")
            .first()
        )
        if policy is None:
            raise NotFound("Policy not found")
        return pdf_response(policy)
