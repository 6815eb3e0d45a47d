# payments/services.py
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from rest_framework.exceptions import ValidationError

from common.exceptions import UpstreamError
from customers.serializers import CustomerSerializer
from policies.catalog import get_plan
from policies.models import Policy
from policies.serializers import PolicySerializer
from policies.services import materialize_policy

from .gateway import create_razorpay_order, fetch_razorpay_order
from .notifications import send_policy_emails
from .signature import verify_signature

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Amount and receipt are required"
SAVED_MESSAGE = "Payment verified and data saved successfully"
DUPLICATE_MESSAGE = "Payment already verified; returning the saved policy"


def to_minor_units(amount) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _parse_amount(raw):
    if raw in (None, "") or isinstance(raw, bool):
        return None
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise ValidationError({"amount": "Amount must be a positive number."})
    if not amount.is_finite():
        raise ValidationError({"amount": "Amount must be a positive number."})
    return amount


def create_order(amount, receipt, currency=None):
    """
    Creates a gateway order for `amount` (major units) and returns the
    order as the gateway reports it: {id, amount, currency, receipt}.
    """
    value = _parse_amount(amount)
    receipt = str(receipt or "").strip()
    if not value or not receipt:
        raise ValidationError(REQUIRED_MESSAGE)
    if value < 0:
        raise ValidationError({"amount": "Amount must be a positive number."})

    if currency in (None, ""):
        currency = settings.PAYMENT_DEFAULT_CURRENCY or "INR"
    if not isinstance(currency, str) or not (len(currency.strip()) == 3 and currency.strip().isalpha()):
        raise ValidationError({"currency": "Currency must be a three-letter code such as INR."})
    currency = currency.strip().upper()
    payload = {
        "amount": to_minor_units(value),
        "currency": currency,
        "receipt": receipt,
        "payment_capture": 1,
    }
    logger.info("order_create_start", extra={"receipt": receipt, "amount": payload["amount"], "currency": currency})
    order, err = create_razorpay_order(payload)
    if err:
        logger.error("order_create_failed", extra={"receipt": receipt, "error": err})
        raise UpstreamError(err)
    logger.info("order_created", extra={"order_id": order.get("id"), "receipt": receipt})
    return {
        "id": order.get("id"),
        "amount": order.get("amount", payload["amount"]),
        "currency": order.get("currency", currency),
        "receipt": order.get("receipt", receipt),
    }


def _saved_policy(order_id, payment_id):
    if not (order_id and payment_id):
        return None
    return Policy.objects.select_related("customer").filter(order_id=order_id, payment_id=payment_id).first()


def _expected_amount(policy_data):
    amount = _parse_amount(policy_data.get("amount"))
    if amount is None:
        plan = get_plan(policy_data.get("id"))
        amount = plan.price if plan else None
    return amount


def check_paid_amount(order_id, policy_data, paid_amount=None):
    """
    The policy price must equal what the gateway order charged. `paid_amount`
    (minor units) skips the gateway lookup when the caller created the order.
    """
    expected = _expected_amount(policy_data)
    if expected is None:
        return
    if paid_amount is None:
        order, err = fetch_razorpay_order(order_id)
        if err:
            logger.error("order_fetch_failed", extra={"order_id": order_id, "error": err})
            raise UpstreamError(err)
        paid_amount = order.get("amount")
    try:
        paid = int(paid_amount)
    except (TypeError, ValueError):
        raise UpstreamError("Razorpay returned an order without an amount")
    if paid != to_minor_units(expected):
        logger.warning(
            "payment_amount_mismatch",
            extra={"order_id": order_id, "paid": paid, "expected": to_minor_units(expected)},
        )
        raise ValidationError({"amount": "Amount does not match the paid order."})


def _result(policy, customer, created, emails=None):
    return {
        "success": True,
        "message": SAVED_MESSAGE if created else DUPLICATE_MESSAGE,
        "policyId": policy.id,
        "customerId": customer.id if customer else None,
        "data": {
            "policy": PolicySerializer(policy).data,
            "customer": CustomerSerializer(customer).data if customer else None,
        },
        "duplicate": not created,
        "emails": emails,
    }


def saved_payment_result(order_id, payment_id, signature):
    """
    The stored result for a payment that was already turned into a policy,
    or None. The signature is checked before anything is returned.
    """
    policy = _saved_policy(order_id, payment_id)
    if policy is None:
        return None
    verify_signature(order_id, payment_id, signature)
    logger.info("payment_already_saved", extra={"order_id": order_id, "policy_id": policy.id})
    return _result(policy, policy.customer, created=False)


def verify_and_save(order_id, payment_id, signature, policy_data, customer_data, paid_amount=None):
    """
    Signature check, then the paid amount check, then the policy/customer
    write, then the confirmation emails. A bad signature raises before
    anything is written.
    """
    verify_signature(order_id, payment_id, signature)
    logger.info("payment_signature_verified", extra={"order_id": order_id, "payment_id": payment_id})

    saved = saved_payment_result(order_id, payment_id, signature)
    if saved is not None:
        return saved

    check_paid_amount(order_id, policy_data, paid_amount)
    result = materialize_policy(order_id, payment_id, policy_data, customer_data)
    emails = send_policy_emails(result.policy) if result.created else None
    return _result(result.policy, result.customer, result.created, emails)
