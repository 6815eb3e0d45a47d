# backend/policies/services.py
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from customers.models import Customer

from .catalog import get_plan
from .models import Policy

logger = logging.getLogger(__name__)


@dataclass
class MaterializedPolicy:
    policy: Policy
    customer: Customer
    created: bool = True

    @property
    def duplicate(self):
        return not self.created


def _decimal(value, field_name):
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValidationError({field_name: "Must be a number."})


def _policy_fields(policy_data):
    """
    Normalises the checkout payload into model fields. A known plan id fills
    what the client left out and pins the amount to the catalog price.
    """
    plan = get_plan(policy_data.get("id") or policy_data.get("plan_id"))
    amount = _decimal(policy_data.get("amount"), "amount")
    original_price = _decimal(policy_data.get("original_price"), "originalPrice")

    if plan is not None:
        if amount is None:
            amount = plan.price
        elif amount != plan.price:
            raise ValidationError({"amount": f"Amount does not match the {plan.name} price."})
        if original_price is None:
            original_price = plan.original_price

    if amount is None or amount <= 0:
        raise ValidationError({"amount": "Amount must be greater than zero."})

    policy_type = policy_data.get("policy_type") or (plan.name if plan else "")
    duration = policy_data.get("duration") or (plan.duration if plan else "")
    if not policy_type:
        raise ValidationError({"policyType": "This field is required."})
    if not duration:
        raise ValidationError({"duration": "This field is required."})

    return {
        "plan_id": plan.id if plan else "",
        "policy_type": policy_type,
        "amount": amount,
        "original_price": original_price,
        "duration": duration,
        "start_date": policy_data.get("start_date") or timezone.localdate(),
    }


def _existing(order_id, payment_id):
    return (
        Policy.objects.select_related("customer")
        .filter(order_id=order_id, payment_id=payment_id)
        .first()
    )


def materialize_policy(order_id, payment_id, policy_data, customer_data) -> MaterializedPolicy:
    """
    Creates the Customer and the Policy that references it for a verified
    payment. Both rows are written in a single transaction. A second call for
    the same (order_id, payment_id) returns the stored pair without writing.
    """
    existing = _existing(order_id, payment_id)
    if existing is not None:
        logger.info(
            "policy_materialize_replay",
            extra={"order_id": order_id, "payment_id": payment_id, "policy_id": existing.id},
        )
        return MaterializedPolicy(policy=existing, customer=existing.customer, created=False)

    fields = _policy_fields(policy_data or {})
    try:
        with transaction.atomic():
            customer = Customer.objects.create(**customer_data)
            policy = Policy.objects.create(
                customer=customer,
                order_id=order_id,
                payment_id=payment_id,
                **fields,
            )
    except IntegrityError:
        # concurrent submission of the same payment won the race
        existing = _existing(order_id, payment_id)
        if existing is None:
            raise
        logger.info(
            "policy_materialize_replay",
            extra={"order_id": order_id, "payment_id": payment_id, "policy_id": existing.id},
        )
        return MaterializedPolicy(policy=existing, customer=existing.customer, created=False)

    logger.info(
        "policy_materialized",
        extra={
            "policy_id": policy.id,
            "policy_number": policy.policy_number,
            "customer_id": customer.id,
            "order_id": order_id,
            "payment_id": payment_id,
        },
    )
    return MaterializedPolicy(policy=policy, customer=customer)
