# storefront/wizard.py
from dataclasses import asdict, dataclass, field
from typing import Optional

from rest_framework.exceptions import ValidationError

from policies.catalog import get_plan

SESSION_KEY = "rsa_wizard"

STEP_PLAN = "plan"
STEP_DETAILS = "details"
STEP_PAYMENT = "payment"

REQUIRED_DETAILS = ("customer_name", "phone_number", "vehicle_number")


@dataclass
class WizardState:
    """
    Purchase flow of one storefront visitor: selected plan, customer details
    and the gateway order awaiting payment. Lives in the Django session so a
    page refresh resumes where the visitor left off.
    """

    plan_id: Optional[str] = None
    customer: dict = field(default_factory=dict)
    terms_accepted: bool = False
    order_id: Optional[str] = None
    order_amount: Optional[int] = None

    @classmethod
    def from_session(cls, session):
        raw = session.get(SESSION_KEY) or {}
        known = {key: raw[key] for key in cls.__dataclass_fields__ if key in raw}
        state = cls(**known)
        if state.plan_id and get_plan(state.plan_id) is None:
            # catalog changed under a stored session
            state.plan_id = None
            state.order_id = None
            state.order_amount = None
        return state

    def save(self, session):
        session[SESSION_KEY] = asdict(self)
        session.modified = True

    @staticmethod
    def reset(session):
        session.pop(SESSION_KEY, None)
        session.modified = True

    @property
    def plan(self):
        return get_plan(self.plan_id)

    @property
    def has_details(self):
        return all(self.customer.get(key) for key in REQUIRED_DETAILS)

    def next_step(self):
        if self.plan is None:
            return STEP_PLAN
        if not (self.has_details and self.terms_accepted):
            return STEP_DETAILS
        return STEP_PAYMENT

    def select_plan(self, plan_id):
        plan = get_plan(plan_id)
        if plan is None:
            raise ValidationError({"planId": f"Unknown plan '{plan_id}'."})
        if plan.id != self.plan_id:
            self.clear_order()
        self.plan_id = plan.id
        return plan

    def update_customer_details(self, details, terms_accepted=None):
        merged = dict(self.customer)
        merged.update(details)
        self.customer = merged
        if terms_accepted is not None:
            self.terms_accepted = bool(terms_accepted)
        self.clear_order()

    def start_checkout(self, order):
        self.order_id = order["id"]
        self.order_amount = order.get("amount")

    def clear_order(self):
        self.order_id = None
        self.order_amount = None

    def policy_data(self):
        plan = self.plan
        if plan is None:
            return {}
        return {
            "id": plan.id,
            "policy_type": plan.name,
            "amount": plan.price,
            "original_price": plan.original_price,
            "duration": plan.duration,
        }

    def customer_data(self):
        return {
            "customer_name": self.customer.get("customer_name", ""),
            "email": self.customer.get("email", ""),
            "phone_number": self.customer.get("phone_number", ""),
            "address": self.customer.get("address", ""),
            "city": self.customer.get("city", ""),
            "vehicle_number": self.customer.get("vehicle_number", ""),
        }

    def checkout_prefill(self):
        return {
            "name": self.customer.get("customer_name", ""),
            "email": self.customer.get("email", ""),
            "contact": self.customer.get("phone_number", ""),
        }

    def as_dict(self):
        plan = self.plan
        return {
            "step": self.next_step(),
            "plan": plan.as_dict() if plan else None,
            "customer": {
                "customerName": self.customer.get("customer_name", ""),
                "email": self.customer.get("email", ""),
                "phoneNumber": self.customer.get("phone_number", ""),
                "address": self.customer.get("address", ""),
                "city": self.customer.get("city", ""),
                "vehicleNumber": self.customer.get("vehicle_number", ""),
            },
            "termsAccepted": self.terms_accepted,
            "orderId": self.order_id,
        }
