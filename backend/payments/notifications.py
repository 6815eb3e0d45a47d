# payments/notifications.py
import logging

from django.conf import settings
from django.core.mail import EmailMessage, send_mail

from policies.certificate import certificate_filename, render_certificate

from .serializers import EMAIL_PLACEHOLDERS

logger = logging.getLogger(__name__)

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"

_INVALID_EMAILS = {""} | EMAIL_PLACEHOLDERS


def usable_email(value):
    email = str(value or "").strip()
    if email.lower() in _INVALID_EMAILS or "@" not in email:
        return ""
    return email


def email_params(policy):
    customer = policy.customer
    return {
        "customerName": getattr(customer, "customer_name", "") or "Customer",
        "policyType": policy.policy_type or "RSA Policy",
        "policyId": policy.policy_number,
        "expiryDate": policy.expiry_date.strftime("%d/%m/%Y") if policy.expiry_date else "N/A",
        "amount": f"{float(policy.amount or 0):.2f}",
        "email": usable_email(getattr(customer, "email", "")),
    }


def _customer_body(params):
    return (
        f"Dear {params['customerName']},\n\n"
        f"Thank you for purchasing the {params['policyType']} plan.\n"
        f"Policy number: {params['policyId']}\n"
        f"Valid until: {params['expiryDate']}\n"
        f"Amount paid: INR {params['amount']}\n\n"
        "Your policy certificate is attached to this email.\n\n"
        f"{settings.COMPANY_NAME}"
    )


def _admin_body(params):
    return (
        "A new RSA policy was purchased.\n\n"
        f"Customer: {params['customerName']}\n"
        f"Policy type: {params['policyType']}\n"
        f"Policy number: {params['policyId']}\n"
        f"Expiry date: {params['expiryDate']}\n"
        f"Amount: INR {params['amount']}\n"
    )


def send_customer_receipt(policy, params=None):
    params = params or email_params(policy)
    if not params["email"]:
        logger.warning(
            "policy_email_skipped",
            extra={"policy_id": policy.id, "reason": "missing_customer_email"},
        )
        return SKIPPED
    try:
        message = EmailMessage(
            subject=f"Your {params['policyType']} policy {params['policyId']}",
            body=_customer_body(params),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[params["email"]],
        )
        message.attach(certificate_filename(policy), render_certificate(policy), "application/pdf")
        message.send(fail_silently=False)
    except Exception as exc:
        logger.error(
            "policy_email_failed",
            extra={"policy_id": policy.id, "recipient": "customer", "error": str(exc)},
        )
        return FAILED
    logger.info("policy_email_sent", extra={"policy_id": policy.id, "recipient": "customer"})
    return SENT


def send_admin_notification(policy, params=None):
    recipients = list(getattr(settings, "ADMIN_NOTIFICATION_EMAILS", []) or [])
    if not recipients:
        return SKIPPED
    params = params or email_params(policy)
    try:
        send_mail(
            f"New policy purchased: {params['policyId']}",
            _admin_body(params),
            settings.DEFAULT_FROM_EMAIL,
            recipients,
            fail_silently=False,
        )
    except Exception as exc:
        logger.error(
            "policy_email_failed",
            extra={"policy_id": policy.id, "recipient": "admin", "error": str(exc)},
        )
        return FAILED
    logger.info("policy_email_sent", extra={"policy_id": policy.id, "recipient": "admin"})
    return SENT


def send_policy_emails(policy):
    """
    Customer receipt with the certificate attached plus the back-office
    notification. Delivery problems are logged and reported, never raised.
    """
    params = email_params(policy)
    return {
        "customer": send_customer_receipt(policy, params),
        "admin": send_admin_notification(policy, params),
    }
