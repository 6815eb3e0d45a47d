import hashlib
import hmac
import logging

from django.conf import settings
from django.utils.crypto import constant_time_compare

from common.exceptions import SignatureMismatch

logger = logging.getLogger(__name__)


def compute_signature(order_id, payment_id, secret=None):
    """Hex HMAC-SHA256 of "<order_id>|<payment_id>" keyed with the gateway secret."""
    key = secret if secret is not None else settings.RAZORPAY_KEY_SECRET
    message = f"{order_id}|{payment_id}"
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(order_id, payment_id, signature, secret=None):
    key = secret if secret is not None else settings.RAZORPAY_KEY_SECRET
    if not (order_id and payment_id and signature and key):
        logger.warning(
            "payment_signature_mismatch",
            extra={"order_id": order_id, "payment_id": payment_id, "reason": "missing_values"},
        )
        raise SignatureMismatch()
    expected = compute_signature(order_id, payment_id, key)
    if not constant_time_compare(expected, str(signature)):
        logger.warning(
            "payment_signature_mismatch",
            extra={"order_id": order_id, "payment_id": payment_id, "reason": "digest"},
        )
        raise SignatureMismatch()
    return True
