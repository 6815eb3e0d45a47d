# payments/gateway.py
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


def razorpay_credentials():
    key_id = getattr(settings, "RAZORPAY_KEY_ID", "") or ""
    key_secret = getattr(settings, "RAZORPAY_KEY_SECRET", "") or ""
    if not (key_id and key_secret):
        return None
    return key_id, key_secret


def _error_description(resp):
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("description"):
        return error["description"]
    return resp.text or f"HTTP {resp.status_code}"


def _send(method, path, **kwargs):
    auth = razorpay_credentials()
    if not auth:
        return None, "RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET not configured"
    try:
        resp = getattr(requests, method)(
            f"{settings.RAZORPAY_API_BASE}{path}",
            auth=auth,
            timeout=getattr(settings, "RAZORPAY_TIMEOUT", 10),
            **kwargs,
        )
        if resp.status_code >= 300:
            return None, _error_description(resp)
        return resp.json(), ""
    except requests.RequestException as exc:
        return None, f"Could not reach Razorpay: {exc}"
    except ValueError as exc:
        return None, f"Razorpay returned an unreadable response: {exc}"


def create_razorpay_order(payload):
    """
    POST /orders on the Razorpay REST API. Returns (order, "") on success and
    (None, error description) otherwise.
    """
    return _send("post", "/orders", json=payload)


def fetch_razorpay_order(order_id):
    """GET /orders/<id>, same (order, error) contract as create_razorpay_order."""
    return _send("get", f"/orders/{order_id}")
