# backend/policies/lifecycle.py
from __future__ import annotations

import re
import secrets
from calendar import monthrange
from datetime import date, datetime
from typing import Optional, Union

from django.conf import settings
from django.utils import timezone


class Status:
    ACTIVE = "Active"
    EXPIRING_SOON = "Expiring Soon"
    EXPIRED = "Expired"

    CHOICES = [
        (ACTIVE, "Active"),
        (EXPIRING_SOON, "Expiring Soon"),
        (EXPIRED, "Expired"),
    ]

    # Query-string aliases accepted by the back-office tabs
    ALIASES = {
        "active": ACTIVE,
        "expiring_soon": EXPIRING_SOON,
        "expiring-soon": EXPIRING_SOON,
        "expiring soon": EXPIRING_SOON,
        "expired": EXPIRED,
    }

    @classmethod
    def normalize(cls, raw: Optional[str]) -> Optional[str]:
        if not raw:
            return None
        return cls.ALIASES.get(str(raw).strip().lower())


_DURATION_RE = re.compile(r"^\s*(\d+)")


def _add_months(start: date, months: int) -> date:
    """
    Sum month intervals keeping the day when possible. When the target month
    does not have that day (e.g., 31 -> February), fallback to the last day.
    """
    if months == 0:
        return start
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def add_years(start: date, years: int) -> date:
    return _add_months(start, 12 * years)


def parse_duration_years(duration: Optional[str], default: int = 1) -> int:
    """
    Leading integer of a plan duration ("2 Year" -> 2). Anything unparsable
    or non-positive falls back to `default`.
    """
    match = _DURATION_RE.match(str(duration or ""))
    if not match:
        return default
    years = int(match.group(1))
    return years if years > 0 else default


def compute_expiry_date(start_date: date, duration: Optional[str]) -> date:
    return add_years(start_date, parse_duration_years(duration))


def _as_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def days_until_expiry(expiry_date, today: Optional[date] = None) -> Optional[int]:
    expiry = _as_date(expiry_date)
    if expiry is None:
        return None
    today = today or timezone.localdate()
    return (expiry - today).days


def expiring_soon_days() -> int:
    return getattr(settings, "POLICY_EXPIRING_SOON_DAYS", 30)


def derive_status(expiry_date, today: Optional[date] = None) -> str:
    """
    Stateless status derivation:
    - expiry in the past -> EXPIRED
    - expiry within the threshold (30 days by default, today included) -> EXPIRING_SOON
    - otherwise -> ACTIVE
    A policy without expiry date is treated as ACTIVE.
    """
    days_left = days_until_expiry(expiry_date, today=today)
    if days_left is None:
        return Status.ACTIVE
    if days_left < 0:
        return Status.EXPIRED
    if days_left <= expiring_soon_days():
        return Status.EXPIRING_SOON
    return Status.ACTIVE


def generate_policy_number(now: Optional[datetime] = None) -> str:
    """RSA-<yyMMddHHmmss>-<3 random digits>."""
    now = timezone.localtime(now)
    return f"RSA-{now:%y%m%d%H%M%S}-{secrets.randbelow(1000):03d}"
