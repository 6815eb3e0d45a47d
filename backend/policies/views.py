# backend/policies/views.py
import logging
from datetime import timedelta

from django.db.models import Q
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError

from common.security import AdminEndpointMixin
from .certificate import certificate_filename, render_certificate
from .lifecycle import Status, expiring_soon_days
from .models import Policy
from .serializers import PolicySerializer

logger = logging.getLogger(__name__)

# larger windows are clamped to this many days
MAX_EXPIRING_WITHIN_DAYS = 36500


def filter_by_status(qs, status, today=None):
    """
    Status tabs are resolved against expiry_date so the result matches the
    live derived status, even when the stored column is stale.
    """
    today = today or timezone.localdate()
    soon = today + timedelta(days=expiring_soon_days())
    if status == Status.EXPIRED:
        return qs.filter(expiry_date__lt=today)
    if status == Status.EXPIRING_SOON:
        return qs.filter(expiry_date__gte=today, expiry_date__lte=soon)
    if status == Status.ACTIVE:
        return qs.filter(Q(expiry_date__gt=soon) | Q(expiry_date__isnull=True))
    return qs


def filter_expiring_within(qs, days, today=None):
    today = today or timezone.localdate()
    days = min(days, MAX_EXPIRING_WITHIN_DAYS)
    return qs.filter(expiry_date__gte=today, expiry_date__lte=today + timedelta(days=days))


def pdf_response(policy):
    response = HttpResponse(render_certificate(policy), content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{certificate_filename(policy)}"'
    return response


class PolicyViewSet(
    AdminEndpointMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = PolicySerializer

    def get_queryset(self):
        qs = Policy.objects.select_related("customer").order_by("-created_at", "-id")
        if self.action != "list":
            return qs
        params = self.request.query_params

        # search by policy number, customer name or plate
        q = (params.get("search") or "").strip()
        if q:
            qs = qs.filter(
                Q(policy_number__icontains=q)
                | Q(customer__customer_name__icontains=q)
                | Q(customer__vehicle_number__icontains=q)
            )

        raw_status = params.get("status")
        if raw_status:
            status = Status.normalize(raw_status)
            if status is None:
                raise ValidationError({"status": f"Unknown status '{raw_status}'."})
            qs = filter_by_status(qs, status)

        raw_within = params.get("expiring_within")
        if raw_within not in (None, ""):
            try:
                days = int(raw_within)
            except (TypeError, ValueError):
                raise ValidationError({"expiring_within": "Must be a whole number of days."})
            if days < 0:
                raise ValidationError({"expiring_within": "Must be zero or more."})
            qs = filter_expiring_within(qs, days)
        return qs

    def perform_update(self, serializer):
        policy = serializer.save()
        logger.info(
            "policy_updated",
            extra={"policy_id": policy.id, "status": policy.status, "expiry_date": str(policy.expiry_date)},
        )

    def perform_destroy(self, instance):
        policy_id = instance.id
        instance.delete()
        logger.info("policy_deleted", extra={"policy_id": policy_id})

    @action(detail=True, methods=["get"], url_path="certificate")
    def certificate(self, request, pk=None):
        return pdf_response(self.get_object())
