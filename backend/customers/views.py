import logging

from django.db.models import Q
from rest_framework import mixins, viewsets

from common.security import AdminEndpointMixin
from .models import Customer
from .serializers import CustomerSerializer

logger = logging.getLogger(__name__)


class CustomerViewSet(
    AdminEndpointMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Back-office customer list/edit/delete. Customers are only created by a
    verified payment, so there is no create action here.
    """

    serializer_class = CustomerSerializer

    def get_queryset(self):
        qs = Customer.objects.all().order_by("-created_at", "-id")
        if self.action != "list":
            return qs
        q = (self.request.query_params.get("search") or "").strip()
        if q:
            qs = qs.filter(
                Q(customer_name__icontains=q)
                | Q(email__icontains=q)
                | Q(phone_number__icontains=q)
                | Q(vehicle_number__icontains=q)
            )
        return qs

    def perform_update(self, serializer):
        customer = serializer.save()
        logger.info("customer_updated", extra={"customer_id": customer.id})

    def perform_destroy(self, instance):
        # Policies keep existing; their customer reference is cleared.
        customer_id = instance.id
        instance.delete()
        logger.info("customer_deleted", extra={"customer_id": customer_id})
