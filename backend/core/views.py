from django.db.models import Count, Q, Sum
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from common.security import AdminEndpointMixin
from customers.models import Customer
from policies.lifecycle import Status
from policies.models import Policy
from policies.serializers import PolicySerializer
from policies.views import filter_by_status

RECENT_POLICIES = 5


class DashboardView(AdminEndpointMixin, APIView):
    """
    Back-office summary: counters per status tab, revenue, plan-length
    distribution and the newest policies.
    """

    def get(self, request):
        today = timezone.localdate()
        policies = Policy.objects.all()

        totals = policies.aggregate(
            total=Count("id"),
            revenue=Sum("amount"),
            one_year=Count("id", filter=Q(duration__startswith="1")),
            two_year=Count("id", filter=Q(duration__startswith="2")),
            three_year=Count("id", filter=Q(duration__startswith="3")),
        )
        recent = policies.select_related("customer").order_by("-created_at", "-id")[:RECENT_POLICIES]

        return Response(
            {
                "totalPolicies": totals["total"],
                "activePolicies": filter_by_status(policies, Status.ACTIVE, today).count(),
                "expiringSoon": filter_by_status(policies, Status.EXPIRING_SOON, today).count(),
                "expiredPolicies": filter_by_status(policies, Status.EXPIRED, today).count(),
                "totalCustomers": Customer.objects.count(),
                "totalRevenue": float(totals["revenue"] or 0),
                "policyDistribution": {
                    "oneYear": totals["one_year"],
                    "twoYear": totals["two_year"],
                    "threeYear": totals["three_year"],
                },
                "recentPolicies": PolicySerializer(recent, many=True).data,
            }
        )
