from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.http import JsonResponse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import DashboardView
from payments.views import CreateOrderView


# === Healthcheck ===
def healthcheck(request):
    """
    Simple liveness endpoint for monitoring.
    """
    return JsonResponse({"status": "ok"}, status=200)


class AdminLoginView(TokenObtainPairView):
    throttle_scope = "login"


urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),

    path("healthz/", healthcheck, name="healthcheck"),

    # Admin auth (JWT)
    path("api/auth/login", AdminLoginView.as_view(), name="auth-login"),
    path("api/auth/refresh", TokenRefreshView.as_view(), name="auth-refresh"),

    # Storefront
    path("create-order", CreateOrderView.as_view(), name="create-order-root"),
    path("api/payments/", include("payments.urls")),
    path("api/", include("storefront.urls")),

    # Back-office
    path("api/", include("policies.urls")),
    path("api/", include("customers.urls")),
    path("api/dashboard", DashboardView.as_view(), name="dashboard"),
]


urlpatterns += [
    path(
        "",
        lambda r: JsonResponse(
            {
                "message": "RSA Policy API",
                "endpoints": [
                    "/create-order",
                    "/api/payments/",
                    "/api/plans",
                    "/api/wizard",
                    "/api/policies",
                    "/api/customers",
                    "/api/dashboard",
                    "/healthz/",
                ],
            },
            status=200,
        ),
        name="api-root",
    ),
]
