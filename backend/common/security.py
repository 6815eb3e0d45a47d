import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string
from rest_framework import permissions
from rest_framework.permissions import SAFE_METHODS

from .authentication import SoftJWTAuthentication, StorefrontVisitor, StrictJWTAuthentication

logger = logging.getLogger(__name__)

STOREFRONT = "storefront"
BACKOFFICE = "backoffice"

_SIDES = {
    "public": STOREFRONT,
    "storefront": STOREFRONT,
    "admin": BACKOFFICE,
    "backoffice": BACKOFFICE,
    "private": BACKOFFICE,
}


def access_side(declared):
    if declared is None:
        return None
    return _SIDES.get(str(declared).strip().lower())


def report_misconfiguration(view, message, *, always_raise=False):
    if always_raise or settings.DEBUG:
        raise ImproperlyConfigured(message)
    logger.warning("endpoint_misconfigured", extra={"view": view.__class__.__name__, "error": message})


def _as_class(entry):
    if isinstance(entry, str):
        return import_string(entry)
    return entry if isinstance(entry, type) else type(entry)


class EndpointAccessGuardMixin:
    """
    Every API view says whether it serves the storefront (anonymous
    customers) or the back-office (staff). The declaration is checked on each
    request:

    - storefront writes must opt in with `public_write_allowed = True` and
      name a `throttle_scope`;
    - back-office views must never fall back to the token-tolerant
      SoftJWTAuthentication.
    """

    endpoint_access = None  # type: ignore[assignment]
    public_write_allowed = False

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        side = access_side(self.endpoint_access)
        if side == STOREFRONT:
            self.check_storefront_view(request)
        elif side == BACKOFFICE:
            self.check_backoffice_view()

    def check_storefront_view(self, request):
        method = (getattr(request, "method", None) or "GET").upper()
        if method in SAFE_METHODS:
            return
        name = self.__class__.__name__
        if not self.public_write_allowed:
            report_misconfiguration(
                self,
                f"{name} is a storefront view handling {method} without `public_write_allowed = True`.",
            )
        elif not getattr(self, "throttle_scope", None):
            report_misconfiguration(
                self,
                f"{name} accepts anonymous {method} requests but declares no `throttle_scope`.",
            )

    def check_backoffice_view(self):
        declared = getattr(self, "authentication_classes", None) or getattr(settings, "REST_FRAMEWORK", {}).get(
            "DEFAULT_AUTHENTICATION_CLASSES", []
        )
        for entry in declared:
            if issubclass(_as_class(entry), SoftJWTAuthentication):
                report_misconfiguration(
                    self,
                    f"{self.__class__.__name__} is a back-office view but authenticates with "
                    "SoftJWTAuthentication, which lets invalid tokens through.",
                    always_raise=True,
                )


class PublicEndpointMixin(EndpointAccessGuardMixin):
    """
    Storefront views: anyone may call them, a stray bearer token is ignored
    and request.user is a StorefrontVisitor.
    """

    endpoint_access = STOREFRONT
    permission_classes = [permissions.AllowAny]

    def get_authenticators(self):
        return [SoftJWTAuthentication()]

    def initialize_request(self, request, *args, **kwargs):
        drf_request = super().initialize_request(request, *args, **kwargs)
        drf_request.user = StorefrontVisitor()
        drf_request.auth = None
        return drf_request


class AdminEndpointMixin(EndpointAccessGuardMixin):
    """Back-office views: staff JWT required."""

    endpoint_access = BACKOFFICE
    permission_classes = [permissions.IsAdminUser]
    authentication_classes = [StrictJWTAuthentication]
