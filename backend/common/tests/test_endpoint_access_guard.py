from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from common.authentication import SoftJWTAuthentication, StorefrontVisitor
from common.security import (
    BACKOFFICE,
    STOREFRONT,
    AdminEndpointMixin,
    EndpointAccessGuardMixin,
    PublicEndpointMixin,
    access_side,
)


class BackofficeWithSoftAuth(EndpointAccessGuardMixin, APIView):
    endpoint_access = "backoffice"
    authentication_classes = [SoftJWTAuthentication]
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"ok": True})


class PublicWriteWithoutHint(PublicEndpointMixin, APIView):
    throttle_scope = "storefront"

    def post(self, request):
        return Response({"ok": True})


class PublicWriteWithoutThrottle(PublicEndpointMixin, APIView):
    public_write_allowed = True

    def post(self, request):
        return Response({"ok": True})


class PublicWriteAllowed(PublicEndpointMixin, APIView):
    public_write_allowed = True
    throttle_scope = "storefront"

    def post(self, request):
        return Response({"ok": True, "anonymous": request.user.is_anonymous})


class PublicReadOnly(PublicEndpointMixin, APIView):
    def get(self, request):
        return Response({"ok": True, "visitor": isinstance(request.user, StorefrontVisitor)})


class AdminOnly(AdminEndpointMixin, APIView):
    def get(self, request):
        return Response({"ok": True})


class EndpointAccessGuardTests(SimpleTestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def test_access_side_aliases(self):
        self.assertEqual(access_side("public"), STOREFRONT)
        self.assertEqual(access_side(" Admin "), BACKOFFICE)
        self.assertEqual(access_side("private"), BACKOFFICE)
        self.assertIsNone(access_side(None))
        self.assertIsNone(access_side("hybrid"))

    def test_backoffice_view_rejects_soft_auth_even_without_debug(self):
        view = BackofficeWithSoftAuth.as_view()
        with self.assertRaises(ImproperlyConfigured):
            view(self.factory.get("/fake"))

    @override_settings(DEBUG=True)
    def test_storefront_writes_must_be_declared(self):
        view = PublicWriteWithoutHint.as_view()
        with self.assertRaises(ImproperlyConfigured):
            view(self.factory.post("/fake", {"foo": "bar"}, format="json"))

    @override_settings(DEBUG=True)
    def test_storefront_writes_must_be_throttled(self):
        view = PublicWriteWithoutThrottle.as_view()
        with self.assertRaises(ImproperlyConfigured):
            view(self.factory.post("/fake", {"foo": "bar"}, format="json"))

    def test_misconfiguration_is_logged_outside_debug(self):
        view = PublicWriteWithoutThrottle.as_view()
        with self.assertLogs("common.security", level="WARNING") as logs:
            response = view(self.factory.post("/fake", {"foo": "bar"}, format="json"))
        self.assertEqual(response.status_code, 200)
        self.assertIn("endpoint_misconfigured", logs.output[0])

    def test_declared_storefront_write(self):
        view = PublicWriteAllowed.as_view()
        response = view(self.factory.post("/fake", {"foo": "bar"}, format="json"))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["anonymous"])

    def test_storefront_read_gets_visitor(self):
        response = PublicReadOnly.as_view()(self.factory.get("/fake"))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["visitor"])

    def test_storefront_ignores_broken_token(self):
        request = self.factory.get("/fake", HTTP_AUTHORIZATION="Bearer not.a.token")
        response = PublicReadOnly.as_view()(request)
        self.assertEqual(response.status_code, 200)

    def test_backoffice_requires_credentials(self):
        response = AdminOnly.as_view()(self.factory.get("/fake"))
        self.assertEqual(response.status_code, 401)

    def test_visitor_blocks_attribute_access(self):
        visitor = StorefrontVisitor()
        self.assertFalse(visitor)
        with self.assertRaises(RuntimeError):
            visitor.email
