from rest_framework.authentication import get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


class StrictJWTAuthentication(JWTAuthentication):
    """Back-office bearer tokens: a bad or expired token is a 401."""


class SoftJWTAuthentication(JWTAuthentication):
    """
    Storefront variant that ignores broken tokens. An admin who left an
    expired session in the same browser must still be able to buy a policy.
    """

    def authenticate(self, request):
        if not get_authorization_header(request):
            return None
        try:
            return super().authenticate(request)
        except (InvalidToken, TokenError, AuthenticationFailed, UnicodeError, ValueError):
            return None


class StorefrontVisitor:
    """
    request.user on storefront views. Customers never log in, so anything
    beyond the anonymous flags is a programming error.
    """

    is_authenticated = False
    is_anonymous = True
    is_staff = False

    def __bool__(self):
        return False

    def __getattr__(self, name):
        raise RuntimeError(
            f"Storefront views have no user (tried to read request.user.{name}). "
            "Use AdminEndpointMixin for views that need the staff user."
        )
