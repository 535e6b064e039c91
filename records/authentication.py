"""
Bearer token authentication for the API.

Subclasses simplejwt's ``JWTAuthentication`` so that settings refer to
a stable project import path.  Tokens are sent as
``Authorization: Bearer <access token>``; a token whose user has been
deactivated or deleted is rejected by the base class.
"""
from __future__ import annotations

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken


class BearerAuthentication(JWTAuthentication):
    """JWT authentication with a ``WWW-Authenticate`` realm of ``api``."""

    www_authenticate_realm = 'api'


class OptionalBearerAuthentication(BearerAuthentication):
    """Bearer authentication that treats an invalid or expired token as anonymous.

    Used on public endpoints that still behave differently for a valid
    caller, such as registration of staff accounts by an admin.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (InvalidToken, AuthenticationFailed):
            return None
