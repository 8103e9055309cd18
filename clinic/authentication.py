"""
Bearer token authentication.

Subclasses of simplejwt's ``JWTAuthentication`` kept in their own module,
importing nothing from the app, so the REST framework settings have a
stable import path that does not pull in any view code (avoids circular
imports during DRF initialisation).
"""
from __future__ import annotations

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication


def failure_code(exc: AuthenticationFailed):
    """Error code of ``exc``; simplejwt wraps it in a ``{'detail', 'code'}`` dict."""
    codes = exc.get_codes()
    if isinstance(codes, dict):
        return codes.get('code')
    return codes


class BearerJWTAuthentication(JWTAuthentication):
    """Authenticate ``Authorization: Bearer <access token>`` headers.

    Users are resolved by the ``sub`` claim (username).  A token whose
    subject no longer exists is rejected with a 401 rather than treated
    as anonymous.
    """

    www_authenticate_realm = 'mhoms'

    def get_user(self, validated_token):
        try:
            return super().get_user(validated_token)
        except AuthenticationFailed as e:
            if failure_code(e) == 'user_not_found':
                raise AuthenticationFailed('User not found', code='user_not_found') from e
            raise


class OptionalBearerJWTAuthentication(BearerJWTAuthentication):
    """Like :class:`BearerJWTAuthentication`, but a stale or broken header
    leaves the request anonymous instead of failing it.

    Used on the login/register/refresh routes, where callers often still
    carry an expired access token.  ``authenticate_header`` is inherited so
    credential errors raised by those views stay 401.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None
