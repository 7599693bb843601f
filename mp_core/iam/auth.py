# mp_core/iam/auth.py
from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication

from mp_core.iam.scope import apply_scope_from_headers


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Access token from `Authorization: Bearer` (preferred) or the HttpOnly
    cookie set by auth/login. Once the doctor is known the scope headers
    are checked against their memberships.
    """

    def _raw_token(self, request):
        header = self.get_header(request)
        if header is not None:
            return self.get_raw_token(header)
        return request.COOKIES.get(settings.SIMPLE_JWT.get("AUTH_COOKIE", "mp_access"))

    def authenticate(self, request):
        raw_token = self._raw_token(request)
        if not raw_token:
            return None

        token = self.get_validated_token(raw_token)
        user = self.get_user(token)
        apply_scope_from_headers(request, user=user)
        return user, token
