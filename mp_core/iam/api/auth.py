from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from mp_core.iam.api.schema_serializers import (
    DetailResponseSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
)
from mp_core.iam.auth import CookieOrHeaderJWTAuthentication
from mp_core.iam.services.membership import default_scope

logger = logging.getLogger(__name__)


def _cookie_specs() -> list[tuple[str, timedelta]]:
    """(cookie name, max age) for the access and refresh tokens, in that order."""
    jwt = settings.SIMPLE_JWT
    return [
        (jwt.get("AUTH_COOKIE", "mp_access"), jwt.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=15))),
        (jwt.get("AUTH_COOKIE_REFRESH", "mp_refresh"), jwt.get("REFRESH_TOKEN_LIFETIME", timedelta(days=7))),
    ]


def _store_tokens(response: Response, *tokens: str) -> Response:
    jwt = settings.SIMPLE_JWT
    for (name, lifetime), value in zip(_cookie_specs(), tokens):
        response.set_cookie(
            name,
            value,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=bool(jwt.get("AUTH_COOKIE_SECURE", False)),
            samesite=jwt.get("AUTH_COOKIE_SAMESITE", "Lax"),
            path="/",
        )
    return response


class PublicAuthView(APIView):
    """
    Credential endpoints skip cookie authentication so a stale token never
    blocks a fresh login. Bad credentials still answer 401, not 403.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        return CookieOrHeaderJWTAuthentication().authenticate_header(request)


class LoginView(PublicAuthView):
    """
    Username/password login. Tokens travel in HttpOnly cookies only; the body
    carries the scope the client should start with.
    """

    @extend_schema(request=LoginRequestSerializer, responses={200: LoginResponseSerializer}, tags=["Auth"])
    def post(self, request):
        ser = TokenObtainPairSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        body = {"detail": "login ok", "default_scope": default_scope(ser.user.id)}
        logger.info("Login user=%s", ser.user.id)
        return _store_tokens(
            Response(body, status=status.HTTP_200_OK),
            ser.validated_data["access"],
            ser.validated_data["refresh"],
        )


class RefreshView(PublicAuthView):
    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["Auth"])
    def post(self, request):
        cookie_name = _cookie_specs()[1][0]
        refresh = request.COOKIES.get(cookie_name) or request.data.get("refresh")

        ser = TokenRefreshSerializer(data={"refresh": refresh})
        ser.is_valid(raise_exception=True)

        # rotation is optional in SIMPLE_JWT; keep the old refresh token otherwise
        return _store_tokens(
            Response({"detail": "refreshed"}, status=status.HTTP_200_OK),
            ser.validated_data["access"],
            ser.validated_data.get("refresh", refresh),
        )


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["Auth"])
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        for name, _ in _cookie_specs():
            res.delete_cookie(name, path="/")
        logger.info("Logout user=%s", request.user.id)
        return res
