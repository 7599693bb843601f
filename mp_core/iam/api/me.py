# mp_core/iam/api/me.py
from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from mp_core.common.scope import resolve_scope
from mp_core.iam.api.schema_serializers import (
    MeResponseSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    ScopeSwitchRequestSerializer,
    ScopeSwitchResponseSerializer,
)
from mp_core.iam.models import UserProfile
from mp_core.iam.scope import assert_user_membership, parse_scope_body
from mp_core.iam.services.membership import list_user_facilities
from mp_core.iam.services.profile import ProfileService

logger = logging.getLogger(__name__)


def _user_payload(user) -> dict:
    return {
        "id": user.id,
        "username": getattr(user, "username", None),
        "email": getattr(user, "email", None),
        "first_name": getattr(user, "first_name", ""),
        "last_name": getattr(user, "last_name", ""),
        "is_superuser": bool(getattr(user, "is_superuser", False)),
    }


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["Auth"])
    def get(self, request):
        """
        User, doctor profile and memberships. Scope headers are optional;
        when sent they must be valid and the user must be a member.
        """
        scope = resolve_scope(request)
        if scope is not None:
            assert_user_membership(request.user, tenant_id=scope.tenant_id, facility_id=scope.facility_id)

        profile = UserProfile.objects.filter(user_id=request.user.id).first()

        return Response(
            {
                "user": _user_payload(request.user),
                "profile": ProfileSerializer(profile).data if profile else None,
                "memberships": list_user_facilities(request.user.id),
                "active_scope": (
                    {"tenant_id": str(scope.tenant_id), "facility_id": str(scope.facility_id)} if scope else None
                ),
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=ScopeSwitchRequestSerializer, responses={200: ScopeSwitchResponseSerializer}, tags=["Auth"])
    def post(self, request):
        """
        Switch the active scope. The client sends the returned ids as
        X-Tenant-Id / X-Facility-Id on subsequent requests.
        """
        tenant_id, facility_id = parse_scope_body(request.data)
        assert_user_membership(request.user, tenant_id=tenant_id, facility_id=facility_id)

        logger.info("Scope switched user=%s tenant=%s facility=%s", request.user.id, tenant_id, facility_id)
        return Response(
            {
                "message": "Scope switched successfully",
                "active_scope": {"tenant_id": str(tenant_id), "facility_id": str(facility_id)},
            },
            status=status.HTTP_200_OK,
        )


class MeProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ProfileUpdateSerializer, responses={200: ProfileSerializer}, tags=["Auth"])
    def patch(self, request):
        ser = ProfileUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            profile = ProfileService.update(user=request.user, data=ser.validated_data)
        except UserProfile.DoesNotExist:
            raise NotFound("Profile not found.")

        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)
